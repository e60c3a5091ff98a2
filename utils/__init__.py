"""Shared utilities for the pipeflow MCP tools."""
