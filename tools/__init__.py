"""
Tools package for pipeflow MCP server.

This package contains the individual calculation tools that are registered with the MCP server.
"""

from .friction_factor import calculate_friction_factor
from .pipe_pressure_loss import calculate_pipe_pressure_loss, pipe_pressure_loss_sweep
from .pipe_properties import get_pipe_properties
from .fluid_properties import get_fluid_properties, list_available_fluids

__all__ = [
    'calculate_friction_factor',
    'calculate_pipe_pressure_loss',
    'pipe_pressure_loss_sweep',
    'get_pipe_properties',
    'get_fluid_properties',
    'list_available_fluids',
]
