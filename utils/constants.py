"""
Constants used across the pipeflow MCP server.

Unit conversions are handled by pint (``pipeflow.units``); this module only
holds defaults for the tool layer. Solver defaults live in ``pipeflow.solver``.
"""

# Default values for pipe calculations
DEFAULT_ROUGHNESS = 1.5e-5   # Default pipe roughness, m (smooth commercial steel)
DEFAULT_SCHEDULE = "40"      # Default pipe schedule for NPS lookups
DEFAULT_ATMOSPHERIC_PRESSURE = 101325.0  # Default pressure for fluid property lookups, Pa

# Flow regime boundaries (Reynolds number)
RE_LAMINAR_MAX = 2100.0
RE_TURBULENT_MIN = 4000.0

# Sweep limits
SWEEP_MAX_POINTS = 200
