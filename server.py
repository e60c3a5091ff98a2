"""
MCP Server for pipe flow calculations.

This server provides pipe pressure loss and flowrate tools built on the
Churchill (1977) friction factor correlation, with unit-checked inputs and
fluid property lookups.
"""

import logging
from mcp.server.fastmcp import FastMCP

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("pipeflow-mcp")

# Initialize the MCP server
mcp = FastMCP("pipeflow-calculator")

from tools.friction_factor import calculate_friction_factor
from tools.pipe_pressure_loss import calculate_pipe_pressure_loss, pipe_pressure_loss_sweep
from tools.pipe_properties import get_pipe_properties
from tools.fluid_properties import get_fluid_properties, list_available_fluids

# Register tools with MCP
mcp.tool()(calculate_friction_factor)
mcp.tool()(calculate_pipe_pressure_loss)
mcp.tool()(pipe_pressure_loss_sweep)
mcp.tool()(get_pipe_properties)
mcp.tool()(get_fluid_properties)
mcp.tool()(list_available_fluids)


def main():
    """Console entry point: run the MCP server over stdio."""
    logger.info("Starting pipeflow MCP server...")
    logger.info("Registered tools:")
    logger.info("  - calculate_friction_factor: Churchill Darcy/Fanning friction factor")
    logger.info("  - calculate_pipe_pressure_loss: Pressure loss from flow, or flow from pressure loss")
    logger.info("  - pipe_pressure_loss_sweep: Parameter sweeps of the pressure loss calculation")
    logger.info("  - get_pipe_properties: NPS/schedule dimensions and material roughness")
    logger.info("  - get_fluid_properties / list_available_fluids: CoolProp and Dowtherm A properties")
    mcp.run()


if __name__ == "__main__":
    main()
