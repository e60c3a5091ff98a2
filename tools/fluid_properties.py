"""
Fluid properties tools.

This module provides tools to retrieve the density and viscosity used by the
pressure loss calculations, and to list available fluids.
"""

import json
import logging

import pint

from pipeflow.errors import PipeFlowError
from pipeflow.properties import DOWTHERM_A_MAX_C, DOWTHERM_A_MIN_C, lookup_fluid
from pipeflow.units import Q_, ureg
from utils.constants import DEFAULT_ATMOSPHERIC_PRESSURE
from utils.json_helpers import is_valid_number, safe_json_dumps

# Configure logging
logger = logging.getLogger("pipeflow-mcp.fluid_properties")


def get_fluid_properties(
    fluid_name: str,           # CoolProp fluid name (e.g., "Water") or "dowtherm_a"
    temperature_c: float,      # Temperature in degrees Celsius
    pressure_bar: float = DEFAULT_ATMOSPHERIC_PRESSURE / 1e5,  # Pressure in bar
) -> str:
    """Retrieve density and viscosity of a fluid at specified temperature and pressure.

    Dowtherm A (alias therminol_vp1) uses correlations valid from 20 to 180 °C
    and ignores pressure; any other name is looked up in CoolProp.

    Args:
        fluid_name: Name of the fluid
        temperature_c: Temperature in degrees Celsius
        pressure_bar: Pressure in bar (default: 1 atm)

    Returns:
        Density, dynamic and kinematic viscosity
    """
    try:
        fluid = lookup_fluid(fluid_name, Q_(temperature_c, ureg.degC), Q_(pressure_bar, ureg.bar))
        density = fluid.density.m_as(ureg.kilogram / ureg.meter ** 3)
        viscosity = fluid.viscosity.m_as(ureg.pascal * ureg.second)
        if not (is_valid_number(density) and is_valid_number(viscosity)):
            return json.dumps({
                "error": f"Property lookup for '{fluid_name}' returned invalid values",
                "error_type": "PropertyLookupError",
            })

        return safe_json_dumps({
            "fluid_name": fluid_name,
            "temperature_c": temperature_c,
            "pressure_bar": pressure_bar,
            "density_kg_m3": density,
            "dynamic_viscosity_pa_s": viscosity,
            "dynamic_viscosity_cp": fluid.viscosity.m_as(ureg.centipoise),
            "kinematic_viscosity_m2_s": fluid.kinematic_viscosity.m_as(ureg.meter ** 2 / ureg.second),
        })

    except (PipeFlowError, pint.DimensionalityError, ValueError, TypeError) as e:
        logger.error(f"Error in get_fluid_properties: {e}", exc_info=True)
        return json.dumps({
            "error": str(e),
            "error_type": type(e).__name__,
        })


def list_available_fluids() -> str:
    """List fluids accepted by get_fluid_properties.

    Returns:
        CoolProp fluid names plus the built-in Dowtherm A correlation
    """
    try:
        import CoolProp.CoolProp as CP
        coolprop_fluids = sorted(CP.get_global_param_string("FluidsList").split(","))
        return json.dumps({
            "builtin": [{
                "name": "dowtherm_a",
                "valid_range_c": [DOWTHERM_A_MIN_C, DOWTHERM_A_MAX_C],
            }],
            "coolprop": coolprop_fluids,
            "count": len(coolprop_fluids) + 1,
        })
    except (ValueError, RuntimeError) as e:
        logger.error(f"Error listing fluids: {e}", exc_info=True)
        return json.dumps({"error": f"Could not retrieve fluid list: {e}"})
