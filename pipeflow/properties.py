"""
Fluid property sources.

* Dowtherm A (also sold as Therminol VP-1): linear/power-law correlations
  valid from 20 to 180 degC.
* Any CoolProp fluid at a given temperature and pressure.
"""

import logging

from .errors import PropertyRangeError
from .models import FluidProperties
from .units import PRESSURE, Q_, TEMPERATURE, as_quantity, ureg

logger = logging.getLogger("pipeflow-mcp.properties")

DOWTHERM_A_MIN_C = 20.0
DOWTHERM_A_MAX_C = 180.0
DOWTHERM_A_NAMES = ("dowtherm_a", "dowtherm a", "dowtherm-a", "therminol_vp1",
                    "therminol vp-1", "therminol_vp-1")


def _dowtherm_a_celsius(temperature, operation):
    temperature = as_quantity(temperature, TEMPERATURE, "temperature")
    t_c = temperature.m_as(ureg.degC)
    if t_c < DOWTHERM_A_MIN_C or t_c > DOWTHERM_A_MAX_C:
        raise PropertyRangeError(
            f"Dowtherm A correlation valid for {DOWTHERM_A_MIN_C:g}-{DOWTHERM_A_MAX_C:g} degC, "
            f"got {t_c:g} degC", operation=operation, value=temperature)
    return t_c


def dowtherm_a_density(temperature):
    """rho = 1078 - 0.85 T[degC] kg/m3."""
    t_c = _dowtherm_a_celsius(temperature, "dowtherm_a_density")
    return Q_(1078.0 - 0.85 * t_c, ureg.kilogram / ureg.meter ** 3)


def dowtherm_a_viscosity(temperature):
    """mu = 0.130 / T[degC]^1.072 Pa s."""
    t_c = _dowtherm_a_celsius(temperature, "dowtherm_a_viscosity")
    return Q_(0.130 / t_c ** 1.072, ureg.pascal * ureg.second)


def dowtherm_a_properties(temperature) -> FluidProperties:
    return FluidProperties(density=dowtherm_a_density(temperature),
                           viscosity=dowtherm_a_viscosity(temperature))


def coolprop_properties(fluid_name: str, temperature, pressure=None) -> FluidProperties:
    """Density and viscosity of a CoolProp fluid.

    Args:
        fluid_name: CoolProp fluid name, e.g. "Water"
        temperature: Temperature quantity
        pressure: Pressure quantity (default 1 atm)

    Raises:
        ValueError: Unknown fluid or state outside CoolProp's range
    """
    import CoolProp.CoolProp as CP

    temperature = as_quantity(temperature, TEMPERATURE, "temperature")
    pressure = Q_(1.0, ureg.atm) if pressure is None else as_quantity(pressure, PRESSURE, "pressure")
    t_k = temperature.m_as(ureg.kelvin)
    p_pa = pressure.m_as(ureg.pascal)

    density = CP.PropsSI("D", "T", t_k, "P", p_pa, fluid_name)
    viscosity = CP.PropsSI("V", "T", t_k, "P", p_pa, fluid_name)
    logger.debug("CoolProp %s at %.2f K, %.0f Pa: rho=%.6g, mu=%.6g",
                 fluid_name, t_k, p_pa, density, viscosity)
    return FluidProperties(density=Q_(density, ureg.kilogram / ureg.meter ** 3),
                           viscosity=Q_(viscosity, ureg.pascal * ureg.second))


def lookup_fluid(fluid_name: str, temperature, pressure=None) -> FluidProperties:
    """Dowtherm A by correlation, anything else through CoolProp."""
    if fluid_name.strip().lower() in DOWTHERM_A_NAMES:
        return dowtherm_a_properties(temperature)
    return coolprop_properties(fluid_name, temperature, pressure)
