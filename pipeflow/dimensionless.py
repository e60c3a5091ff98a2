"""
Conversions between dimensioned pipe flow quantities and dimensionless groups.

    Re   = rho v D / mu = m_dot D / (A mu)
    Be_D = dP rho D^2 / mu^2 = 0.5 (f L/D + K) Re^2
"""

import numpy as np

from .churchill import darcy_friction_factor, fldk
from .models import FlowState
from .units import PRESSURE, Q_, as_quantity, ureg
from .validation import validate_fluid, validate_geometry, validate_reynolds_number


def bejan_number(pressure, geometry, fluid) -> float:
    """Bejan number Be_D = dP rho D^2 / mu^2 of a pressure difference."""
    validate_geometry(geometry, "bejan_number")
    validate_fluid(fluid, "bejan_number")
    pressure = as_quantity(pressure, PRESSURE, "pressure")
    be = pressure * fluid.density * geometry.diameter ** 2 / fluid.viscosity ** 2
    return be.m_as(ureg.dimensionless)


def pressure_from_bejan(bejan, geometry, fluid):
    """Invert :func:`bejan_number` to a pressure in pascals."""
    validate_geometry(geometry, "pressure_from_bejan")
    validate_fluid(fluid, "pressure_from_bejan")
    pressure = Q_(float(bejan), ureg.dimensionless) * fluid.viscosity ** 2 \
        / (geometry.diameter ** 2 * fluid.density)
    return pressure.to(ureg.pascal)


def bejan_from_reynolds(reynolds_number, roughness_ratio, length_to_diameter,
                        form_loss_k=0.0, friction_factor=darcy_friction_factor):
    """Be_D = 0.5 (f L/D + K) Re^2 for forward flow."""
    re = validate_reynolds_number(reynolds_number, "bejan_from_reynolds")
    loss_coefficient = fldk(re, roughness_ratio, length_to_diameter, form_loss_k,
                            friction_factor=friction_factor)
    be = 0.5 * np.asarray(loss_coefficient) * np.square(re)
    return float(be) if np.ndim(be) == 0 else be


def flow_from_reynolds(reynolds_number, geometry, fluid) -> FlowState:
    """Mass flowrate with the given Reynolds number, m_dot = mu A Re / D."""
    validate_geometry(geometry, "flow_from_reynolds")
    validate_fluid(fluid, "flow_from_reynolds")
    mass_rate = fluid.viscosity * geometry.area * float(reynolds_number) / geometry.diameter
    return FlowState(mass_rate.to(ureg.kilogram / ureg.second))
