"""
Forward model: pressure loss of a pipe at a known flowrate (Darcy-Weisbach).

    dP = (f_darcy L/D + K) rho v^2 / 2

Optionally extended to the full pressure change along an inclined pipe with
an internal pressure source (e.g. a pump):

    pressure_change = -dP + hydrostatic + source
"""

import logging
import math

from .churchill import darcy_friction_factor
from .units import PRESSURE, Q_, as_quantity, ureg
from .validation import validate_fluid, validate_geometry

logger = logging.getLogger("pipeflow-mcp.pressure_loss")

G_GRAVITY = Q_(9.81, ureg.meter / ureg.second ** 2)


def pressure_loss(flow, geometry, fluid, friction_factor=darcy_friction_factor):
    """Frictional plus form pressure loss of ``flow`` through ``geometry``.

    Args:
        flow: FlowState (velocity, volumetric or mass flowrate)
        geometry: PipeGeometry
        fluid: FluidProperties
        friction_factor: Callable ``(Re, eps/D) -> f_darcy``; defaults to the
            Churchill correlation

    Returns:
        Pressure loss in Pa (non-negative)

    Raises:
        NonPhysicalInput: Invalid geometry or fluid properties
        ZeroReynoldsNumber / NegativeReynoldsNumber: Zero or reversed flow,
            propagated from the friction factor
    """
    validate_geometry(geometry, "pressure_loss")
    validate_fluid(fluid, "pressure_loss")

    re = flow.reynolds_number(geometry, fluid)
    f = friction_factor(re, geometry.relative_roughness)

    velocity = flow.velocity(geometry, fluid).m_as(ureg.meter / ureg.second)
    density = fluid.density.m_as(ureg.kilogram / ureg.meter ** 3)
    loss_coefficient = f * geometry.length_to_diameter + geometry.form_loss_k
    return Q_(loss_coefficient * density * velocity ** 2 / 2.0, ureg.pascal)


def hydrostatic_pressure_change(geometry, fluid):
    """Pressure gained by the flow from elevation change, -rho g L sin(theta)."""
    validate_geometry(geometry, "hydrostatic_pressure_change")
    validate_fluid(fluid, "hydrostatic_pressure_change")
    delta_h = geometry.length * math.sin(geometry.incline_angle.m_as(ureg.radian))
    return (-fluid.density * G_GRAVITY * delta_h).to(ureg.pascal)


def pressure_change(flow, geometry, fluid, source_pressure=None,
                    friction_factor=darcy_friction_factor):
    """Outlet minus inlet pressure: -loss + hydrostatic + source."""
    source = Q_(0.0, ureg.pascal) if source_pressure is None \
        else as_quantity(source_pressure, PRESSURE, "source_pressure")
    loss = pressure_loss(flow, geometry, fluid, friction_factor=friction_factor)
    return (-loss + hydrostatic_pressure_change(geometry, fluid) + source).to(ureg.pascal)
