"""
Value types for pipe flow calculations.

Entities are frozen dataclasses holding pint quantities. They check
dimensionality on construction; sign and magnitude checks are made by
``pipeflow.validation`` at the entry of each calculation.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from .units import (
    AREA,
    DENSITY,
    LENGTH,
    MASS_RATE,
    VELOCITY,
    VISCOSITY,
    VOLUMETRIC_RATE,
    Q_,
    as_quantity,
    ureg,
)

logger = logging.getLogger("pipeflow-mcp.models")


def _zero_length():
    return Q_(0.0, ureg.meter)


def _zero_angle():
    return Q_(0.0, ureg.degree)


@dataclass(frozen=True)
class PipeGeometry:
    """A straight pipe run.

    ``diameter`` is the hydraulic diameter. ``cross_sectional_area`` defaults
    to the circular area pi*D^2/4. A positive ``incline_angle`` means the flow
    rises along the pipe.
    """

    length: Any
    diameter: Any
    absolute_roughness: Any = field(default_factory=_zero_length)
    form_loss_k: float = 0.0
    incline_angle: Any = field(default_factory=_zero_angle)
    cross_sectional_area: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, "length", as_quantity(self.length, LENGTH, "length"))
        object.__setattr__(self, "diameter", as_quantity(self.diameter, LENGTH, "diameter"))
        object.__setattr__(self, "absolute_roughness",
                           as_quantity(self.absolute_roughness, LENGTH, "absolute_roughness"))
        object.__setattr__(self, "incline_angle",
                           as_quantity(self.incline_angle, None, "incline_angle"))
        if self.cross_sectional_area is not None:
            object.__setattr__(self, "cross_sectional_area",
                               as_quantity(self.cross_sectional_area, AREA, "cross_sectional_area"))

    @property
    def area(self):
        if self.cross_sectional_area is not None:
            return self.cross_sectional_area
        return (math.pi / 4.0 * self.diameter ** 2).to(ureg.meter ** 2)

    @property
    def relative_roughness(self) -> float:
        return (self.absolute_roughness / self.diameter).m_as(ureg.dimensionless)

    @property
    def length_to_diameter(self) -> float:
        return (self.length / self.diameter).m_as(ureg.dimensionless)

    @classmethod
    def from_nominal_size(cls, nominal_size_in: float, length, schedule: str = "40",
                          material: Optional[str] = None, absolute_roughness=None,
                          **kwargs) -> "PipeGeometry":
        """Build a geometry from a nominal pipe size and schedule.

        The inner diameter comes from ``fluids.piping.nearest_pipe``. Roughness
        is the explicit ``absolute_roughness`` if given, else the material
        table value, else the default roughness.
        """
        import fluids.piping
        from utils.helpers import get_pipe_roughness

        nps, di, do, t = fluids.piping.nearest_pipe(NPS=nominal_size_in, schedule=schedule)
        logger.debug("NPS %s sch %s -> Di=%.6f m", nps, schedule, di)
        if absolute_roughness is None:
            absolute_roughness, source = get_pipe_roughness(material)
            logger.debug("Roughness source: %s", source)
        return cls(length=length, diameter=Q_(di, ureg.meter),
                   absolute_roughness=absolute_roughness, **kwargs)


@dataclass(frozen=True)
class FluidProperties:
    """Density and dynamic viscosity of an incompressible fluid."""

    density: Any
    viscosity: Any

    def __post_init__(self):
        object.__setattr__(self, "density", as_quantity(self.density, DENSITY, "density"))
        object.__setattr__(self, "viscosity", as_quantity(self.viscosity, VISCOSITY, "viscosity"))

    @property
    def kinematic_viscosity(self):
        return (self.viscosity / self.density).to(ureg.meter ** 2 / ureg.second)


@dataclass(frozen=True)
class FlowState:
    """A flowrate given as a velocity, a volumetric rate or a mass rate.

    Only the flowrate is stored. The other representations and the Reynolds
    number are recomputed from the geometry and fluid on every call.
    """

    flowrate: Any

    def __post_init__(self):
        flowrate = self.flowrate
        if isinstance(flowrate, str):
            flowrate = Q_(flowrate)
        if not isinstance(flowrate, ureg.Quantity):
            raise TypeError(f"flowrate must be a dimensioned quantity, got {flowrate!r}")
        if not any(flowrate.check(dim) for dim in (VELOCITY, VOLUMETRIC_RATE, MASS_RATE)):
            # reuse the as_quantity error for a consistent message
            as_quantity(flowrate, MASS_RATE, "flowrate")
        object.__setattr__(self, "flowrate", flowrate)

    @property
    def kind(self) -> str:
        if self.flowrate.check(VELOCITY):
            return "velocity"
        if self.flowrate.check(VOLUMETRIC_RATE):
            return "volumetric"
        return "mass"

    def velocity(self, geometry: PipeGeometry, fluid: FluidProperties):
        kind = self.kind
        if kind == "velocity":
            v = self.flowrate
        elif kind == "volumetric":
            v = self.flowrate / geometry.area
        else:
            v = self.flowrate / (fluid.density * geometry.area)
        return v.to(ureg.meter / ureg.second)

    def volumetric_flowrate(self, geometry: PipeGeometry, fluid: FluidProperties):
        return (self.velocity(geometry, fluid) * geometry.area).to(ureg.meter ** 3 / ureg.second)

    def mass_flowrate(self, geometry: PipeGeometry, fluid: FluidProperties):
        return (self.volumetric_flowrate(geometry, fluid) * fluid.density).to(
            ureg.kilogram / ureg.second)

    def reynolds_number(self, geometry: PipeGeometry, fluid: FluidProperties) -> float:
        """Re = rho v D / mu."""
        re = fluid.density * self.velocity(geometry, fluid) * geometry.diameter / fluid.viscosity
        return re.m_as(ureg.dimensionless)
