"""
Shared input resolution system using Pydantic models.

Tools accept SI or imperial keyword inputs; these models pick the first one
given and return it as a pint quantity, so unit conversion happens once, in
the registry, and never by hand-written factors.
"""

import math
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator
import logging

import fluids.piping

from pipeflow.models import FluidProperties, PipeGeometry
from pipeflow.units import Q_, ureg
from utils.constants import DEFAULT_SCHEDULE
from utils.helpers import get_pipe_roughness

logger = logging.getLogger("pipeflow-mcp.input_resolver")

# Field name -> unit, in order of preference
FLOW_RATE_UNITS = {
    "m3_s": ureg.meter ** 3 / ureg.second,
    "kg_s": ureg.kilogram / ureg.second,
    "m_s": ureg.meter / ureg.second,
    "l_min": ureg.liter / ureg.minute,
    "gpm": ureg.gallon / ureg.minute,
    "ft_s": ureg.foot / ureg.second,
}
PRESSURE_UNITS = {
    "pa": ureg.pascal,
    "kpa": ureg.kilopascal,
    "bar": ureg.bar,
    "psi": ureg.psi,
}
LENGTH_UNITS = {
    "m": ureg.meter,
    "mm": ureg.millimeter,
    "inch": ureg.inch,
    "ft": ureg.foot,
}


class _FiniteInput(BaseModel):
    """Base model rejecting nan/inf in any numeric field."""

    @field_validator("*")
    @classmethod
    def check_finite(cls, v):
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError(f"value must be finite, got {v}")
        return v

    def _first(self, units: Dict[str, Any]):
        """First non-None field as (field name, quantity)."""
        for name, unit in units.items():
            value = getattr(self, name)
            if value is not None:
                return name, Q_(value, unit)
        return None, None


class FlowRateInput(_FiniteInput):
    """Standardized flow rate input: a volumetric rate, mass rate or velocity."""

    # SI units (preferred)
    m3_s: Optional[float] = Field(None, description="Flow rate in m³/s")
    kg_s: Optional[float] = Field(None, description="Mass flow rate in kg/s")
    m_s: Optional[float] = Field(None, description="Mean velocity in m/s")

    # Other units
    l_min: Optional[float] = Field(None, description="Flow rate in L/min")
    gpm: Optional[float] = Field(None, description="Flow rate in US GPM")
    ft_s: Optional[float] = Field(None, description="Mean velocity in ft/s")

    def get_quantity(self):
        return self._first(FLOW_RATE_UNITS)[1]

    def get_source(self) -> str:
        """Get description of which input was used."""
        name, quantity = self._first(FLOW_RATE_UNITS)
        if name is None:
            return "Not specified"
        return f"{name} -> {quantity:~P}"


class PressureInput(_FiniteInput):
    """Standardized pressure (difference) input."""

    pa: Optional[float] = Field(None, description="Pressure in Pa")
    kpa: Optional[float] = Field(None, description="Pressure in kPa")
    bar: Optional[float] = Field(None, description="Pressure in bar")
    psi: Optional[float] = Field(None, description="Pressure in psi")

    def get_quantity(self):
        return self._first(PRESSURE_UNITS)[1]

    def get_source(self) -> str:
        name, quantity = self._first(PRESSURE_UNITS)
        if name is None:
            return "Not specified"
        if name == "pa":
            return "SI (Pa)"
        return f"{name} -> {quantity.to(ureg.pascal):.1f~P}"


class DimensionInput(_FiniteInput):
    """Standardized length input."""

    m: Optional[float] = Field(None, description="Dimension in meters")
    mm: Optional[float] = Field(None, description="Dimension in millimeters")
    inch: Optional[float] = Field(None, description="Dimension in inches")
    ft: Optional[float] = Field(None, description="Dimension in feet")

    def get_quantity(self):
        return self._first(LENGTH_UNITS)[1]

    def get_source(self) -> str:
        name, quantity = self._first(LENGTH_UNITS)
        if name is None:
            return "Not specified"
        if name == "m":
            return "SI (m)"
        return f"{name} -> {quantity.to(ureg.meter):.6f~P}"


class FluidInput(_FiniteInput):
    """Fluid given directly (density and viscosity) or by name for a lookup."""

    density_kg_m3: Optional[float] = Field(None, description="Density in kg/m³", gt=0)
    viscosity_pa_s: Optional[float] = Field(None, description="Dynamic viscosity in Pa·s", gt=0)
    viscosity_cp: Optional[float] = Field(None, description="Dynamic viscosity in cP", gt=0)

    fluid_name: Optional[str] = Field(None, description="CoolProp fluid name or 'dowtherm_a'")
    temperature_c: Optional[float] = Field(None, description="Temperature in °C for lookup")
    pressure_pa: Optional[float] = Field(None, description="Pressure in Pa for lookup", gt=0)

    def resolve_properties(self) -> Dict[str, Any]:
        """
        Resolve density and viscosity.

        Direct values take precedence over a lookup. Returns dict with
        ``fluid`` (FluidProperties or None), ``source``, ``warnings`` and
        ``errors``.
        """
        from pipeflow.properties import lookup_fluid

        result = {"fluid": None, "source": "Direct input", "warnings": [], "errors": []}
        viscosity = None
        if self.viscosity_pa_s is not None:
            viscosity = Q_(self.viscosity_pa_s, ureg.pascal * ureg.second)
        elif self.viscosity_cp is not None:
            viscosity = Q_(self.viscosity_cp, ureg.centipoise)
        density = None if self.density_kg_m3 is None \
            else Q_(self.density_kg_m3, ureg.kilogram / ureg.meter ** 3)

        if (density is None or viscosity is None) and self.fluid_name:
            if self.temperature_c is None:
                result["errors"].append(f"temperature_c is required to look up '{self.fluid_name}'")
                return result
            pressure = None if self.pressure_pa is None else Q_(self.pressure_pa, ureg.pascal)
            looked_up = lookup_fluid(self.fluid_name, Q_(self.temperature_c, ureg.degC), pressure)
            density = looked_up.density if density is None else density
            viscosity = looked_up.viscosity if viscosity is None else viscosity
            result["source"] = f"Lookup ({self.fluid_name} at {self.temperature_c} °C)"
            if self.density_kg_m3 is not None or self.viscosity_pa_s is not None \
                    or self.viscosity_cp is not None:
                result["warnings"].append("Direct values override looked-up properties")

        if density is None:
            result["errors"].append("Missing fluid density. Provide density_kg_m3 or fluid_name + temperature_c")
        if viscosity is None:
            result["errors"].append("Missing fluid viscosity. Provide viscosity_pa_s, viscosity_cp or fluid_name + temperature_c")
        if not result["errors"]:
            result["fluid"] = FluidProperties(density=density, viscosity=viscosity)
        return result


class InputResolver:
    """
    Centralized input resolution with consistent logging and error handling.

    Collects a human-readable ``results_log`` of how each input was resolved
    and an ``error_log`` of missing inputs, which tools return with their
    results.
    """

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        self.results_log: List[str] = []
        self.error_log: List[str] = []

    def resolve_flow_rate(self, required: bool = True, **kwargs):
        """Resolve a flow rate (volumetric, mass or velocity) to a quantity."""
        flow_input = FlowRateInput(**kwargs)
        result = flow_input.get_quantity()

        if result is not None:
            self.results_log.append(f"Flow rate: {flow_input.get_source()}")
        elif required:
            self.error_log.append("Missing flow rate input")

        return result

    def resolve_pressure(self, name: str, required: bool = True, **kwargs):
        """Resolve a pressure to a quantity with logging."""
        pressure_input = PressureInput(**kwargs)
        result = pressure_input.get_quantity()

        if result is not None:
            self.results_log.append(f"{name}: {pressure_input.get_source()}")
        elif required:
            self.error_log.append(f"Missing {name.lower()} input")

        return result

    def resolve_dimension(self, name: str, required: bool = True, **kwargs):
        """Resolve a length to a quantity with logging."""
        dim_input = DimensionInput(**kwargs)
        result = dim_input.get_quantity()

        if result is not None:
            self.results_log.append(f"{name}: {dim_input.get_source()}")
        elif required:
            self.error_log.append(f"Missing {name.lower()} input")

        return result

    def resolve_fluid(self, **kwargs) -> Optional[FluidProperties]:
        """Resolve fluid properties, directly or through a property lookup."""
        fluid_input = FluidInput(**kwargs)
        result = fluid_input.resolve_properties()

        self.results_log.append(f"Fluid properties source: {result['source']}")
        self.results_log.extend(result["warnings"])
        self.error_log.extend(result["errors"])

        return result["fluid"]

    def resolve_pipe_geometry(self, length: Dict[str, Any], diameter: Dict[str, Any],
                              nominal_size_in: Optional[float] = None,
                              schedule: str = DEFAULT_SCHEDULE,
                              material: Optional[str] = None,
                              roughness: Optional[Dict[str, Any]] = None,
                              form_loss_k: float = 0.0,
                              incline_angle_deg: float = 0.0):
        """Resolve a PipeGeometry from length/diameter inputs or an NPS lookup.

        Returns:
            Tuple of (PipeGeometry or None, pipe_info dict)
        """
        pipe_info: Dict[str, Any] = {}
        pipe_length = self.resolve_dimension("Pipe length", **length)
        pipe_diameter = self.resolve_dimension("Pipe diameter", required=False, **diameter)
        explicit_roughness = self.resolve_dimension("Pipe roughness", required=False, **(roughness or {}))

        if pipe_diameter is None:
            if nominal_size_in is None:
                self.error_log.append("Missing pipe diameter input (diameter or nominal_size_in)")
                return None, pipe_info
            nps, di, do, t = fluids.piping.nearest_pipe(NPS=nominal_size_in, schedule=schedule)
            pipe_diameter = Q_(di, ureg.meter)
            pipe_info = {"NPS_in": nps, "schedule": schedule, "Do_m": do, "t_m": t}
            self.results_log.append(f"Looked up pipe dimensions for NPS {nominal_size_in} Sch {schedule}.")

        pipe_roughness, source = get_pipe_roughness(material, explicit_roughness)
        self.results_log.append(f"Pipe roughness: {source}")
        if pipe_info:
            pipe_info["roughness_used_m"] = pipe_roughness.m_as(ureg.meter)
            pipe_info["roughness_source"] = source

        if pipe_length is None:
            return None, pipe_info
        geometry = PipeGeometry(length=pipe_length, diameter=pipe_diameter,
                                absolute_roughness=pipe_roughness, form_loss_k=form_loss_k,
                                incline_angle=Q_(incline_angle_deg, ureg.degree))
        return geometry, pipe_info

    def get_logs(self) -> Dict[str, List[str]]:
        """Get accumulated logs."""
        return {
            "log": self.results_log.copy(),
            "errors": self.error_log.copy()
        }
