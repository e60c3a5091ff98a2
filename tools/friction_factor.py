"""
Friction factor calculation tool.

Evaluates the Churchill correlation directly from a Reynolds number and
relative roughness, or from a pipe and flow description.
"""

import json
import logging
from typing import Optional

import pint

from pipeflow.churchill import darcy_friction_factor, fanning_friction_factor
from pipeflow.errors import PipeFlowError
from pipeflow.models import FlowState
from utils.helpers import flow_regime
from utils.input_resolver import InputResolver
from utils.json_helpers import safe_json_dumps

logger = logging.getLogger("pipeflow-mcp.friction_factor")


def calculate_friction_factor(
    # --- Dimensionless inputs ---
    reynolds_number: Optional[float] = None,     # Reynolds number
    relative_roughness: Optional[float] = None,  # eps/D

    # --- Or a flow through a pipe ---
    flow_rate: Optional[float] = None,           # Flow rate in m³/s
    flow_rate_gpm: Optional[float] = None,       # Flow rate in US GPM
    mass_flow_rate: Optional[float] = None,      # Mass flow rate in kg/s
    velocity: Optional[float] = None,            # Mean velocity in m/s
    pipe_diameter: Optional[float] = None,       # Pipe inner diameter in m
    pipe_diameter_in: Optional[float] = None,    # Pipe inner diameter in inches
    nominal_size_in: Optional[float] = None,     # Nominal pipe size in inches
    schedule: str = "40",                        # Pipe schedule
    pipe_roughness: Optional[float] = None,      # Absolute roughness in m
    material: Optional[str] = None,              # e.g., "Steel", "PVC"
    fluid_density: Optional[float] = None,       # Fluid density in kg/m³
    fluid_viscosity: Optional[float] = None,     # Fluid dynamic viscosity in Pa·s
    fluid_viscosity_cp: Optional[float] = None,  # Fluid dynamic viscosity in centipoise
    fluid_name: Optional[str] = None,            # CoolProp name or "dowtherm_a"
    temperature_c: Optional[float] = None,       # Temperature for property lookup
) -> str:
    """Calculate the Darcy and Fanning friction factors (Churchill 1977).

    Provide either reynolds_number (with optional relative_roughness, default 0)
    or a flow rate, pipe diameter and fluid properties from which the Reynolds
    number and relative roughness are computed.

    Returns:
        JSON with reynolds_number, relative_roughness, darcy_friction_factor,
        fanning_friction_factor, flow_regime and the input resolution log
    """
    resolver = InputResolver("calculate_friction_factor")
    try:
        if reynolds_number is not None:
            re = reynolds_number
            eps = relative_roughness if relative_roughness is not None else 0.0
            resolver.results_log.append("Used provided Reynolds number.")
        else:
            flow_rate_q = resolver.resolve_flow_rate(m3_s=flow_rate, gpm=flow_rate_gpm,
                                                     kg_s=mass_flow_rate, m_s=velocity)
            # Length does not enter the friction factor; a unit length keeps the geometry valid
            geometry, _ = resolver.resolve_pipe_geometry(
                length={"m": 1.0},
                diameter={"m": pipe_diameter, "inch": pipe_diameter_in},
                nominal_size_in=nominal_size_in, schedule=schedule, material=material,
                roughness={"m": pipe_roughness})
            fluid = resolver.resolve_fluid(density_kg_m3=fluid_density, viscosity_pa_s=fluid_viscosity,
                                           viscosity_cp=fluid_viscosity_cp, fluid_name=fluid_name,
                                           temperature_c=temperature_c)
            if resolver.error_log:
                return json.dumps({"errors": resolver.error_log, "log": resolver.results_log})
            re = FlowState(flow_rate_q).reynolds_number(geometry, fluid)
            eps = relative_roughness if relative_roughness is not None else geometry.relative_roughness
            resolver.results_log.append(f"Computed Reynolds number {re:.6g} from flow and pipe.")

        f_darcy = darcy_friction_factor(re, eps)
        f_fanning = fanning_friction_factor(re, eps)
        return safe_json_dumps({
            "reynolds_number": re,
            "relative_roughness": eps,
            "darcy_friction_factor": f_darcy,
            "fanning_friction_factor": f_fanning,
            "laminar_64_over_re": 64.0 / re,
            "flow_regime": flow_regime(re),
            "correlation": "Churchill (1977)",
            "log": resolver.results_log,
        })

    except (PipeFlowError, pint.DimensionalityError, ValueError, TypeError) as e:
        logger.error(f"Error in calculate_friction_factor: {e}", exc_info=True)
        return json.dumps({
            "error": str(e),
            "error_type": type(e).__name__,
            "log": resolver.results_log,
        })
