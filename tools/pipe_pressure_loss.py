"""
Pipe pressure loss calculation tool.

Calculates the pressure loss of a known flow through a pipe, or solves for the
flow that produces a given pressure loss.
"""

import json
import logging
from typing import Optional

import numpy as np
import pint

from pipeflow.churchill import darcy_friction_factor
from pipeflow.dimensionless import bejan_number
from pipeflow.errors import PipeFlowError
from pipeflow.models import FlowState
from pipeflow.pressure_loss import G_GRAVITY, hydrostatic_pressure_change, pressure_loss
from pipeflow.root_finding import bisection, brent
from pipeflow.solver import DEFAULT_MAX_ITERATIONS, DEFAULT_RELATIVE_TOLERANCE, solve_flowrate
from pipeflow.units import Q_, ureg
from utils.constants import DEFAULT_SCHEDULE, SWEEP_MAX_POINTS
from utils.helpers import flow_regime
from utils.input_resolver import InputResolver
from utils.json_helpers import safe_json_dumps

logger = logging.getLogger("pipeflow-mcp.pipe_pressure_loss")

ROOT_FINDERS = {"bisection": bisection, "brent": brent}


def _flow_summary(flow, geometry, fluid):
    """Forward-model results for a resolved flow."""
    re = flow.reynolds_number(geometry, fluid)
    f = darcy_friction_factor(re, geometry.relative_roughness)
    dp = pressure_loss(flow, geometry, fluid)
    hydrostatic = hydrostatic_pressure_change(geometry, fluid)
    dp_pa = dp.m_as(ureg.pascal)
    head_loss = (dp / (fluid.density * G_GRAVITY)).to(ureg.meter)
    return {
        "flow_rate_m3s": flow.volumetric_flowrate(geometry, fluid).m_as(ureg.meter ** 3 / ureg.second),
        "flow_rate_gpm": flow.volumetric_flowrate(geometry, fluid).m_as(ureg.gallon / ureg.minute),
        "mass_flow_rate_kg_s": flow.mass_flowrate(geometry, fluid).m_as(ureg.kilogram / ureg.second),
        "flow_velocity_m_s": flow.velocity(geometry, fluid).m_as(ureg.meter / ureg.second),
        "pipe_diameter_m": geometry.diameter.m_as(ureg.meter),
        "pipe_length_m": geometry.length.m_as(ureg.meter),
        "relative_roughness": geometry.relative_roughness,
        "form_loss_k": geometry.form_loss_k,
        "reynolds_number": re,
        "flow_regime": flow_regime(re),
        "friction_factor": f,
        "fldk": f * geometry.length_to_diameter + geometry.form_loss_k,
        "pressure_loss_pa": dp_pa,
        "pressure_loss_psi": dp.m_as(ureg.psi),
        "head_loss_m": head_loss.m_as(ureg.meter),
        "bejan_number": bejan_number(dp, geometry, fluid),
        "hydrostatic_pressure_change_pa": hydrostatic.m_as(ureg.pascal),
    }


def calculate_pipe_pressure_loss(
    # --- Flow (give one to calculate the pressure loss) ---
    flow_rate: Optional[float] = None,           # Flow rate in m³/s
    flow_rate_gpm: Optional[float] = None,       # Flow rate in US GPM
    mass_flow_rate: Optional[float] = None,      # Mass flow rate in kg/s
    velocity: Optional[float] = None,            # Mean velocity in m/s

    # --- Pressure loss (give one to solve for the flow) ---
    pressure_loss_pa: Optional[float] = None,    # Pressure loss in Pa
    pressure_loss_psi: Optional[float] = None,   # Pressure loss in psi
    pressure_loss_bar: Optional[float] = None,   # Pressure loss in bar

    # --- Pipe ---
    pipe_length: Optional[float] = None,         # Pipe length in m
    pipe_length_ft: Optional[float] = None,      # Pipe length in feet
    pipe_diameter: Optional[float] = None,       # Pipe inner diameter in m
    pipe_diameter_in: Optional[float] = None,    # Pipe inner diameter in inches
    nominal_size_in: Optional[float] = None,     # Nominal pipe size in inches
    schedule: str = DEFAULT_SCHEDULE,            # Pipe schedule
    pipe_roughness: Optional[float] = None,      # Absolute roughness in m
    material: Optional[str] = None,              # e.g., "Steel", "PVC"
    form_loss_k: float = 0.0,                    # Total form loss coefficient of fittings
    incline_angle_deg: float = 0.0,              # Pipe incline, positive for upward flow
    source_pressure_pa: float = 0.0,             # Pressure added inside the pipe (e.g. a pump)

    # --- Fluid ---
    fluid_density: Optional[float] = None,       # Fluid density in kg/m³
    fluid_viscosity: Optional[float] = None,     # Fluid dynamic viscosity in Pa·s
    fluid_viscosity_cp: Optional[float] = None,  # Fluid dynamic viscosity in centipoise
    fluid_name: Optional[str] = None,            # CoolProp name or "dowtherm_a"
    temperature_c: Optional[float] = None,       # Temperature for property lookup
    pressure_pa: Optional[float] = None,         # Pressure for property lookup

    # --- Solver (flow from pressure loss) ---
    method: str = "bisection",                   # "bisection" or "brent"
    tolerance_pa: Optional[float] = None,        # Absolute tolerance in Pa
    relative_tolerance: float = DEFAULT_RELATIVE_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> str:
    """Calculate pipe pressure loss from a flow, or the flow from a pressure loss.

    Requirements:
    - Exactly one of a flow (flow_rate, flow_rate_gpm, mass_flow_rate, velocity)
      or a pressure loss (pressure_loss_pa, pressure_loss_psi, pressure_loss_bar)
    - pipe_length or pipe_length_ft
    - pipe_diameter, pipe_diameter_in, or nominal_size_in with schedule
    - (fluid_density AND a viscosity) OR (fluid_name AND temperature_c)
    - Roughness is optional: pipe_roughness, material lookup, or default

    The friction factor is the Churchill (1977) correlation. When solving for
    flow the search spans Reynolds numbers 1e-6 to 1e12 and the result's
    pressure loss is within the requested tolerance of the target.

    Returns:
        JSON with flow, Reynolds number, friction factor, pressure loss, head
        loss, Bejan number and the pressure change including the hydrostatic
        and source terms
    """
    resolver = InputResolver("calculate_pipe_pressure_loss")
    try:
        flow_q = resolver.resolve_flow_rate(required=False, m3_s=flow_rate, gpm=flow_rate_gpm,
                                            kg_s=mass_flow_rate, m_s=velocity)
        target = resolver.resolve_pressure("Pressure loss", required=False, pa=pressure_loss_pa,
                                           psi=pressure_loss_psi, bar=pressure_loss_bar)
        if (flow_q is None) == (target is None):
            resolver.error_log.append("Specify exactly one of a flow rate or a pressure loss.")

        geometry, pipe_info = resolver.resolve_pipe_geometry(
            length={"m": pipe_length, "ft": pipe_length_ft},
            diameter={"m": pipe_diameter, "inch": pipe_diameter_in},
            nominal_size_in=nominal_size_in, schedule=schedule, material=material,
            roughness={"m": pipe_roughness}, form_loss_k=form_loss_k,
            incline_angle_deg=incline_angle_deg)
        fluid = resolver.resolve_fluid(density_kg_m3=fluid_density, viscosity_pa_s=fluid_viscosity,
                                       viscosity_cp=fluid_viscosity_cp, fluid_name=fluid_name,
                                       temperature_c=temperature_c, pressure_pa=pressure_pa)
        if method not in ROOT_FINDERS:
            resolver.error_log.append(f"Unknown method '{method}'. Use one of {sorted(ROOT_FINDERS)}.")

        if resolver.error_log:
            return json.dumps({"errors": resolver.error_log, "log": resolver.results_log})

        solved_variable = None
        if flow_q is not None:
            flow = FlowState(flow_q)
        else:
            tolerance = Q_(tolerance_pa, ureg.pascal) if tolerance_pa is not None else relative_tolerance
            flow = solve_flowrate(target, geometry, fluid, tolerance=tolerance,
                                  max_iterations=max_iterations, root_finder=ROOT_FINDERS[method])
            solved_variable = "flow_rate"
            resolver.results_log.append(
                f"Solved flow for {target:~P} with {method}: {flow.flowrate:.6g~P}")

        if solved_variable and flow.flowrate.magnitude == 0:
            # Zero target; the forward model is undefined at Re = 0
            result = {"flow_rate_m3s": 0.0, "mass_flow_rate_kg_s": 0.0, "flow_velocity_m_s": 0.0,
                      "pressure_loss_pa": 0.0}
        else:
            result = _flow_summary(flow, geometry, fluid)
        source = Q_(source_pressure_pa, ureg.pascal)
        change = -Q_(result["pressure_loss_pa"], ureg.pascal) \
            + hydrostatic_pressure_change(geometry, fluid) + source
        result["pressure_change_pa"] = change.m_as(ureg.pascal)
        result["solved_variable"] = solved_variable
        if pipe_info:
            result["pipe_details"] = pipe_info
        result["inputs_resolved"] = resolver.results_log
        return safe_json_dumps(result)

    except (PipeFlowError, pint.DimensionalityError, ValueError, TypeError) as e:
        logger.error(f"Error in calculate_pipe_pressure_loss: {e}", exc_info=True)
        payload = {
            "error": str(e),
            "error_type": type(e).__name__,
            "log": resolver.results_log,
        }
        residuals = getattr(e, "residuals", None)
        if residuals is not None:
            payload["bracket_residuals_pa"] = list(residuals)
        bracket = getattr(e, "bracket", None)
        if bracket is not None:
            payload["last_bracket"] = [str(end) for end in bracket]
        return safe_json_dumps(payload)


SWEEP_VARIABLES = (
    "flow_rate", "flow_rate_gpm", "mass_flow_rate", "velocity",
    "pressure_loss_pa", "pressure_loss_psi", "pressure_loss_bar",
    "pipe_length", "pipe_diameter", "form_loss_k", "incline_angle_deg", "temperature_c",
)


def pipe_pressure_loss_sweep(
    variable: str,
    start: float,
    stop: float,
    n: int,
    # Base calculation parameters
    flow_rate: Optional[float] = None,
    flow_rate_gpm: Optional[float] = None,
    mass_flow_rate: Optional[float] = None,
    velocity: Optional[float] = None,
    pressure_loss_pa: Optional[float] = None,
    pressure_loss_psi: Optional[float] = None,
    pressure_loss_bar: Optional[float] = None,
    pipe_length: Optional[float] = None,
    pipe_length_ft: Optional[float] = None,
    pipe_diameter: Optional[float] = None,
    pipe_diameter_in: Optional[float] = None,
    nominal_size_in: Optional[float] = None,
    schedule: str = DEFAULT_SCHEDULE,
    pipe_roughness: Optional[float] = None,
    material: Optional[str] = None,
    form_loss_k: float = 0.0,
    incline_angle_deg: float = 0.0,
    source_pressure_pa: float = 0.0,
    fluid_density: Optional[float] = None,
    fluid_viscosity: Optional[float] = None,
    fluid_viscosity_cp: Optional[float] = None,
    fluid_name: Optional[str] = None,
    temperature_c: Optional[float] = None,
    pressure_pa: Optional[float] = None,
    method: str = "bisection",
) -> str:
    """Parameter sweep for pipe pressure loss analysis.

    Sweeps one variable of calculate_pipe_pressure_loss over
    np.linspace(start, stop, n) while keeping the others constant. Sweeping a
    pressure loss solves for the flow at each point.

    Args:
        variable: Variable to sweep (see SWEEP_VARIABLES)
        start: Start value for sweep
        stop: Stop value for sweep
        n: Number of points in sweep
        **other_params: All other parameters from calculate_pipe_pressure_loss

    Returns:
        JSON string with sweep results as list of dictionaries
    """
    if variable not in SWEEP_VARIABLES:
        return json.dumps({"error": f"Cannot sweep '{variable}'. Choose from {list(SWEEP_VARIABLES)}."})
    if not 1 <= n <= SWEEP_MAX_POINTS:
        return json.dumps({"error": f"n must be between 1 and {SWEEP_MAX_POINTS}, got {n}"})

    base_kwargs = {
        'flow_rate': flow_rate,
        'flow_rate_gpm': flow_rate_gpm,
        'mass_flow_rate': mass_flow_rate,
        'velocity': velocity,
        'pressure_loss_pa': pressure_loss_pa,
        'pressure_loss_psi': pressure_loss_psi,
        'pressure_loss_bar': pressure_loss_bar,
        'pipe_length': pipe_length,
        'pipe_length_ft': pipe_length_ft,
        'pipe_diameter': pipe_diameter,
        'pipe_diameter_in': pipe_diameter_in,
        'nominal_size_in': nominal_size_in,
        'schedule': schedule,
        'pipe_roughness': pipe_roughness,
        'material': material,
        'form_loss_k': form_loss_k,
        'incline_angle_deg': incline_angle_deg,
        'source_pressure_pa': source_pressure_pa,
        'fluid_density': fluid_density,
        'fluid_viscosity': fluid_viscosity,
        'fluid_viscosity_cp': fluid_viscosity_cp,
        'fluid_name': fluid_name,
        'temperature_c': temperature_c,
        'pressure_pa': pressure_pa,
        'method': method,
    }
    # Remove None values
    base_kwargs = {k: v for k, v in base_kwargs.items() if v is not None}

    results = []
    for value in np.linspace(start, stop, n):
        kwargs = base_kwargs.copy()
        kwargs[variable] = float(value)
        result = json.loads(calculate_pipe_pressure_loss(**kwargs))

        if "error" in result or "errors" in result:
            error = result.get("error") or "; ".join(result.get("errors", []))
            results.append({variable: float(value), "error": error})
        else:
            results.append({
                variable: float(value),
                "flow_rate_m3s": result.get("flow_rate_m3s"),
                "mass_flow_rate_kg_s": result.get("mass_flow_rate_kg_s"),
                "flow_velocity_m_s": result.get("flow_velocity_m_s"),
                "pressure_loss_pa": result.get("pressure_loss_pa"),
                "reynolds_number": result.get("reynolds_number"),
                "friction_factor": result.get("friction_factor"),
                "solved_variable": result.get("solved_variable"),
            })

    return safe_json_dumps({
        "sweep_variable": variable,
        "sweep_range": {"start": start, "stop": stop, "n": n},
        "results": results,
        "summary": {
            "total_points": len(results),
            "successful_points": len([r for r in results if "error" not in r]),
            "failed_points": len([r for r in results if "error" in r])
        }
    })
