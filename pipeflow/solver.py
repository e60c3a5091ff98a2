"""
Inverse problem: the flowrate that produces a given pressure loss.

Pressure loss is smooth and strictly increasing in flowrate for fixed
geometry and fluid, so a sign-bracketing root-finder on

    residual(flow) = pressure_loss(flow) - target

converges without differentiating the implicit Churchill expression.
"""

import logging
import sys

from .churchill import darcy_friction_factor
from .dimensionless import flow_from_reynolds
from .errors import ConvergenceFailure, InvalidBracket
from .models import FlowState
from .pressure_loss import hydrostatic_pressure_change, pressure_loss
from .root_finding import bisection
from .units import PRESSURE, Q_, as_quantity, ureg
from .validation import (
    validate_fluid,
    validate_geometry,
    validate_max_iterations,
    validate_pressure_loss,
    validate_tolerance,
)

logger = logging.getLogger("pipeflow-mcp.solver")

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_RELATIVE_TOLERANCE = 1e-9

# Reynolds search range used when no bracket is supplied. Targets below the
# loss at MIN_REYNOLDS are searched between zero flow and MIN_REYNOLDS.
MIN_REYNOLDS = 1e-6
MAX_REYNOLDS = 1e12

# Absolute x-tolerance handed to the root-finder. The search ends on the
# residual tolerance or when the bracket shrinks to float resolution.
_XTOL = sys.float_info.min


class _Residual:
    """Pressure loss residual in Pa at a flowrate magnitude in ``units``.

    Zero flow has zero loss. Residuals within ``tolerance_pa`` are reported
    as exactly zero, which stops a bracketing method early. The tightest
    sign-change bracket seen so far is kept for diagnostics, and ``calls``
    counts the evaluations made by the root-finder.
    """

    def __init__(self, target_pa, tolerance_pa, units, geometry, fluid, friction_factor):
        self.target_pa = target_pa
        self.tolerance_pa = tolerance_pa
        self.units = units
        self.geometry = geometry
        self.fluid = fluid
        self.friction_factor = friction_factor
        self.below = None
        self.above = None
        self.calls = 0

    def raw(self, x):
        if x == 0:
            loss = 0.0
        else:
            flow = FlowState(Q_(x, self.units))
            loss = pressure_loss(flow, self.geometry, self.fluid,
                                 friction_factor=self.friction_factor).m_as(ureg.pascal)
        residual = loss - self.target_pa
        if residual < 0 and (self.below is None or x > self.below):
            self.below = x
        elif residual > 0 and (self.above is None or x < self.above):
            self.above = x
        return residual

    def __call__(self, x):
        self.calls += 1
        residual = self.raw(x)
        if abs(residual) <= self.tolerance_pa:
            return 0.0
        return residual

    def iterations(self):
        # bisect and brentq evaluate both ends, then once per iteration
        return max(self.calls - 2, 0)

    def bracket(self, low, high):
        below = self.below if self.below is not None else low
        above = self.above if self.above is not None else high
        return Q_(below, self.units), Q_(above, self.units)


def _flowrate_of(value):
    if isinstance(value, FlowState):
        return value.flowrate
    return FlowState(value).flowrate


def solve_flowrate(target_pressure_loss, geometry, fluid, bracket=None,
                   tolerance=DEFAULT_RELATIVE_TOLERANCE, relative=None,
                   max_iterations=DEFAULT_MAX_ITERATIONS,
                   root_finder=bisection, friction_factor=darcy_friction_factor) -> FlowState:
    """Find the flowrate whose pressure loss matches ``target_pressure_loss``.

    Args:
        target_pressure_loss: Pressure quantity >= 0
        geometry: PipeGeometry
        fluid: FluidProperties
        bracket: ``(low, high)`` flowrates (quantities or FlowStates of the same
            kind) with ``residual(low) <= 0 <= residual(high)``. A zero end
            has zero loss. If None, the Reynolds range
            MIN_REYNOLDS..MAX_REYNOLDS is searched as mass flowrates, or
            zero flow..MIN_REYNOLDS for targets below the loss at MIN_REYNOLDS.
        tolerance: Pressure quantity (absolute) or plain fraction of the
            target (relative)
        relative: Force a relative (True) or absolute (False) tolerance. If
            None, a pressure quantity or string is absolute and a plain
            number is relative.
        max_iterations: Root-finder iteration budget
        root_finder: Bracketing method, see ``pipeflow.root_finding``
        friction_factor: Callable ``(Re, eps/D) -> f_darcy``

    Returns:
        FlowState in the units of the bracket's lower end, whose pressure loss
        is within ``tolerance`` of the target.

    Raises:
        NegativePressureLoss: Target below zero
        InvalidBracket: ``low >= high`` or the bracket does not straddle the target
        ConvergenceFailure: Budget exhausted, or the target is beyond the
            loss reachable at MAX_REYNOLDS when no bracket is given
        Errors from the pressure loss model propagate unchanged.
    """
    operation = "solve_flowrate"
    target = validate_pressure_loss(target_pressure_loss, operation)
    validate_geometry(geometry, operation)
    validate_fluid(fluid, operation)
    max_iterations = validate_max_iterations(max_iterations, operation)
    if relative is None:
        relative = not isinstance(tolerance, (ureg.Quantity, str))
    tolerance_value = validate_tolerance(tolerance, relative, operation)

    auto_bracket = bracket is None
    if auto_bracket:
        low = flow_from_reynolds(MIN_REYNOLDS, geometry, fluid).flowrate
        high = flow_from_reynolds(MAX_REYNOLDS, geometry, fluid).flowrate
    else:
        low, high = (_flowrate_of(end) for end in bracket)
    units = low.units
    lo = float(low.magnitude)
    hi = float(high.m_as(units))

    if not lo < hi:
        raise InvalidBracket(f"bracket must satisfy low < high, got ({low:~P}, {high:~P})",
                             operation=operation, value=(low, high))

    target_pa = target.m_as(ureg.pascal)
    if target_pa == 0:
        logger.debug("Zero target pressure loss, returning zero flow")
        return FlowState(Q_(0.0, units))
    tolerance_pa = tolerance_value * target_pa if relative else tolerance_value

    residual = _Residual(target_pa, tolerance_pa, units, geometry, fluid, friction_factor)
    r_low = residual.raw(lo)
    r_high = residual.raw(hi)
    if auto_bracket and r_low > 0:
        # Target below the loss at MIN_REYNOLDS: search down to zero flow
        hi, r_high = lo, r_low
        lo, r_low = 0.0, residual.raw(0.0)
        low, high = Q_(lo, units), Q_(hi, units)
        logger.debug("Target below the loss at Re=%g, searching from zero flow", MIN_REYNOLDS)
    if abs(r_low) <= tolerance_pa:
        return FlowState(low)
    if abs(r_high) <= tolerance_pa:
        return FlowState(Q_(hi, units))
    if auto_bracket and r_high < 0:
        raise ConvergenceFailure(
            f"target {target:~P} exceeds the pressure loss reachable at Re={MAX_REYNOLDS:g} "
            f"({r_high + target_pa:.6g} Pa)",
            operation=operation, value=target, iterations=0, bracket=(low, high))
    if r_low > 0 or r_high < 0:
        raise InvalidBracket(
            f"bracket ({low:~P}, {high:~P}) does not straddle {target:~P}: "
            f"residuals {r_low:.6g} Pa and {r_high:.6g} Pa",
            operation=operation, value=(low, high), residuals=(r_low, r_high))

    logger.debug("Solving flowrate for %s in [%g, %g] %s", target, lo, hi, units)
    try:
        root = root_finder(residual, lo, hi, _XTOL, max_iterations)
    except ConvergenceFailure as exc:
        raise ConvergenceFailure(
            f"flowrate for {target:~P} did not converge within {max_iterations} iterations",
            operation=operation, value=target, iterations=exc.iterations,
            bracket=residual.bracket(lo, hi)) from exc

    final = residual.raw(root)
    if abs(final) > tolerance_pa:
        raise ConvergenceFailure(
            f"bracket collapsed at {root:.12g} {units} with residual {final:.6g} Pa, "
            f"above tolerance {tolerance_pa:.6g} Pa",
            operation=operation, value=target, iterations=residual.iterations(),
            bracket=residual.bracket(lo, hi))

    logger.debug("Solved flowrate %.12g %s (residual %.3g Pa)", root, units, final)
    return FlowState(Q_(root, units))


def solve_flowrate_from_pressure_change(pressure_change, geometry, fluid, bracket=None,
                                        source_pressure=None, **kwargs) -> FlowState:
    """Flowrate producing a given outlet-minus-inlet pressure change.

    The frictional loss to match is ``-pressure_change + hydrostatic + source``;
    a negative required loss means reversed flow and fails with
    NegativePressureLoss.
    """
    change = as_quantity(pressure_change, PRESSURE, "pressure_change")
    source = Q_(0.0, ureg.pascal) if source_pressure is None \
        else as_quantity(source_pressure, PRESSURE, "source_pressure")
    required_loss = (-change + hydrostatic_pressure_change(geometry, fluid) + source).to(ureg.pascal)
    return solve_flowrate(required_loss, geometry, fluid, bracket=bracket, **kwargs)
