"""
Batch evaluation.

Independent flowrate solves are dispatched to a thread pool; results come
back in input order. Friction factor tables are evaluated with numpy in one
vectorised call.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .churchill import darcy_friction_factor
from .models import FlowState, FluidProperties, PipeGeometry
from .solver import solve_flowrate

logger = logging.getLogger("pipeflow-mcp.batch")


@dataclass
class FlowrateCase:
    """One inverse problem: the flowrate producing ``target_pressure_loss``."""

    target_pressure_loss: Any
    geometry: PipeGeometry
    fluid: FluidProperties
    bracket: Optional[Any] = None
    options: Dict[str, Any] = field(default_factory=dict)  # passed to solve_flowrate


def _solve_case(case: FlowrateCase) -> FlowState:
    return solve_flowrate(case.target_pressure_loss, case.geometry, case.fluid,
                          bracket=case.bracket, **case.options)


def solve_flowrates(cases: Sequence[FlowrateCase], max_workers: Optional[int] = None) -> List[FlowState]:
    """Solve independent flowrate cases concurrently.

    Args:
        cases: FlowrateCase instances
        max_workers: Thread pool size (None lets the executor choose)

    Returns:
        FlowStates in the same order as ``cases``

    Raises:
        The first failing case's error, in input order. No partial list is
        returned.
    """
    cases = list(cases)
    if not cases:
        return []
    logger.debug("Solving %d flowrate cases with max_workers=%s", len(cases), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_solve_case, case) for case in cases]
        results = []
        for index, future in enumerate(futures):
            try:
                results.append(future.result())
            except Exception:
                logger.debug("Flowrate case %d failed", index)
                raise
    return results


def friction_factor_table(reynolds_numbers, roughness_ratios, friction_factor=darcy_friction_factor):
    """Friction factors on the grid ``roughness_ratios x reynolds_numbers``.

    Returns an array of shape ``(len(roughness_ratios), len(reynolds_numbers))``,
    one Moody-chart curve per row.
    """
    re = np.atleast_1d(np.asarray(reynolds_numbers, dtype=float))
    eps = np.atleast_1d(np.asarray(roughness_ratios, dtype=float))
    re_grid, eps_grid = np.meshgrid(re, eps)
    return np.asarray(friction_factor(re_grid, eps_grid))
