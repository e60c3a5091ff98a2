"""
Bracketing root-finders.

A root-finder is any callable with the signature

    find_root(f, low, high, tolerance, max_iterations) -> float

where ``f`` changes sign on ``[low, high]`` and ``tolerance`` is the absolute
x-tolerance. It raises ConvergenceFailure when the iteration budget runs out.
The flowrate solver depends only on this signature, so bisection and Brent's
method are interchangeable.
"""

import logging
from typing import Callable

from scipy.optimize import bisect, brentq

from .errors import ConvergenceFailure

logger = logging.getLogger("pipeflow-mcp.root_finding")

RootFinder = Callable[[Callable[[float], float], float, float, float, int], float]


def _run(method, name, f, low, high, tolerance, max_iterations):
    root, info = method(f, low, high, xtol=tolerance, maxiter=max_iterations,
                        full_output=True, disp=False)
    logger.debug("%s: %d iterations, %d calls, converged=%s",
                 name, info.iterations, info.function_calls, info.converged)
    if not info.converged:
        raise ConvergenceFailure(
            f"no convergence after {info.iterations} iterations "
            f"(last estimate {root!r}, flag '{info.flag}')",
            operation=name, value=root, iterations=info.iterations)
    return root


def bisection(f, low, high, tolerance, max_iterations):
    """Interval bisection (scipy.optimize.bisect)."""
    return _run(bisect, "bisection", f, low, high, tolerance, max_iterations)


def brent(f, low, high, tolerance, max_iterations):
    """Brent's method (scipy.optimize.brentq)."""
    return _run(brentq, "brent", f, low, high, tolerance, max_iterations)
