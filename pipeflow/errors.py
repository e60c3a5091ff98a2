"""
Error taxonomy for pipe flow calculations.

Every error is a ValueError carrying the operation that failed and the
offending value, so a failure can be diagnosed without re-running it.
"""

from typing import Any, Optional, Tuple


class PipeFlowError(ValueError):
    """Base class for validation and convergence failures."""

    def __init__(self, message: str, operation: Optional[str] = None, value: Any = None):
        self.operation = operation
        self.value = value
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)


class ZeroReynoldsNumber(PipeFlowError):
    """Re == 0 has no friction factor (the correlation diverges)."""


class NegativeReynoldsNumber(PipeFlowError):
    """Re < 0; reversed flow is not modelled."""


class NegativeRoughnessRatio(PipeFlowError):
    """Relative roughness eps/D < 0."""


class NegativePressureLoss(PipeFlowError):
    """A target pressure loss below zero."""


class NonPhysicalInput(PipeFlowError):
    """Non-positive geometry or fluid property, negative K, bad tolerance, nan/inf."""


class PropertyRangeError(PipeFlowError):
    """A fluid property correlation was evaluated outside its valid range."""


class InvalidBracket(PipeFlowError):
    """The flowrate bracket does not straddle the target pressure loss."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 value: Any = None, residuals: Optional[Tuple[float, float]] = None):
        super().__init__(message, operation=operation, value=value)
        self.residuals = residuals


class ConvergenceFailure(PipeFlowError):
    """The iteration budget ran out before the tolerance was met.

    ``bracket`` holds the tightest sign-change interval seen, if any.
    """

    def __init__(self, message: str, operation: Optional[str] = None,
                 value: Any = None, iterations: Optional[int] = None,
                 bracket: Optional[Tuple[Any, Any]] = None):
        super().__init__(message, operation=operation, value=value)
        self.iterations = iterations
        self.bracket = bracket
