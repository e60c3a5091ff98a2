"""
Churchill friction factor, pipe pressure loss and flowrate solver.

All dimensioned values are pint quantities from ``pipeflow.units.ureg``.
"""

from .batch import FlowrateCase, friction_factor_table, solve_flowrates
from .cache import FrictionFactorCache
from .churchill import darcy_friction_factor, fanning_friction_factor, fldk
from .dimensionless import bejan_from_reynolds, bejan_number, flow_from_reynolds, pressure_from_bejan
from .errors import (
    ConvergenceFailure,
    InvalidBracket,
    NegativePressureLoss,
    NegativeReynoldsNumber,
    NegativeRoughnessRatio,
    NonPhysicalInput,
    PipeFlowError,
    PropertyRangeError,
    ZeroReynoldsNumber,
)
from .models import FlowState, FluidProperties, PipeGeometry
from .pressure_loss import hydrostatic_pressure_change, pressure_change, pressure_loss
from .root_finding import bisection, brent
from .solver import solve_flowrate, solve_flowrate_from_pressure_change
from .units import Q_, ureg

__version__ = "0.1.0"

__all__ = [
    'ConvergenceFailure',
    'FlowState',
    'FlowrateCase',
    'FluidProperties',
    'FrictionFactorCache',
    'InvalidBracket',
    'NegativePressureLoss',
    'NegativeReynoldsNumber',
    'NegativeRoughnessRatio',
    'NonPhysicalInput',
    'PipeFlowError',
    'PipeGeometry',
    'PropertyRangeError',
    'Q_',
    'ZeroReynoldsNumber',
    'bejan_from_reynolds',
    'bejan_number',
    'bisection',
    'brent',
    'darcy_friction_factor',
    'fanning_friction_factor',
    'fldk',
    'flow_from_reynolds',
    'friction_factor_table',
    'hydrostatic_pressure_change',
    'pressure_change',
    'pressure_from_bejan',
    'pressure_loss',
    'solve_flowrate',
    'solve_flowrate_from_pressure_change',
    'solve_flowrates',
    'ureg',
]
