"""
Churchill (1977) friction factor correlation.

One closed-form expression covers the laminar, transitional and turbulent
regimes without branching:

    A = [2.457 ln(1 / ((7/Re)^0.9 + 0.27 eps/D))]^16
    B = (37530 / Re)^16
    f_fanning = 2 [(8/Re)^12 + (A + B)^-1.5]^(1/12)
    f_darcy = 4 f_fanning

The powers are combined in log space so that the result stays finite for
every positive float Re (the raw powers overflow below Re ~ 1e-15 and above
Re ~ 1e25). Inputs may be floats, numpy arrays or dimensionless pint
quantities; arrays are evaluated element-wise.

Churchill, S.W. (1977). Friction-factor equation spans all fluid-flow
regimes. Chemical Engineering, 84(24), 91-92.
"""

import logging
import math

import numpy as np

from .validation import (
    validate_form_loss_k,
    validate_length_to_diameter,
    validate_reynolds_number,
    validate_roughness_ratio,
)

logger = logging.getLogger("pipeflow-mcp.churchill")

_LN_7 = math.log(7.0)
_LN_8 = math.log(8.0)
_LN_37530 = math.log(37530.0)


def _scalar_or_array(value):
    return float(value) if np.ndim(value) == 0 else value


def _churchill_fanning(re, roughness):
    log_re = np.log(re)
    log_argument = np.exp(0.9 * (_LN_7 - log_re)) + 0.27 * roughness
    a_base = 2.457 * -np.log(log_argument)
    with np.errstate(divide="ignore"):
        # a_base == 0 only when the log argument is exactly 1; ln A is then -inf
        ln_a = 16.0 * np.log(np.abs(a_base))
    ln_b = 16.0 * (_LN_37530 - log_re)
    ln_a_plus_b = np.logaddexp(ln_a, ln_b)
    ln_laminar = 12.0 * (_LN_8 - log_re)
    ln_inner = np.logaddexp(ln_laminar, -1.5 * ln_a_plus_b)
    return 2.0 * np.exp(ln_inner / 12.0)


def fanning_friction_factor(reynolds_number, roughness_ratio):
    """Fanning friction factor from the Churchill correlation.

    Args:
        reynolds_number: Re > 0 (float, array or dimensionless quantity)
        roughness_ratio: Relative roughness eps/D >= 0

    Returns:
        Fanning friction factor (float for scalar input, array otherwise)

    Raises:
        ZeroReynoldsNumber: If Re == 0
        NegativeReynoldsNumber: If Re < 0
        NegativeRoughnessRatio: If eps/D < 0
        NonPhysicalInput: If an input is nan or infinite
    """
    re = validate_reynolds_number(reynolds_number, "fanning_friction_factor")
    roughness = validate_roughness_ratio(roughness_ratio, "fanning_friction_factor")
    return _scalar_or_array(_churchill_fanning(re, roughness))


def darcy_friction_factor(reynolds_number, roughness_ratio):
    """Darcy (Moody) friction factor, four times the Fanning factor.

    Same inputs and errors as :func:`fanning_friction_factor`.

    >>> round(darcy_friction_factor(1000.0, 0.0), 4)
    0.064
    """
    re = validate_reynolds_number(reynolds_number, "darcy_friction_factor")
    roughness = validate_roughness_ratio(roughness_ratio, "darcy_friction_factor")
    return _scalar_or_array(4.0 * _churchill_fanning(re, roughness))


def fldk(reynolds_number, roughness_ratio, length_to_diameter, form_loss_k=0.0,
         friction_factor=darcy_friction_factor):
    """Total loss coefficient f*L/D + K of a pipe with form losses.

    ``friction_factor`` is any callable ``(Re, eps/D) -> f_darcy``.
    """
    ratio = validate_length_to_diameter(length_to_diameter, "fldk")
    k = validate_form_loss_k(form_loss_k, "fldk")
    f = friction_factor(reynolds_number, roughness_ratio)
    return _scalar_or_array(np.asarray(f) * ratio + k)
