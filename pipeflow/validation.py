"""
Input guards shared by the friction factor, pressure loss and flowrate solver.

Each guard checks sign and magnitude only; dimensional correctness is left to
pint. Guards return the validated value (as a float or numpy array for the
dimensionless ones) so callers can use the result directly.
"""

import math

import numpy as np

from .errors import (
    NegativePressureLoss,
    NegativeReynoldsNumber,
    NegativeRoughnessRatio,
    NonPhysicalInput,
    ZeroReynoldsNumber,
)
from .units import PRESSURE, as_quantity, dimensionless_magnitude, ureg


def _as_float_or_array(value, name, operation):
    value = dimensionless_magnitude(value)
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError):
        raise NonPhysicalInput(f"{name} must be a real number, got {value!r}",
                               operation=operation, value=value)
    if not np.all(np.isfinite(arr)):
        raise NonPhysicalInput(f"{name} must be finite, got {value!r}",
                               operation=operation, value=value)
    return float(arr) if arr.ndim == 0 else arr


def validate_reynolds_number(reynolds, operation="friction_factor"):
    re = _as_float_or_array(reynolds, "Reynolds number", operation)
    if np.any(np.equal(re, 0.0)):
        raise ZeroReynoldsNumber("Reynolds number is zero", operation=operation, value=reynolds)
    if np.any(np.less(re, 0.0)):
        raise NegativeReynoldsNumber(f"Reynolds number is negative ({reynolds})",
                                     operation=operation, value=reynolds)
    return re


def validate_roughness_ratio(roughness, operation="friction_factor"):
    eps = _as_float_or_array(roughness, "Relative roughness", operation)
    if np.any(np.less(eps, 0.0)):
        raise NegativeRoughnessRatio(f"relative roughness is negative ({roughness})",
                                     operation=operation, value=roughness)
    return eps


def validate_length_to_diameter(ratio, operation="fldk"):
    value = _as_float_or_array(ratio, "Length to diameter ratio", operation)
    if np.any(np.less_equal(value, 0.0)):
        raise NonPhysicalInput(f"length to diameter ratio must be > 0, got {ratio}",
                               operation=operation, value=ratio)
    return value


def validate_form_loss_k(k, operation="fldk"):
    value = _as_float_or_array(k, "Form loss coefficient K", operation)
    if np.any(np.less(value, 0.0)):
        raise NonPhysicalInput(f"form loss coefficient K must be >= 0, got {k}",
                               operation=operation, value=k)
    return value


def validate_pressure_loss(pressure, operation="solve_flowrate"):
    """Pressure losses must be finite and non-negative; returns the quantity."""
    pressure = as_quantity(pressure, PRESSURE, "pressure loss")
    magnitude = pressure.m_as(ureg.pascal)
    if not math.isfinite(magnitude):
        raise NonPhysicalInput(f"pressure loss must be finite, got {pressure}",
                               operation=operation, value=pressure)
    if magnitude < 0:
        raise NegativePressureLoss(f"target pressure loss is negative ({pressure:~P})",
                                   operation=operation, value=pressure)
    return pressure


def _require_positive(quantity, name, operation, allow_zero=False):
    magnitude = quantity.to_base_units().magnitude
    if not math.isfinite(magnitude):
        raise NonPhysicalInput(f"{name} must be finite, got {quantity}",
                               operation=operation, value=quantity)
    if magnitude < 0 or (magnitude == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise NonPhysicalInput(f"{name} must be {bound}, got {quantity:~P}",
                               operation=operation, value=quantity)


def validate_geometry(geometry, operation="pressure_loss"):
    _require_positive(geometry.length, "pipe length", operation)
    _require_positive(geometry.diameter, "pipe diameter", operation)
    _require_positive(geometry.area, "cross-sectional area", operation)
    _require_positive(geometry.absolute_roughness, "absolute roughness", operation,
                      allow_zero=True)
    validate_form_loss_k(geometry.form_loss_k, operation)
    return geometry


def validate_fluid(fluid, operation="pressure_loss"):
    _require_positive(fluid.density, "fluid density", operation)
    _require_positive(fluid.viscosity, "fluid viscosity", operation)
    return fluid


def validate_tolerance(tolerance, relative, operation="solve_flowrate"):
    """Relative tolerances are plain fractions; absolute ones are pressures.

    Returns the tolerance as a float (a fraction, or pascals).
    """
    if relative:
        value = _as_float_or_array(tolerance, "relative tolerance", operation)
        if np.ndim(value) != 0 or value <= 0:
            raise NonPhysicalInput(f"relative tolerance must be a positive number, got {tolerance}",
                                   operation=operation, value=tolerance)
        return value
    quantity = as_quantity(tolerance, PRESSURE, "tolerance")
    _require_positive(quantity, "tolerance", operation)
    return quantity.m_as(ureg.pascal)


def validate_max_iterations(max_iterations, operation="solve_flowrate"):
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)) \
            or max_iterations < 1:
        raise NonPhysicalInput(f"max_iterations must be a positive integer, got {max_iterations!r}",
                               operation=operation, value=max_iterations)
    return int(max_iterations)
