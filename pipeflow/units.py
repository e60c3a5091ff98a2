"""
Unit registry for the pipe flow core.

All dimensioned values in the package are pint quantities from one shared
registry, so incompatible units fail at the point of conversion instead of
being silently mixed.
"""

import logging
from typing import Any, Optional

import pint

logger = logging.getLogger("pipeflow-mcp.units")

ureg = pint.UnitRegistry()
Q_ = ureg.Quantity
pint.set_application_registry(ureg)

# Dimension strings accepted by Quantity.check()
LENGTH = "[length]"
AREA = "[length] ** 2"
VELOCITY = "[length] / [time]"
VOLUMETRIC_RATE = "[length] ** 3 / [time]"
MASS_RATE = "[mass] / [time]"
DENSITY = "[mass] / [length] ** 3"
VISCOSITY = "[mass] / [length] / [time]"
PRESSURE = "[mass] / [length] / [time] ** 2"
TEMPERATURE = "[temperature]"


def as_quantity(value: Any, dimension: Optional[str], name: str):
    """Return ``value`` as a registry quantity with the given dimensionality.

    Args:
        value: A pint quantity or a string such as ``"2 inch"``
        dimension: Dimension string (e.g. ``"[length]"``), or None for an
            angle or other dimensionless quantity
        name: Parameter name used in error messages

    Returns:
        The quantity, unchanged apart from string parsing

    Raises:
        TypeError: If ``value`` is a bare number or other non-quantity
        pint.DimensionalityError: If the dimensionality does not match
    """
    if isinstance(value, str):
        value = Q_(value)
    if not isinstance(value, ureg.Quantity):
        raise TypeError(
            f"{name} must be a dimensioned quantity"
            f"{' of ' + dimension if dimension else ''}, got {value!r}"
        )
    if dimension is None:
        if not value.dimensionless:
            raise pint.DimensionalityError(value.units, "dimensionless",
                                           extra_msg=f" for {name}")
    elif not value.check(dimension):
        raise pint.DimensionalityError(value.units, dimension,
                                       extra_msg=f" for {name}")
    return value


def dimensionless_magnitude(value: Any):
    """Strip a dimensionless quantity to its magnitude; pass numbers through."""
    if isinstance(value, ureg.Quantity):
        return value.m_as(ureg.dimensionless)
    return value
