"""
JSON serialization helpers for pipeflow-mcp.

This module provides utilities for safe JSON serialization, handling special
float values (inf, nan) that are not valid in JSON per RFC 7159, numpy
scalars and arrays, and pint quantities.
"""

import math
import json
from typing import Any

import numpy as np

from pipeflow.units import ureg


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize an object for JSON serialization.

    Replaces inf and nan float values with None, which serializes to null.
    pint quantities are converted to SI base units and reduced to their
    magnitude.

    Args:
        obj: Any Python object to sanitize

    Returns:
        Sanitized object safe for json.dumps

    Examples:
        >>> sanitize_for_json({'value': float('inf')})
        {'value': None}
        >>> sanitize_for_json([1.0, float('nan'), 3.0])
        [1.0, None, 3.0]
    """
    if obj is None:
        return None

    if isinstance(obj, bool):
        return obj

    if isinstance(obj, (int, str)):
        return obj

    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj

    if isinstance(obj, ureg.Quantity):
        return sanitize_for_json(obj.to_base_units().magnitude)

    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, (np.integer, np.floating)):
        val = float(obj)
        if math.isnan(val) or math.isinf(val):
            return None
        return val
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())

    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]

    # Fallback: convert to string
    return str(obj)


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """
    Safely serialize an object to JSON string.

    Applies sanitization before serialization to handle inf/nan values.

    Examples:
        >>> safe_json_dumps({'value': float('inf')})
        '{"value": null}'
    """
    sanitized = sanitize_for_json(obj)
    return json.dumps(sanitized, **kwargs)


def is_valid_number(value: float) -> bool:
    """
    Check if a float value is valid (not inf, nan, or CoolProp _HUGE).

    CoolProp returns _HUGE (approximately 1e308) for invalid states.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if math.isnan(value) or math.isinf(value):
        return False
    # CoolProp _HUGE is approximately 1e308
    if abs(value) > 1e300:
        return False
    return True
