"""
Helper functions for the pipeflow MCP server.

This module provides shared utility functions used by multiple tools in the server.
"""

import logging

from pipeflow.units import Q_, ureg
from utils.constants import DEFAULT_ROUGHNESS, RE_LAMINAR_MAX, RE_TURBULENT_MIN

logger = logging.getLogger("pipeflow-mcp.helpers")


def get_pipe_roughness(material: str = None, pipe_roughness=None) -> tuple:
    """Get pipe roughness based on material or default.

    Args:
        material: Optional pipe material name (case-insensitive key of the
            ``fluids.friction`` roughness table)
        pipe_roughness: Optional explicit roughness quantity

    Returns:
        Tuple of (roughness quantity, source description)
    """
    if pipe_roughness is not None:
        return pipe_roughness, "Provided"

    if material is not None:
        from fluids.friction import _roughness
        mat_lower = {k.lower(): k for k in _roughness.keys()}
        if material.lower() in mat_lower:
            actual_key = mat_lower[material.lower()]
            return Q_(_roughness[actual_key], ureg.meter), f"Material Lookup '{actual_key}'"
        logger.warning(f"Material '{material}' not found, using default roughness {DEFAULT_ROUGHNESS}")
        return Q_(DEFAULT_ROUGHNESS, ureg.meter), f"Default (Material '{material}' Not Found)"

    return Q_(DEFAULT_ROUGHNESS, ureg.meter), "Default"


def list_pipe_materials() -> list:
    """Material names accepted by :func:`get_pipe_roughness`."""
    from fluids.friction import _roughness
    return sorted(_roughness.keys())


def flow_regime(reynolds_number: float) -> str:
    """Laminar / Transitional / Turbulent classification of a Reynolds number."""
    if reynolds_number < RE_LAMINAR_MAX:
        return "Laminar"
    if reynolds_number < RE_TURBULENT_MIN:
        return "Transitional"
    return "Turbulent"
