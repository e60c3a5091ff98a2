import json
import logging
import math
from typing import Optional

import fluids.piping

from pipeflow.models import PipeGeometry
from pipeflow.units import Q_, ureg
from utils.constants import DEFAULT_SCHEDULE
from utils.helpers import get_pipe_roughness, list_pipe_materials
from utils.json_helpers import safe_json_dumps

# Configure logging
logger = logging.getLogger("pipeflow-mcp.get_pipe_properties")


def get_pipe_properties(
    nominal_size: Optional[float] = None,  # Nominal pipe size in inches
    schedule: str = DEFAULT_SCHEDULE,       # Pipe schedule designation
    inner_diameter: Optional[float] = None, # Inner diameter in m
    outer_diameter: Optional[float] = None, # Outer diameter in m
    material: Optional[str] = None  # Pipe material name
) -> str:
    """Look up standard pipe properties.

    Args:
        nominal_size: Nominal pipe size in inches
        schedule: Pipe schedule designation (40, 80, etc.)
        inner_diameter: Inner diameter in m (to find closest pipe)
        outer_diameter: Outer diameter in m (to find closest pipe)
        material: Pipe material name (e.g., "Steel", "Cast iron", "Concrete", etc.)

    Returns:
        Standard pipe dimensions, roughness and relative roughness
    """
    try:
        result = {}

        if nominal_size is not None or inner_diameter is not None or outer_diameter is not None:
            if nominal_size is not None:
                NPS, Di, Do, t = fluids.piping.nearest_pipe(NPS=nominal_size, schedule=schedule)
            elif inner_diameter is not None:
                NPS, Di, Do, t = fluids.piping.nearest_pipe(Di=inner_diameter, schedule=schedule)
            else:
                NPS, Di, Do, t = fluids.piping.nearest_pipe(Do=outer_diameter, schedule=schedule)

            # Unit length; only the cross-section is reported
            geometry = PipeGeometry(length=Q_(1.0, ureg.meter), diameter=Q_(Di, ureg.meter))
            result.update({
                "nominal_pipe_size_inches": NPS,
                "inner_diameter_m": Di,
                "outer_diameter_m": Do,
                "wall_thickness_m": t,
                "cross_sectional_area_m2": geometry.area.m_as(ureg.meter ** 2),
                "inner_circumference_m": (math.pi * geometry.diameter).m_as(ureg.meter),
                "schedule": schedule
            })

        if material is not None:
            roughness, source = get_pipe_roughness(material)
            if source.startswith("Material Lookup"):
                result.update({
                    "material": source.split("'")[1],
                    "absolute_roughness_m": roughness.m_as(ureg.meter),
                })
                if "inner_diameter_m" in result:
                    result["relative_roughness"] = roughness.m_as(ureg.meter) / result["inner_diameter_m"]
            else:
                result.update({
                    "error_material": f"Material '{material}' not found in database",
                    "available_materials": list_pipe_materials()
                })

        if not result:
            return json.dumps({
                "error": "Must provide either pipe dimensions (nominal_size, inner_diameter, or outer_diameter) or material name"
            })

        result["successful"] = True
        return safe_json_dumps(result)

    except (ValueError, TypeError) as e:
        logger.error(f"Error in get_pipe_properties: {e}", exc_info=True)
        return json.dumps({
            "error": f"Calculation error: {str(e)}",
            "successful": False
        })
