"""
Polygon Patch Connectivity Validator
====================================
Checks that the patches of every surface form one connected polygon.

Why is this file needed?
------------------------
A surface may be built from several polygon patches. If their planar union
falls apart into a multi polygon the surface is not a single connected area,
which is a defect for most data specifications.

Note: Solids are never evaluated here (their shells are checked elsewhere).
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import shapely

from gmlgeom.errors import UnsupportedGeometryTypeError
from gmlgeom.model.geometries import (
    CompositeGeometry, CompositeSolid, Geometry, MultiGeometry, MultiSolid, Solid, Surface,
)
from gmlgeom.validation.messages import SURFACE_PATCHES_NOT_CONNECTED, UNSUPPORTED_GEOMETRY_TYPE
from gmlgeom.validation.registry import register_validator

if TYPE_CHECKING:
    from gmlgeom.validation.context import ElementContext
    from gmlgeom.validation.result import ValidationResult

logger = logging.getLogger(__name__)


def surface_is_connected(context: ElementContext, result: ValidationResult, surface: Surface) -> bool:
    patches = surface.get_patches()
    if len(patches) <= 1:
        return True

    polygons = [context.converter.patch_to_polygon(patch) for patch in patches]
    union = shapely.union_all(polygons)
    if union.geom_type == "Polygon":
        return True

    logger.debug(f"Union of {len(patches)} patches is a {union.geom_type}.")
    result.add_error(context, SURFACE_PATCHES_NOT_CONNECTED)
    return False


def is_connected(context: ElementContext, result: ValidationResult, geometry: Geometry) -> bool:
    """
    Recursively decide whether all surfaces of a geometry are connected.

    Args:
        context: Context of the validated element (provides the converter).
        result: Sink for the diagnostics.
        geometry: The geometry, or a member of it.

    Returns:
        False on the first disconnected surface and for solids, True otherwise.
    """
    match geometry:
        case Surface():
            return surface_is_connected(context, result, geometry)
        case Solid() | CompositeSolid() | MultiSolid():
            return False
        case MultiGeometry(members=members) | CompositeGeometry(members=members):
            for member in members:
                try:
                    context.converter.to_planar(member)
                except UnsupportedGeometryTypeError as e:
                    type_name = type(member).__name__
                    logger.warning(
                        f"Member of type '{type_name}' in element '{context.element_id}' "
                        f"cannot be converted, treating it as connected: {e}"
                    )
                    result.add_warning(context, UNSUPPORTED_GEOMETRY_TYPE, type_name)
                    continue
                if not is_connected(context, result, member):
                    return False
            return True
        case _:
            return True


@register_validator
class PolygonPatchConnectivityValidator:
    id = 1

    def validate(self, context: ElementContext, result: ValidationResult) -> None:
        is_connected(context, result, context.geometry)
