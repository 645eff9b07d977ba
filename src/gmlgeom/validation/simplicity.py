"""
Simplicity Validator
====================
Reports geometries that intersect themselves.

GEOS decides whether the planar geometry is simple; when it is not, the
segments are scanned to pinpoint the first offending coordinate so operators
can locate the defect.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from shapely import STRtree
from shapely.geometry import (
    GeometryCollection, LinearRing, LineString, MultiLineString, MultiPoint, MultiPolygon, Point,
    Polygon,
)

from gmlgeom.validation.messages import NOT_SIMPLE, NOT_SIMPLE_INTERSECTION
from gmlgeom.validation.registry import register_validator

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from gmlgeom.validation.context import ElementContext
    from gmlgeom.validation.result import ValidationResult

logger = logging.getLogger(__name__)

Coordinate = tuple[float, ...]


def _first_coordinate(geometry: BaseGeometry) -> Optional[Coordinate]:
    if geometry.is_empty:
        return None
    if isinstance(geometry, Point):
        return geometry.x, geometry.y
    if hasattr(geometry, "geoms"):
        for part in geometry.geoms:
            coord = _first_coordinate(part)
            if coord is not None:
                return coord
        return None
    if isinstance(geometry, Polygon):
        return tuple(geometry.exterior.coords[0])
    return tuple(geometry.coords[0])


def _without_repeats(coords: Sequence[Coordinate]) -> list[Coordinate]:
    out: list[Coordinate] = []
    for c in coords:
        if not out or out[-1] != c:
            out.append(c)
    return out


def line_self_intersection(coords: Sequence[Coordinate]) -> Optional[Coordinate]:
    """
    First point where a line touches or crosses itself.

    Consecutive segments may only share their common vertex; in a closed line
    the first and the last segment share the start point.

    Returns:
        The offending coordinate, or None if the line is simple.
    """
    coords = _without_repeats([tuple(c[:2]) for c in coords])
    if len(coords) < 3:
        return None
    closed = coords[0] == coords[-1]
    segments = [LineString(coords[i:i + 2]) for i in range(len(coords) - 1)]
    n = len(segments)

    tree = STRtree(segments)
    left, right = tree.query(segments, predicate="intersects")
    pairs = sorted((int(i), int(j)) for i, j in zip(left, right) if i < j)

    for i, j in pairs:
        intersection = segments[i].intersection(segments[j])
        adjacent = j == i + 1 or (closed and i == 0 and j == n - 1)
        if adjacent and isinstance(intersection, Point):
            continue
        coord = _first_coordinate(intersection)
        if coord is not None:
            return coord
    return None


def _line_end_points(line: LineString) -> set[Coordinate]:
    if line.is_closed:
        return set()
    return {tuple(line.coords[0][:2]), tuple(line.coords[-1][:2])}


def multi_line_intersection(lines: Sequence[LineString]) -> Optional[Coordinate]:
    """
    First non-simple location of a multi line.

    Each member must be simple; distinct members may only touch at end points
    of both.
    """
    for line in lines:
        coord = line_self_intersection(line.coords)
        if coord is not None:
            return coord
    for i, a in enumerate(lines):
        for b in lines[i + 1:]:
            intersection = a.intersection(b)
            if intersection.is_empty:
                continue
            allowed = _line_end_points(a) & _line_end_points(b)
            points = intersection.geoms if hasattr(intersection, "geoms") else [intersection]
            for part in points:
                if not isinstance(part, Point) or (part.x, part.y) not in allowed:
                    return _first_coordinate(part)
    return None


def find_non_simple_location(geometry: BaseGeometry) -> Optional[Coordinate]:
    """
    Locate where a planar geometry stops being simple.

    Returns:
        A coordinate, or None if no location can be determined.
    """
    match geometry:
        case Point():
            return None
        case MultiPoint():
            seen: set[Coordinate] = set()
            for p in geometry.geoms:
                if (p.x, p.y) in seen:
                    return p.x, p.y
                seen.add((p.x, p.y))
            return None
        case LinearRing() | LineString():
            return line_self_intersection(geometry.coords)
        case MultiLineString():
            return multi_line_intersection(list(geometry.geoms))
        case Polygon():
            for ring in [geometry.exterior, *geometry.interiors]:
                coord = line_self_intersection(ring.coords)
                if coord is not None:
                    return coord
            return None
        case MultiPolygon() | GeometryCollection():
            for part in geometry.geoms:
                coord = find_non_simple_location(part)
                if coord is not None:
                    return coord
            return None
        case _:
            return None


@register_validator
class GeometryIsSimpleValidator:
    """Checks that the planar geometry has no self-intersections."""
    id = 3

    def validate(self, context: ElementContext, result: ValidationResult) -> None:
        planar = context.get_planar_geometry()
        if planar is None:
            result.fail_silently()
            return
        if planar.is_simple:
            return
        location = find_non_simple_location(planar)
        logger.debug(f"Element '{context.element_id}' is not simple, location: {location}")
        if location is not None:
            result.add_error(context, NOT_SIMPLE_INTERSECTION, coordinate=location)
        else:
            result.add_error(context, NOT_SIMPLE)
