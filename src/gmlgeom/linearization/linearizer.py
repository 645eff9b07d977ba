"""
Curve Linearizer
================
Approximates curved GML segments by straight line strings.

Why is this file needed?
------------------------
1. Topology: Union and self-intersection tests only work on straight edges,
   so arcs, circles and splines have to be turned into point runs first.
2. Accuracy: The number of points follows the caller's criterion (a fixed
   count or a maximum chord deviation), padded by the configured tolerance.

Note: A CurveLinearizer holds no state besides its tolerance and can be shared
between threads.
"""
from __future__ import annotations

import logging
from typing import List

from gmlgeom.config import DEFAULT_TOLERANCE
from gmlgeom.errors import (
    InvalidControlPointsError, PointCountUnderdeterminedError, UnsupportedCriterionError,
    UnsupportedSegmentKindError,
)
from gmlgeom.linearization.arc_math import are_collinear, interpolate_arc, num_points_for_max_error
from gmlgeom.linearization.spline import interpolate_cubic_spline
from gmlgeom.model.criteria import LinearizationCriterion, MaxErrorCriterion, NumPointsCriterion
from gmlgeom.model.geometries import CompositeCurve, Curve, LineString, Ring
from gmlgeom.model.geometry_primitives import (
    Arc, ArcString, CubicSpline, CurveSegment, GeodesicString, LineStringSegment, Point, SegmentType,
    join_points,
)

logger = logging.getLogger(__name__)


class CurveLinearizer:
    """
    Linearizes curves and curve segments.
    """

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE) -> None:
        """
        Args:
            tolerance: Added to the radius of interpolated arc points.
        """
        self._tolerance = float(tolerance)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tolerance={self._tolerance})"

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def linearize(self, curve: Curve, criterion: LinearizationCriterion) -> Curve:
        """
        Return a linearized version of the curve.

        Line strings and linear rings are returned as they are. Rings and
        composite curves are rebuilt from their linearized members, so a ring
        stays a ring.
        """
        match curve:
            case LineString():
                return curve
            case Ring() | CompositeCurve():
                members = [self.linearize(member, criterion) for member in curve.members]
                return type(curve)(members=members, id=curve.id, srs=curve.srs)
            case _:
                segments: List[CurveSegment] = [
                    self.linearize_segment(segment, criterion) for segment in curve.segments
                ]
                return Curve(segments=segments, id=curve.id, srs=curve.srs)

    def linearize_segment(self, segment: CurveSegment, criterion: LinearizationCriterion) -> LineStringSegment:
        """
        Return a linearized version of a single curve segment.

        Raises:
            UnsupportedSegmentKindError: If no algorithm exists for the segment kind.
        """
        match segment.segment_type:
            case SegmentType.LINE_STRING_SEGMENT:
                return segment
            case SegmentType.ARC | SegmentType.CIRCLE:
                return self.linearize_arc(segment, criterion)
            case SegmentType.ARC_STRING:
                return self.linearize_arc_string(segment, criterion)
            case SegmentType.CUBIC_SPLINE:
                return self.linearize_cubic_spline(segment, criterion)
            case SegmentType.GEODESIC_STRING:
                return self.linearize_geodesic_string(segment)
            case _:
                kind = getattr(segment, "kind", segment.segment_type)
                raise UnsupportedSegmentKindError(
                    f"Linearization of curve segment type '{kind}' is not implemented yet."
                )

    def linearize_arc(self, arc: Arc, criterion: LinearizationCriterion) -> LineStringSegment:
        """
        Linearize an arc or a circle.

        Collinear control points need no interpolation (and have no circle):
        a generic arc becomes (p0, p2), a circle becomes (p0, p1, p0).
        """
        if are_collinear(arc.p0, arc.p1, arc.p2):
            if arc.is_circle:
                return LineStringSegment([arc.p0, arc.p1, arc.p0])
            return LineStringSegment([arc.p0, arc.p2])
        return LineStringSegment(self._interpolate(arc.p0, arc.p1, arc.p2, arc.is_circle, criterion))

    def linearize_arc_string(self, arc_string: ArcString, criterion: LinearizationCriterion) -> LineStringSegment:
        """
        Linearize consecutive arcs (p0, p1, p2), (p2, p3, p4), ...

        A collinear triple is kept as its three points. Points shared by two
        arcs appear once in the result.

        Raises:
            InvalidControlPointsError: If the point count is not odd and at least 3.
        """
        pts = arc_string.points
        if len(pts) < 3 or len(pts) % 2 == 0:
            raise InvalidControlPointsError(
                f"An arc string needs an odd number of at least 3 control points, got {len(pts)}."
            )
        runs: List[List[Point]] = []
        for i in range(0, len(pts) - 2, 2):
            a, b, c = pts[i], pts[i + 1], pts[i + 2]
            if are_collinear(a, b, c):
                runs.append([a, b, c])
            else:
                runs.append(self._interpolate(a, b, c, False, criterion))
        return LineStringSegment(join_points(runs))

    def linearize_cubic_spline(self, spline: CubicSpline, criterion: LinearizationCriterion) -> LineStringSegment:
        """
        Linearize a 2D cubic spline.

        With a MaxErrorCriterion the point count is its `max_num_points`; there
        is no closed-form relation between deviation and count for splines.

        Raises:
            PointCountUnderdeterminedError: For a MaxErrorCriterion without max_num_points.
        """
        match criterion:
            case NumPointsCriterion(num_points=n):
                num_points = n
            case MaxErrorCriterion(max_num_points=n) if n > 0:
                num_points = n
            case MaxErrorCriterion():
                raise PointCountUnderdeterminedError(
                    "Linearization of the cubic spline with MaxErrorCriterion is not supported "
                    "unless max_num_points is provided."
                )
            case _:
                raise UnsupportedCriterionError(
                    f"Handling of criterion '{type(criterion).__name__}' is not implemented yet."
                )
        return LineStringSegment(interpolate_cubic_spline(spline, num_points))

    @staticmethod
    def linearize_geodesic_string(segment: GeodesicString) -> LineStringSegment:
        return LineStringSegment(list(segment.points))

    def _interpolate(
        self,
        p0: Point,
        p1: Point,
        p2: Point,
        is_circle: bool,
        criterion: LinearizationCriterion
    ) -> List[Point]:
        """Interpolate a non-collinear arc with the point count the criterion asks for."""
        match criterion:
            case NumPointsCriterion(num_points=n):
                num_points = n
            case MaxErrorCriterion(max_error=error, max_num_points=max_num_points):
                num_points = num_points_for_max_error(p0, p1, p2, is_circle, error, max_num_points)
                logger.debug(f"Using {num_points} points for segment linearization.")
            case _:
                raise UnsupportedCriterionError(
                    f"Handling of criterion '{type(criterion).__name__}' is not implemented yet."
                )
        return interpolate_arc(p0, p1, p2, num_points, is_circle, self._tolerance)
