import math

import pytest

from gmlgeom.errors import (
    InvalidControlPointsError, UnsupportedCriterionError, UnsupportedSegmentKindError,
)
from gmlgeom.linearization import CurveLinearizer
from gmlgeom.model import (
    Arc, ArcString, Circle, CompositeCurve, Curve, GeodesicString, LineString, LineStringSegment,
    MaxErrorCriterion, NumPointsCriterion, Point, Ring, UnsupportedSegment,
)


def _radius(p, cx=1.0, cy=0.0):
    return math.hypot(p.x - cx, p.y - cy)


###############################################################################
# Arcs and circles


def test_linearize_arc_num_points(linearizer):

    p0, p1, p2 = Point(0, 0), Point(1, 1), Point(2, 0)
    segment = linearizer.linearize_segment(Arc(p0, p1, p2), NumPointsCriterion(5))
    assert isinstance(segment, LineStringSegment)
    assert len(segment.points) == 5
    assert segment.points[0] is p0
    assert segment.points[-1] is p2
    # third point is the top of the half circle
    assert segment.points[2].xy == pytest.approx((1.0, 1.0))
    for p in segment.points:
        assert _radius(p) == pytest.approx(1.0)


def test_linearize_arc_keeps_z_of_end_points(linearizer):

    p0, p1, p2 = Point(0, 0, 10.0), Point(1, 1, 10.0), Point(2, 0, 10.0)
    points = linearizer.linearize_segment(Arc(p0, p1, p2), NumPointsCriterion(4)).points
    assert points[0].z == 10.0
    assert points[-1].z == 10.0
    assert points[1].z is None


def test_linearize_arc_with_varying_z(linearizer):

    p0, p1, p2 = Point(0, 0, 0.0), Point(1, 1, 5.0), Point(2, 0, 0.0)
    points = linearizer.linearize_segment(Arc(p0, p1, p2), NumPointsCriterion(5)).points
    assert points[0] is p0
    assert points[-1] is p2
    assert points[0].z == 0.0
    assert points[2].xy == pytest.approx((1.0, 1.0))
    for p in points:
        assert _radius(p) == pytest.approx(1.0)


def test_linearize_circle(linearizer):

    p0 = Point(0, 0)
    segment = linearizer.linearize_segment(Circle(p0, Point(1, 1), Point(2, 0)), NumPointsCriterion(9))
    assert len(segment.points) == 9
    assert segment.points[0] is p0
    assert segment.points[-1] is p0
    # opposite side of the circle
    assert segment.points[4].xy == pytest.approx((2.0, 0.0))
    for p in segment.points:
        assert _radius(p) == pytest.approx(1.0)


@pytest.mark.parametrize("max_error", [0.1, 0.01, 0.001])
def test_linearize_arc_max_error(linearizer, max_error):

    segment = linearizer.linearize_segment(Arc(Point(0, 0), Point(1, 1), Point(2, 0)), MaxErrorCriterion(max_error))
    points = segment.points
    assert len(points) > 2
    for a, b in zip(points, points[1:]):
        mid_x, mid_y = (a.x + b.x) / 2, (a.y + b.y) / 2
        assert 1.0 - math.hypot(mid_x - 1.0, mid_y) <= max_error + 1e-12


def test_linearize_arc_max_error_capped(linearizer):

    segment = linearizer.linearize_segment(
        Arc(Point(0, 0), Point(1, 1), Point(2, 0)), MaxErrorCriterion(1e-6, max_num_points=4)
    )
    assert len(segment.points) == 4


def test_linearize_arc_max_error_below_resolution_capped(linearizer):

    segment = linearizer.linearize_segment(
        Arc(Point(0, 0), Point(1, 1), Point(2, 0)), MaxErrorCriterion(1e-300, max_num_points=7)
    )
    assert len(segment.points) == 7


def test_linearize_arc_tolerance():

    p0, p2 = Point(0, 0), Point(2, 0)
    linearizer = CurveLinearizer(tolerance=0.5)
    assert linearizer.tolerance == 0.5
    points = linearizer.linearize_segment(Arc(p0, Point(1, 1), p2), NumPointsCriterion(5)).points
    assert points[0] is p0
    assert points[-1] is p2
    for p in points[1:-1]:
        assert _radius(p) == pytest.approx(1.5)


def test_linearize_collinear_arc(linearizer):

    p0, p1, p2 = Point(0, 0), Point(1, 1), Point(2, 2)
    assert linearizer.linearize_segment(Arc(p0, p1, p2), NumPointsCriterion(10)).points == [p0, p2]
    assert linearizer.linearize_segment(Circle(p0, p1, p2), NumPointsCriterion(10)).points == [p0, p1, p0]


def test_linearize_arc_unsupported_criterion(linearizer):

    with pytest.raises(UnsupportedCriterionError):
        linearizer.linearize_segment(Arc(Point(0, 0), Point(1, 1), Point(2, 0)), object())


###############################################################################
# Arc strings


def test_linearize_arc_string(linearizer):

    pts = [Point(0, 0), Point(1, 1), Point(2, 0), Point(3, -1), Point(4, 0)]
    points = linearizer.linearize_segment(ArcString(pts), NumPointsCriterion(5)).points
    # the point shared by both arcs appears once
    assert len(points) == 9
    assert points[0] is pts[0]
    assert points[4] is pts[2]
    assert points[-1] is pts[-1]
    assert points[6].xy == pytest.approx((3.0, -1.0))


def test_linearize_arc_string_collinear_triple(linearizer):

    pts = [Point(0, 0), Point(1, 0), Point(2, 0)]
    assert linearizer.linearize_segment(ArcString(pts), NumPointsCriterion(5)).points == pts


@pytest.mark.parametrize("count", [1, 2, 4])
def test_linearize_arc_string_invalid_count(linearizer, count):

    pts = [Point(i, i % 2) for i in range(count)]
    with pytest.raises(InvalidControlPointsError):
        linearizer.linearize_segment(ArcString(pts), NumPointsCriterion(5))


###############################################################################
# Other segments


def test_linearize_line_string_segment_identity(linearizer):

    segment = LineStringSegment([Point(0, 0), Point(1, 0)])
    assert linearizer.linearize_segment(segment, NumPointsCriterion(5)) is segment


def test_linearize_geodesic_string(linearizer):

    pts = [Point(0, 0), Point(1, 5), Point(2, 3)]
    assert linearizer.linearize_segment(GeodesicString(pts), NumPointsCriterion(5)).points == pts


def test_linearize_unsupported_segment(linearizer):

    segment = UnsupportedSegment("Bezier", [Point(0, 0), Point(1, 1), Point(2, 0)])
    with pytest.raises(UnsupportedSegmentKindError, match="Bezier"):
        linearizer.linearize_segment(segment, NumPointsCriterion(5))


###############################################################################
# Whole curves


def test_linearize_line_string_returns_same_object(linearizer):

    line = LineString.from_points([Point(0, 0), Point(1, 1)])
    assert linearizer.linearize(line, NumPointsCriterion(5)) is line


def test_linearize_curve(linearizer):

    p0, p1, p2, p3 = Point(0, 0), Point(1, 1), Point(2, 0), Point(5, 0)
    curve = Curve(
        segments=[Arc(p0, p1, p2), LineStringSegment([p2, p3])], id="c1", srs="EPSG:25832"
    )
    linear = linearizer.linearize(curve, NumPointsCriterion(5))
    assert type(linear) is Curve
    assert linear.id == "c1"
    assert linear.srs == "EPSG:25832"
    assert all(isinstance(s, LineStringSegment) for s in linear.segments)
    assert len(linear.points()) == 6
    assert linear.end_point is p3


def test_linearize_ring(linearizer):

    p0, p1, p2 = Point(0, 0), Point(1, 1), Point(2, 0)
    ring = Ring(
        members=[Curve(segments=[Arc(p0, p1, p2)]), LineString.from_points([p2, p0])],
        id="r1",
    )
    linear = linearizer.linearize(ring, NumPointsCriterion(5))
    assert isinstance(linear, Ring)
    assert linear.id == "r1"
    assert len(linear.members) == 2
    assert linear.is_closed()
    assert len(linear.points()) == 6


def test_linearize_composite_curve(linearizer):

    p0, p1, p2 = Point(0, 0), Point(1, 1), Point(2, 0)
    composite = CompositeCurve(members=[Curve(segments=[Arc(p0, p1, p2)])])
    linear = linearizer.linearize(composite, NumPointsCriterion(3))
    assert isinstance(linear, CompositeCurve)
    assert [c for p in linear.points() for c in p.xy] == pytest.approx([0, 0, 1, 1, 2, 0])


def test_criteria_validation():

    with pytest.raises(ValueError):
        NumPointsCriterion(1)
    with pytest.raises(ValueError):
        MaxErrorCriterion(0.0)
    with pytest.raises(ValueError):
        MaxErrorCriterion(0.1, max_num_points=1)
