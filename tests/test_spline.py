import numpy as np
import pytest

from gmlgeom.errors import (
    PointCountUnderdeterminedError, SplineComputationError, UnorderedControlPointsError,
    UnsupportedDimensionError,
)
from gmlgeom.linearization.spline import interpolate_cubic_spline, second_derivative_system
from gmlgeom.model import CubicSpline, MaxErrorCriterion, NumPointsCriterion, Point, Vector


def _spline(coords, start=Vector(1, 1), end=Vector(1, -1)):
    return CubicSpline([Point(*c) for c in coords], vector_at_start=start, vector_at_end=end)


###############################################################################
# Equation system


def test_second_derivative_system_shape():

    h = np.array([1.0, 2.0, 1.0])
    ab, rhs = second_derivative_system(h, np.array([0.0, 1.0, 0.0, 1.0]), 0.0, 0.0)
    assert ab.shape == (3, 4)
    assert rhs.shape == (4,)
    assert list(ab[1]) == [2.0, 6.0, 6.0, 2.0]
    assert list(ab[0, 1:]) == [1.0, 2.0, 1.0]
    assert list(ab[2, :-1]) == [1.0, 2.0, 1.0]


###############################################################################
# Interpolation


def test_spline_passes_through_control_points():

    coords = [(0, 0), (1, 1), (2, 0), (3, 1)]
    spline = _spline(coords)
    points = interpolate_cubic_spline(spline, 7)
    assert len(points) == 7
    assert points[0] is spline.points[0]
    assert points[-1] is spline.points[-1]
    for i, (x, y) in enumerate(coords):
        assert points[2 * i].x == pytest.approx(x)
        assert points[2 * i].y == pytest.approx(y, abs=1e-9)


def test_spline_uniform_abscissas():

    points = interpolate_cubic_spline(_spline([(0, 0), (2, 1), (4, 0)]), 5)
    assert [p.x for p in points] == pytest.approx([0, 1, 2, 3, 4])


def test_spline_descending_runs_from_start_to_end():

    ascending = _spline([(0, 0), (1, 1), (2, 0), (3, 1)], start=Vector(1, 1), end=Vector(1, -1))
    descending = _spline([(3, 1), (2, 0), (1, 1), (0, 0)], start=Vector(-1, 1), end=Vector(-1, -1))

    forward = interpolate_cubic_spline(ascending, 13)
    backward = interpolate_cubic_spline(descending, 13)
    assert backward[0] is descending.points[0]
    assert backward[-1] is descending.points[-1]
    assert [c for p in backward for c in p.xy] == pytest.approx(
        [c for p in reversed(forward) for c in p.xy]
    )


def test_spline_unordered():

    with pytest.raises(UnorderedControlPointsError):
        interpolate_cubic_spline(_spline([(0, 0), (2, 1), (1, 0)]), 5)


def test_spline_3d():

    with pytest.raises(UnsupportedDimensionError):
        interpolate_cubic_spline(_spline([(0, 0, 1), (1, 1, 1), (2, 0, 1)]), 5)


def test_spline_coincident_abscissas():

    with pytest.raises(SplineComputationError):
        interpolate_cubic_spline(_spline([(0, 0), (1, 1), (1, 2), (2, 0)]), 5)


###############################################################################
# Through the linearizer


def test_linearize_spline_num_points(linearizer):

    segment = linearizer.linearize_segment(_spline([(0, 0), (1, 1), (2, 0)]), NumPointsCriterion(11))
    assert len(segment.points) == 11


def test_linearize_spline_max_error(linearizer):

    spline = _spline([(0, 0), (1, 1), (2, 0)])
    with pytest.raises(PointCountUnderdeterminedError):
        linearizer.linearize_segment(spline, MaxErrorCriterion(0.1))
    segment = linearizer.linearize_segment(spline, MaxErrorCriterion(0.1, max_num_points=10))
    assert len(segment.points) == 10
