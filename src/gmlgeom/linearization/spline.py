from __future__ import annotations

import logging
from math import atan2
from typing import TYPE_CHECKING

import numpy as np
from scipy.linalg import LinAlgError, solve_banded

from gmlgeom.errors import SplineComputationError, UnorderedControlPointsError, UnsupportedDimensionError
from gmlgeom.model.geometry_primitives import CubicSpline, Point

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def _check_monotonic(xs: npt.NDArray[np.float64]) -> bool:
    """
    Check that abscissas are ordered in one direction.

    Raises:
        UnorderedControlPointsError: If the order changes direction.

    Returns:
        True for ascending order, False for descending order.
    """
    ascending = not xs[0] > xs[1]
    diffs = np.diff(xs)
    if (ascending and np.any(diffs < 0)) or (not ascending and np.any(diffs > 0)):
        raise UnorderedControlPointsError(
            "It is expected that the control points are ordered on the X-axis either ascendingly or descendingly."
        )
    return ascending


def second_derivative_system(
    h: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    start_tangent: float,
    end_tangent: float
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Tridiagonal system for the c coefficients of a clamped cubic spline.

    Args:
        h: Widths of the n intervals.
        ys: The n + 1 ordinates.
        start_tangent: Prescribed derivative at the first abscissa.
        end_tangent: Prescribed derivative at the last abscissa.

    Returns:
        The matrix in banded form (3, n + 1) as expected by `solve_banded`,
        and the right-hand side vector.
    """
    n = len(h)
    slopes = np.diff(ys) / h

    ab = np.zeros((3, n + 1), dtype=np.float64)
    ab[0, 1:] = h                   # upper diagonal
    ab[1, 0] = 2 * h[0]
    ab[1, 1:n] = 2 * (h[:-1] + h[1:])
    ab[1, n] = 2 * h[-1]
    ab[2, :-1] = h                  # lower diagonal

    rhs = np.empty(n + 1, dtype=np.float64)
    rhs[0] = 3 * slopes[0] - 3 * start_tangent
    rhs[1:n] = 3 * slopes[1:] - 3 * slopes[:-1]
    rhs[n] = 3 * end_tangent - 3 * slopes[-1]
    return ab, rhs


def sample_spline(
    xs: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    num_points: int
) -> npt.NDArray[np.float64]:
    """
    Evaluate the piecewise cubic at `num_points` uniformly spaced abscissas.

    Piece j is S_j(x) = a_j + b_j (x - x_j) + c_j (x - x_j)^2 + d_j (x - x_j)^3
    on [x_j, x_j+1].

    Returns:
        Array of shape (num_points, 2).
    """
    h = np.diff(xs)
    n = len(h)
    a = ys
    b = np.diff(a) / h - h * (2 * c[:-1] + c[1:]) / 3
    d = np.diff(c) / (3 * h)

    spacing = (xs[-1] - xs[0]) / (num_points - 1)
    samples = xs[0] + np.arange(num_points) * spacing

    # piece covering each sample
    seg = np.clip(np.searchsorted(xs, samples, side="left") - 1, 0, n - 1)
    t = samples - xs[seg]
    values = a[seg] + b[seg] * t + c[seg] * t**2 + d[seg] * t**3
    return np.column_stack((samples, values))


def interpolate_cubic_spline(spline: CubicSpline, num_points: int) -> list[Point]:
    """
    Linearize a 2D cubic spline given by control points and end tangents.

    The spline is fitted on the control points ordered ascendingly on the x-axis;
    descending input is fitted reversed and the result is reversed back, so the
    output always runs from the segment's start to its end.

    Raises:
        UnsupportedDimensionError: If the control points are not 2D.
        UnorderedControlPointsError: If the abscissas are not monotonic.
        SplineComputationError: If the equation system is singular.
    """
    if spline.coordinate_dimension != 2:
        raise UnsupportedDimensionError("Linearization of the cubic spline is only supported for a spline in 2D.")
    if len(spline.points) < 2:
        raise SplineComputationError("A cubic spline needs at least two control points.")

    pts = np.array([p.xy for p in spline.points], dtype=np.float64)
    start_tangent = atan2(spline.vector_at_start.y, spline.vector_at_start.x)
    end_tangent = atan2(spline.vector_at_end.y, spline.vector_at_end.x)

    ascending = _check_monotonic(pts[:, 0])
    if not ascending:
        pts = pts[::-1]
        # reversed traversal: the tangents swap ends and change direction
        start_tangent = atan2(-spline.vector_at_end.y, -spline.vector_at_end.x)
        end_tangent = atan2(-spline.vector_at_start.y, -spline.vector_at_start.x)

    xs, ys = pts[:, 0], pts[:, 1]
    h = np.diff(xs)
    if np.any(h == 0.0):
        logger.error("Cubic spline has coincident abscissas, the spline system is singular.")
        raise SplineComputationError("Control points with equal x ordinates make the spline system singular.")

    ab, rhs = second_derivative_system(h, ys, start_tangent, end_tangent)
    try:
        c = solve_banded((1, 1), ab, rhs)
    except (LinAlgError, ValueError) as exc:
        logger.error(f"Solving the cubic spline system failed: {exc}")
        raise SplineComputationError(f"Solving the cubic spline system failed: {exc}") from exc

    sampled = sample_spline(xs, ys, c, num_points)
    if not ascending:
        sampled = sampled[::-1]

    first = spline.points[0]
    out = [first]
    out.extend(
        Point(float(x), float(y), srs=first.srs, precision=first.precision) for x, y in sampled[1:-1]
    )
    out.append(spline.points[-1])
    return out
