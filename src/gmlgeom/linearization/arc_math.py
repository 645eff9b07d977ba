from __future__ import annotations

from math import acos, atan2, ceil, pi, sqrt

import numpy as np

from gmlgeom.config import EPSILON, CIRCLE_ANGLE_EPSILON
from gmlgeom.errors import CollinearPointsError, PointCountUnderdeterminedError
from gmlgeom.model.geometry_primitives import Point, Vector

TWO_PI = 2.0 * pi


def find_shift(p0: Point, p1: Point, p2: Point) -> tuple[float, float]:
    """
    Midpoint of the bounding box of three points, per axis.

    Subtracting it from the points moves them close to the origin, which keeps
    the circumcenter and angle computations accurate for large coordinates
    (e.g. projected CRS values in the millions).
    """
    xs = (p0.x, p1.x, p2.x)
    ys = (p0.y, p1.y, p2.y)
    return (max(xs) + min(xs)) / 2, (max(ys) + min(ys)) / 2


def _shift_down(p0: Point, p1: Point, p2: Point) -> tuple[Point, Point, Point, float, float]:
    # arcs are planar in XY, z of the shifted points is dropped
    dx, dy = find_shift(p0, p1, p2)
    s0, s1, s2 = (Point(p.x - dx, p.y - dy, srs=p.srs, precision=p.precision) for p in (p0, p1, p2))
    return s0, s1, s2, dx, dy


def _signed_area(p0: Point, p1: Point, p2: Point) -> float:
    # trapezoid form of the shoelace formula; positive for counter-clockwise order
    return ((p2.x - p0.x) * ((p2.y + p0.y) / 2)
            + (p1.x - p2.x) * ((p1.y + p2.y) / 2)
            + (p0.x - p1.x) * ((p0.y + p1.y) / 2))


def are_collinear(p0: Point, p1: Point, p2: Point) -> bool:
    """
    Test whether three points lie on a straight line.

    This is the only collinearity test used during linearization, so arcs are
    classified consistently everywhere.

    Args:
        p0: First point.
        p1: Second point.
        p2: Third point.

    Returns:
        True if the absolute signed area of the (shifted) triangle is below EPSILON.
    """
    s0, s1, s2, _, _ = _shift_down(p0, p1, p2)
    return abs(_signed_area(s0, s1, s2)) < EPSILON


def is_clockwise(p0: Point, p1: Point, p2: Point) -> bool:
    """
    Orientation of three points from the sign of their triangle area.

    Raises:
        CollinearPointsError: If the points are collinear (no orientation exists).
    """
    if are_collinear(p0, p1, p2):
        raise CollinearPointsError("Cannot evaluate is_clockwise(). The three points are collinear.")
    return _signed_area(p0, p1, p2) < 0.0


def circumcenter(p0: Point, p1: Point, p2: Point) -> Point:
    """
    Center of the circle through three points.

    Uses the barycentric form: each point is weighted by the squared length of
    the opposite edge times the dot product of its adjacent edges, normalized
    by 2 * |(p0 - p1) x (p1 - p2)|^2. Only x and y are used.

    Raises:
        CollinearPointsError: If the points are collinear.

    Returns:
        The center, carrying p0's srs and precision.
    """
    s0, s1, s2, dx, dy = _shift_down(p0, p1, p2)
    if are_collinear(s0, s1, s2):
        raise CollinearPointsError("The given points are collinear, no circum center can be calculated.")

    a = s0.to_vector()
    b = s1.to_vector()
    c = s2.to_vector()

    ab = s0 - s1
    ac = s0 - s2
    bc = s1 - s2
    ba = s1 - s0
    ca = s2 - s0
    cb = s2 - s1

    denominator = 2 * ab.cross(bc).length_squared

    center: Vector = (
        a * (bc.length_squared * ab.dot(ac) / denominator)
        + b * (ac.length_squared * ba.dot(bc) / denominator)
        + c * (ab.length_squared * ca.dot(cb) / denominator)
    )
    return Point(center.x + dx, center.y + dy, srs=p0.srs, precision=p0.precision)


def angle_step(start_angle: float, end_angle: float, num_points: int, clockwise: bool) -> float:
    """
    Signed angular increment between consecutive interpolation points.

    Args:
        start_angle: Angle of the start point around the center (radians).
        end_angle: Angle of the end point; equal to `start_angle` for a full circle.
        num_points: Number of points to emit, including both end points.
        clockwise: Sweep direction.

    Returns:
        Negative step for clockwise sweeps, positive otherwise.
    """
    is_circle = abs(start_angle - end_angle) < CIRCLE_ANGLE_EPSILON
    if is_circle:
        sweep = TWO_PI
    elif clockwise:
        sweep = start_angle - end_angle
        if sweep < 0:
            sweep += TWO_PI
    else:
        sweep = end_angle - start_angle
        if sweep < 0:
            sweep += TWO_PI
    step = sweep / (num_points - 1)
    return -step if clockwise else step


def _center_and_angles(s0: Point, s1: Point, s2: Point, is_circle: bool) -> tuple[Point, float, float, float]:
    center = circumcenter(s0, s1, s2)
    dx, dy = s0.x - center.x, s0.y - center.y
    start_angle = atan2(dy, dx)
    end_angle = start_angle if is_circle else atan2(s2.y - center.y, s2.x - center.x)
    return center, start_angle, end_angle, sqrt(dx * dx + dy * dy)


def num_points_for_max_error(
    p0: Point, p1: Point, p2: Point, is_circle: bool, max_error: float, max_num_points: int = 0
) -> int:
    """
    Smallest number of points whose chords stay within `max_error` of the arc.

    A chord spanning the angle `t` deviates r * (1 - cos(t / 2)) from the circle,
    hence the step 2 * acos(1 - max_error / r).

    Args:
        max_num_points: Upper bound for the result, 0 for no bound.

    Returns:
        Number of points including both end points (at least 2).
    """
    s0, s1, s2, _, _ = _shift_down(p0, p1, p2)
    _, start_angle, end_angle, radius = _center_and_angles(s0, s1, s2, is_circle)

    cos_half_step = min(1.0, max(-1.0, 1.0 - max_error / radius))
    step = 2 * acos(cos_half_step)

    if is_circle:
        sweep = TWO_PI
    elif not is_clockwise(s0, s1, s2):
        if end_angle < start_angle:
            end_angle += TWO_PI
        sweep = end_angle - start_angle
    else:
        if start_angle < end_angle:
            start_angle += TWO_PI
        sweep = start_angle - end_angle

    if step == 0.0:
        # max_error negligible against the radius
        if max_num_points > 0:
            return max_num_points
        raise PointCountUnderdeterminedError(f"max_error {max_error} is too small for radius {radius}.")
    num_points = max(2, ceil(sweep / step) + 1)
    if 0 < max_num_points < num_points:
        return max_num_points
    return num_points


def interpolate_arc(
    p0: Point,
    p1: Point,
    p2: Point,
    num_points: int,
    is_circle: bool,
    tolerance: float = 0.0
) -> list[Point]:
    """
    Generate points along the circular arc from p0 through p1 to p2.

    The points must not be collinear. Computation happens on points shifted
    towards the origin; outputs are shifted back. The first and last points are
    the original p0 and p2 (p0 twice for a full circle), so segment end points
    are preserved exactly.

    Args:
        p0: Start point.
        p1: Intermediate point on the arc.
        p2: End point (ignored for a full circle).
        num_points: Number of points to emit (including end points), at least 2.
        is_circle: Sweep the full circle starting and ending at p0.
        tolerance: Added to the radius of interpolated points.

    Returns:
        List of `num_points` points.
    """
    s0, s1, s2, dx, dy = _shift_down(p0, p1, p2)
    center, start_angle, end_angle, radius = _center_and_angles(s0, s1, s2, is_circle)
    radius += tolerance

    step = angle_step(start_angle, end_angle, num_points, is_clockwise(s0, s1, s2))

    angles = start_angle + np.arange(1, num_points - 1) * step
    xs = center.x + np.cos(angles) * radius + dx
    ys = center.y + np.sin(angles) * radius + dy

    points = [p0]
    points.extend(Point(float(x), float(y), srs=p0.srs, precision=p0.precision) for x, y in zip(xs, ys))
    points.append(p0 if is_circle else p2)
    return points
