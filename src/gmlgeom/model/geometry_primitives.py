"""
Geometric Primitives: points, vectors and curve segments.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar, List, Optional, Union
import math

@dataclass
class Vector:
    """
    A vector in 3D space representing direction and magnitude.
    """
    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    @property
    def length_squared(self) -> float:
        return self.x**2 + self.y**2 + self.z**2

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )


@dataclass(frozen=True)
class Point:
    """
    A position with two or three ordinates.

    The coordinate reference system and the precision model are opaque to
    the linearization and validation code and are passed through unchanged.
    """
    x: float
    y: float
    z: Optional[float] = None  # None for 2D points
    srs: Optional[str] = None
    precision: Any = None

    @property
    def coordinate_dimension(self) -> int:
        return 2 if self.z is None else 3

    @property
    def xy(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def coordinate(self) -> tuple[float, ...]:
        if self.z is None:
            return self.x, self.y
        return self.x, self.y, self.z

    def to_vector(self) -> Vector:
        return Vector(self.x, self.y, 0.0 if self.z is None else self.z)

    def __sub__(self, other: Point) -> Vector:
        # Point - Point = Vector (Direction)
        if isinstance(other, Point):
            return self.to_vector() - other.to_vector()
        raise TypeError("Can only subtract a Point from a Point.")

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


# ------------------------------------------------------------------------------
# Curve segments
# ------------------------------------------------------------------------------
class SegmentType(StrEnum):
    LINE_STRING_SEGMENT = "LineStringSegment"
    ARC = "Arc"
    CIRCLE = "Circle"
    ARC_STRING = "ArcString"
    CUBIC_SPLINE = "CubicSpline"
    GEODESIC_STRING = "GeodesicString"
    UNSUPPORTED = "Unsupported"


@dataclass
class LineStringSegment:
    """A sequence of straight lines through the control points."""
    points: List[Point] = field(default_factory=list)
    segment_type: ClassVar[SegmentType] = SegmentType.LINE_STRING_SEGMENT

    @property
    def control_points(self) -> List[Point]:
        return self.points

    @property
    def start_point(self) -> Point:
        return self.points[0]

    @property
    def end_point(self) -> Point:
        return self.points[-1]


@dataclass
class Arc:
    """A circular arc from p0 through p1 to p2."""
    p0: Point
    p1: Point
    p2: Point
    segment_type: ClassVar[SegmentType] = SegmentType.ARC

    @property
    def control_points(self) -> List[Point]:
        return [self.p0, self.p1, self.p2]

    @property
    def start_point(self) -> Point:
        return self.p0

    @property
    def end_point(self) -> Point:
        return self.p2

    @property
    def is_circle(self) -> bool:
        return False


@dataclass
class Circle(Arc):
    """A full circle through three points; it starts and ends at p0."""
    segment_type: ClassVar[SegmentType] = SegmentType.CIRCLE

    @property
    def end_point(self) -> Point:
        return self.p0

    @property
    def is_circle(self) -> bool:
        return True


@dataclass
class ArcString:
    """Consecutive arcs sharing their end points: (p0, p1, p2), (p2, p3, p4), ..."""
    points: List[Point] = field(default_factory=list)
    segment_type: ClassVar[SegmentType] = SegmentType.ARC_STRING

    @property
    def control_points(self) -> List[Point]:
        return self.points

    @property
    def start_point(self) -> Point:
        return self.points[0]

    @property
    def end_point(self) -> Point:
        return self.points[-1]


@dataclass
class CubicSpline:
    """A cubic spline through the control points with prescribed end tangents."""
    points: List[Point]
    vector_at_start: Vector
    vector_at_end: Vector
    segment_type: ClassVar[SegmentType] = SegmentType.CUBIC_SPLINE

    @property
    def control_points(self) -> List[Point]:
        return self.points

    @property
    def start_point(self) -> Point:
        return self.points[0]

    @property
    def end_point(self) -> Point:
        return self.points[-1]

    @property
    def coordinate_dimension(self) -> int:
        return max(p.coordinate_dimension for p in self.points)


@dataclass
class GeodesicString:
    """Geodesics between the control points; treated as already linear."""
    points: List[Point] = field(default_factory=list)
    segment_type: ClassVar[SegmentType] = SegmentType.GEODESIC_STRING

    @property
    def control_points(self) -> List[Point]:
        return self.points

    @property
    def start_point(self) -> Point:
        return self.points[0]

    @property
    def end_point(self) -> Point:
        return self.points[-1]


@dataclass
class UnsupportedSegment:
    """A segment kind we can read but not linearize (e.g. Bezier, Clothoid)."""
    kind: str
    points: List[Point] = field(default_factory=list)
    segment_type: ClassVar[SegmentType] = SegmentType.UNSUPPORTED

    @property
    def control_points(self) -> List[Point]:
        return self.points

    @property
    def start_point(self) -> Point:
        return self.points[0]

    @property
    def end_point(self) -> Point:
        return self.points[-1]


# Union type for list handling
CurveSegment = Union[
    LineStringSegment, Arc, Circle, ArcString, CubicSpline, GeodesicString, UnsupportedSegment
]


def join_points(runs: List[List[Point]]) -> List[Point]:
    """
    Concatenate point runs, dropping the first point of a run when it
    coincides with the last point already collected.
    """
    out: List[Point] = []
    for run in runs:
        for p in run:
            if out and out[-1].xy == p.xy:
                continue
            out.append(p)
    return out
