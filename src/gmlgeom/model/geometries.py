"""
Geometry model: curves, surfaces, solids and aggregates.

The classes mirror the GML geometry types the validators distinguish. Each
family is a closed set; code that dispatches on geometry kind uses ``match``
with class patterns, checking solids before multi geometries because a
MultiSolid is also a MultiGeometry.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar, List, Optional

from gmlgeom.model.geometry_primitives import (
    CurveSegment, LineStringSegment, Point, join_points
)


class Geometry:
    """Marker base class for everything that can be validated."""
    id: Optional[str]
    srs: Optional[str]


class CurveType(StrEnum):
    CURVE = "Curve"
    LINE_STRING = "LineString"
    RING = "Ring"
    COMPOSITE_CURVE = "CompositeCurve"


# ------------------------------------------------------------------------------
# Points
# ------------------------------------------------------------------------------
@dataclass
class PointGeometry(Geometry):
    """A gml:Point."""
    point: Point
    id: Optional[str] = None
    srs: Optional[str] = None


# ------------------------------------------------------------------------------
# Curves
# ------------------------------------------------------------------------------
@dataclass
class Curve(Geometry):
    """A curve composed of one or more segments."""
    segments: List[CurveSegment] = field(default_factory=list)
    id: Optional[str] = None
    srs: Optional[str] = None
    curve_type: ClassVar[CurveType] = CurveType.CURVE

    def points(self) -> List[Point]:
        """Control points of all segments, shared boundary points only once."""
        return join_points([s.control_points for s in self.segments])

    @property
    def start_point(self) -> Point:
        return self.segments[0].start_point

    @property
    def end_point(self) -> Point:
        return self.segments[-1].end_point

    def is_closed(self) -> bool:
        return self.start_point.xy == self.end_point.xy


@dataclass
class LineString(Curve):
    """A curve with a single line string segment."""
    curve_type: ClassVar[CurveType] = CurveType.LINE_STRING

    @classmethod
    def from_points(cls, points: List[Point], id: Optional[str] = None, srs: Optional[str] = None) -> LineString:
        return cls(segments=[LineStringSegment(list(points))], id=id, srs=srs)


@dataclass
class LinearRing(LineString):
    """A closed line string."""


@dataclass
class Ring(Curve):
    """A closed curve made of member curves joined end to end."""
    members: List[Curve] = field(default_factory=list)
    curve_type: ClassVar[CurveType] = CurveType.RING

    def __post_init__(self) -> None:
        self.segments = [s for member in self.members for s in member.segments]


@dataclass
class CompositeCurve(Curve):
    """A sequence of member curves; like a ring, but not necessarily closed."""
    members: List[Curve] = field(default_factory=list)
    curve_type: ClassVar[CurveType] = CurveType.COMPOSITE_CURVE

    def __post_init__(self) -> None:
        self.segments = [s for member in self.members for s in member.segments]


# ------------------------------------------------------------------------------
# Surfaces
# ------------------------------------------------------------------------------
@dataclass
class PolygonPatch:
    """A planar patch bounded by an exterior ring and optional interior rings."""
    exterior: Curve
    interiors: List[Curve] = field(default_factory=list)


@dataclass
class Surface(Geometry):
    """A surface made of one or more polygon patches."""
    patches: List[PolygonPatch] = field(default_factory=list)
    id: Optional[str] = None
    srs: Optional[str] = None

    def get_patches(self) -> List[PolygonPatch]:
        return self.patches


@dataclass
class Polygon(Surface):
    """A surface with exactly one patch."""
    exterior: Optional[Curve] = None
    interiors: List[Curve] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.exterior is not None:
            self.patches = [PolygonPatch(self.exterior, list(self.interiors))]


@dataclass
class PolyhedralSurface(Surface):
    """A surface whose patches are all polygons (also used for triangulated surfaces)."""


@dataclass
class CompositeSurface(Surface):
    """A surface assembled from member surfaces; its patches are theirs."""
    members: List[Surface] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.patches = [p for member in self.members for p in member.get_patches()]


@dataclass
class OrientableSurface(Surface):
    """A surface with an orientation flag on top of a base surface."""
    base_surface: Optional[Surface] = None
    orientation: str = "+"

    def __post_init__(self) -> None:
        if self.base_surface is not None:
            self.patches = list(self.base_surface.get_patches())


# ------------------------------------------------------------------------------
# Solids
# ------------------------------------------------------------------------------
@dataclass
class Solid(Geometry):
    """A volume bounded by an exterior shell and optional interior shells."""
    exterior: Optional[Surface] = None
    interiors: List[Surface] = field(default_factory=list)
    id: Optional[str] = None
    srs: Optional[str] = None


@dataclass
class CompositeSolid(Geometry):
    """Solids sharing boundary surfaces."""
    members: List[Solid] = field(default_factory=list)
    id: Optional[str] = None
    srs: Optional[str] = None


# ------------------------------------------------------------------------------
# Aggregates
# ------------------------------------------------------------------------------
@dataclass
class MultiGeometry(Geometry):
    """An unconstrained collection of geometries."""
    members: List[Geometry] = field(default_factory=list)
    id: Optional[str] = None
    srs: Optional[str] = None


@dataclass
class MultiPoint(MultiGeometry):
    pass


@dataclass
class MultiCurve(MultiGeometry):
    pass


@dataclass
class MultiSurface(MultiGeometry):
    pass


@dataclass
class MultiSolid(MultiGeometry):
    pass


@dataclass
class CompositeGeometry(Geometry):
    """A geometric complex of heterogeneous primitives (gml:GeometricComplex)."""
    members: List[Geometry] = field(default_factory=list)
    id: Optional[str] = None
    srs: Optional[str] = None
