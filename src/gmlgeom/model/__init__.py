"""
The MODEL layer contains pure data structures.
It has NO knowledge of linearization, shapely or GML parsing.
"""
from gmlgeom.model.criteria import LinearizationCriterion, MaxErrorCriterion, NumPointsCriterion
from gmlgeom.model.geometries import (
    CompositeCurve, CompositeGeometry, CompositeSolid, CompositeSurface, Curve, CurveType,
    Geometry, LinearRing, LineString, MultiCurve, MultiGeometry, MultiPoint, MultiSolid,
    MultiSurface, OrientableSurface, PointGeometry, Polygon, PolygonPatch, PolyhedralSurface,
    Ring, Solid, Surface,
)
from gmlgeom.model.geometry_primitives import (
    Arc, ArcString, Circle, CubicSpline, CurveSegment, GeodesicString, LineStringSegment,
    Point, SegmentType, UnsupportedSegment, Vector,
)
