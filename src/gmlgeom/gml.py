"""
GML Reader
==========
Builds the geometry model from GML 3.1 / 3.2 elements parsed with lxml.

Why is this file needed?
------------------------
1. Input: The validators work on the model, while datasets arrive as GML
   documents. Element names are matched by local name, so both GML
   namespaces (and documents with odd prefixes) are read the same way.
2. Curves: Arcs, circles, arc strings and cubic splines are kept as curved
   segments; linearization happens later, on demand.

Every geometry kind has a reader function registered under its local name.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from lxml import etree

from gmlgeom.config import GML_NAMESPACES
from gmlgeom.errors import GmlParseError
from gmlgeom.model.geometries import (
    CompositeCurve, CompositeGeometry, CompositeSolid, CompositeSurface, Curve, Geometry, LinearRing,
    LineString, MultiCurve, MultiGeometry, MultiPoint, MultiSolid, MultiSurface, OrientableSurface,
    PointGeometry, Polygon, PolygonPatch, PolyhedralSurface, Ring, Solid, Surface,
)
from gmlgeom.model.geometry_primitives import (
    Arc, ArcString, Circle, CubicSpline, CurveSegment, GeodesicString, LineStringSegment, Point,
    UnsupportedSegment, Vector,
)
from gmlgeom.srs import SrsLookup, local_name

logger = logging.getLogger(__name__)

GML_ID = "{%s}id"
XLINK_HREF = "{http://www.w3.org/1999/xlink}href"

Reader = Callable[["_GeometryReader", etree._Element], Geometry]
_READERS: dict[str, Reader] = {}


def register_reader(*names: str) -> Callable[[Reader], Reader]:
    """Decorator to register a geometry reader under one or more local names."""
    def decorator(func: Reader) -> Reader:
        for name in names:
            if name in _READERS:
                raise ValueError(f"Reader for '{name}' is already registered")
            _READERS[name] = func
        return func
    return decorator


def supported_geometry_names() -> list[str]:
    return sorted(_READERS)


# ------------------------------------------------------------------------------
# Element helpers
# ------------------------------------------------------------------------------
def _children(element: etree._Element, name: Optional[str] = None) -> List[etree._Element]:
    return [c for c in element if isinstance(c.tag, str) and (name is None or local_name(c) == name)]


def _child(element: etree._Element, name: str) -> Optional[etree._Element]:
    found = _children(element, name)
    return found[0] if found else None


def _single_child(element: etree._Element) -> etree._Element:
    """The one element nested in a property element such as gml:exterior."""
    if element.get(XLINK_HREF) is not None:
        raise GmlParseError(f"Property '{local_name(element)}' uses an xlink reference, which is not supported.")
    found = _children(element)
    if len(found) != 1:
        raise GmlParseError(f"Property '{local_name(element)}' must contain exactly one element, got {len(found)}.")
    return found[0]


def _gml_id(element: etree._Element) -> Optional[str]:
    for ns in GML_NAMESPACES:
        value = element.get(GML_ID % ns)
        if value is not None:
            return value
    return None


def _srs_dimension(element: etree._Element) -> int:
    """srsDimension of the element or of its nearest ancestor, 2 if absent."""
    node: Optional[etree._Element] = element
    while node is not None:
        value = node.get("srsDimension")
        if value is not None:
            try:
                dimension = int(value)
            except ValueError as exc:
                raise GmlParseError(f"Invalid srsDimension '{value}'.") from exc
            if dimension not in (2, 3):
                raise GmlParseError(f"Unsupported srsDimension {dimension}.")
            return dimension
        node = node.getparent()
    return 2


def _floats(text: Optional[str], what: str) -> List[float]:
    try:
        return [float(v) for v in (text or "").split()]
    except ValueError as exc:
        raise GmlParseError(f"Invalid number in {what}: {exc}") from exc


def _make_point(values: List[float], srs: Optional[str]) -> Point:
    if len(values) == 2:
        return Point(values[0], values[1], srs=srs)
    if len(values) == 3:
        return Point(values[0], values[1], values[2], srs=srs)
    raise GmlParseError(f"A position needs 2 or 3 ordinates, got {len(values)}.")


def _legacy_coordinates(element: etree._Element, srs: Optional[str]) -> List[Point]:
    cs = element.get("cs", ",")
    ts = element.get("ts", " ")
    decimal = element.get("decimal", ".")
    points = []
    for tuple_text in (element.text or "").strip().split(ts):
        if not tuple_text.strip():
            continue
        values = [v.replace(decimal, ".") for v in tuple_text.strip().split(cs)]
        points.append(_make_point(_floats(" ".join(values), "coordinates"), srs))
    return points


def _pos_list(element: etree._Element, srs: Optional[str]) -> List[Point]:
    dimension = _srs_dimension(element)
    values = _floats(element.text, "posList")
    if len(values) % dimension != 0:
        raise GmlParseError(f"posList with {len(values)} ordinates does not match srsDimension {dimension}.")
    return [_make_point(values[i:i + dimension], srs) for i in range(0, len(values), dimension)]


# ------------------------------------------------------------------------------
# Reader
# ------------------------------------------------------------------------------
class _GeometryReader:
    def __init__(self, srs_lookup: Optional[SrsLookup]) -> None:
        self.srs_lookup = srs_lookup

    def srs_of(self, element: etree._Element) -> Optional[str]:
        if self.srs_lookup is not None:
            return self.srs_lookup.determine_srs_name(element)
        return element.get("srsName")

    def read(self, element: etree._Element) -> Geometry:
        name = local_name(element)
        reader = _READERS.get(name)
        if reader is None:
            raise GmlParseError(f"Unsupported GML geometry element '{name}'.")
        return reader(self, element)

    def read_property(self, prop: etree._Element) -> Geometry:
        return self.read(_single_child(prop))

    def positions(self, element: etree._Element, srs: Optional[str]) -> List[Point]:
        """Control points of a point-list element, in document order."""
        points: List[Point] = []
        for child in _children(element):
            match local_name(child):
                case "posList":
                    points.extend(_pos_list(child, srs))
                case "pos":
                    points.append(_make_point(_floats(child.text, "pos"), srs))
                case "pointProperty" | "pointRep":
                    point = self.read_property(child)
                    if not isinstance(point, PointGeometry):
                        raise GmlParseError(f"{local_name(child)} must contain a Point, got '{type(point).__name__}'.")
                    points.append(point.point)
                case "coordinates":
                    points.extend(_legacy_coordinates(child, srs))
        return points

    def curve(self, element: etree._Element) -> Curve:
        geometry = self.read(element)
        if not isinstance(geometry, Curve):
            raise GmlParseError(f"Expected a curve, got '{local_name(element)}'.")
        return geometry

    def surface(self, element: etree._Element) -> Surface:
        geometry = self.read(element)
        if not isinstance(geometry, Surface):
            raise GmlParseError(f"Expected a surface, got '{local_name(element)}'.")
        return geometry

    def members(self, element: etree._Element, single: str, plural: str) -> List[Geometry]:
        """Members from `xxxMember` properties and `xxxMembers` arrays."""
        out: List[Geometry] = []
        for child in _children(element):
            name = local_name(child)
            if name == single:
                out.append(self.read_property(child))
            elif name == plural:
                out.extend(self.read(member) for member in _children(child))
        return out

    def segment(self, element: etree._Element, srs: Optional[str]) -> CurveSegment:
        name = local_name(element)
        points = self.positions(element, srs)
        match name:
            case "LineStringSegment":
                return LineStringSegment(points)
            case "Arc" | "Circle":
                if len(points) != 3:
                    raise GmlParseError(f"{name} needs exactly 3 control points, got {len(points)}.")
                cls = Circle if name == "Circle" else Arc
                return cls(points[0], points[1], points[2])
            case "ArcString":
                return ArcString(points)
            case "CubicSpline":
                return CubicSpline(
                    points,
                    vector_at_start=self._vector(element, "vectorAtStart"),
                    vector_at_end=self._vector(element, "vectorAtEnd"),
                )
            case "GeodesicString" | "Geodesic":
                return GeodesicString(points)
            case _:
                logger.debug(f"Keeping curve segment '{name}' as unsupported.")
                return UnsupportedSegment(name, points)

    @staticmethod
    def _vector(element: etree._Element, name: str) -> Vector:
        child = _child(element, name)
        if child is None:
            raise GmlParseError(f"CubicSpline without {name}.")
        values = _floats(child.text, name)
        if len(values) not in (2, 3):
            raise GmlParseError(f"{name} needs 2 or 3 components, got {len(values)}.")
        return Vector(*values)

    def patch(self, element: etree._Element) -> PolygonPatch:
        exterior = _child(element, "exterior")
        if exterior is None:
            # Rectangle and Triangle only have an exterior, GML 3.1 also allows outerBoundaryIs
            exterior = _child(element, "outerBoundaryIs")
        if exterior is None:
            raise GmlParseError(f"{local_name(element)} without exterior.")
        interiors = _children(element, "interior") + _children(element, "innerBoundaryIs")
        return PolygonPatch(
            self.curve(_single_child(exterior)),
            [self.curve(_single_child(i)) for i in interiors],
        )


# ------------------------------------------------------------------------------
# Geometry readers
# ------------------------------------------------------------------------------
@register_reader("Point")
def _read_point(reader: _GeometryReader, element: etree._Element) -> PointGeometry:
    srs = reader.srs_of(element)
    points = reader.positions(element, srs)
    if len(points) != 1:
        raise GmlParseError(f"Point needs exactly one position, got {len(points)}.")
    return PointGeometry(points[0], id=_gml_id(element), srs=srs)


@register_reader("LineString", "LinearRing")
def _read_line_string(reader: _GeometryReader, element: etree._Element) -> LineString:
    srs = reader.srs_of(element)
    points = reader.positions(element, srs)
    if len(points) < 2:
        raise GmlParseError(f"{local_name(element)} needs at least 2 positions, got {len(points)}.")
    cls = LinearRing if local_name(element) == "LinearRing" else LineString
    return cls.from_points(points, id=_gml_id(element), srs=srs)


@register_reader("Curve")
def _read_curve(reader: _GeometryReader, element: etree._Element) -> Curve:
    srs = reader.srs_of(element)
    segments_element = _child(element, "segments")
    if segments_element is None:
        raise GmlParseError("Curve without segments.")
    segments = [reader.segment(s, srs) for s in _children(segments_element)]
    if not segments:
        raise GmlParseError("Curve without segments.")
    return Curve(segments=segments, id=_gml_id(element), srs=srs)


@register_reader("OrientableCurve")
def _read_orientable_curve(reader: _GeometryReader, element: etree._Element) -> Curve:
    base = _child(element, "baseCurve")
    if base is None:
        raise GmlParseError("OrientableCurve without baseCurve.")
    return reader.curve(_single_child(base))


@register_reader("Ring", "CompositeCurve")
def _read_ring(reader: _GeometryReader, element: etree._Element) -> Curve:
    members = [reader.curve(_single_child(m)) for m in _children(element, "curveMember")]
    if not members:
        raise GmlParseError(f"{local_name(element)} without curveMember.")
    cls = Ring if local_name(element) == "Ring" else CompositeCurve
    return cls(members=members, id=_gml_id(element), srs=reader.srs_of(element))


@register_reader("Polygon")
def _read_polygon(reader: _GeometryReader, element: etree._Element) -> Polygon:
    patch = reader.patch(element)
    return Polygon(
        exterior=patch.exterior, interiors=patch.interiors, id=_gml_id(element), srs=reader.srs_of(element)
    )


@register_reader("Surface", "PolyhedralSurface", "TriangulatedSurface", "Tin")
def _read_surface(reader: _GeometryReader, element: etree._Element) -> Surface:
    patch_elements: List[etree._Element] = []
    for name in ("patches", "polygonPatches", "trianglePatches"):
        for container in _children(element, name):
            patch_elements.extend(_children(container))
    if not patch_elements:
        raise GmlParseError(f"{local_name(element)} without patches.")
    patches = [reader.patch(p) for p in patch_elements]
    cls = Surface if local_name(element) == "Surface" else PolyhedralSurface
    return cls(patches=patches, id=_gml_id(element), srs=reader.srs_of(element))


@register_reader("CompositeSurface", "Shell")
def _read_composite_surface(reader: _GeometryReader, element: etree._Element) -> CompositeSurface:
    members = [reader.surface(_single_child(m)) for m in _children(element, "surfaceMember")]
    return CompositeSurface(members=members, id=_gml_id(element), srs=reader.srs_of(element))


@register_reader("OrientableSurface")
def _read_orientable_surface(reader: _GeometryReader, element: etree._Element) -> OrientableSurface:
    base = _child(element, "baseSurface")
    if base is None:
        raise GmlParseError("OrientableSurface without baseSurface.")
    return OrientableSurface(
        base_surface=reader.surface(_single_child(base)),
        orientation=element.get("orientation", "+"),
        id=_gml_id(element),
        srs=reader.srs_of(element),
    )


@register_reader("Solid")
def _read_solid(reader: _GeometryReader, element: etree._Element) -> Solid:
    exterior = _child(element, "exterior")
    return Solid(
        exterior=reader.surface(_single_child(exterior)) if exterior is not None else None,
        interiors=[reader.surface(_single_child(i)) for i in _children(element, "interior")],
        id=_gml_id(element),
        srs=reader.srs_of(element),
    )


@register_reader("CompositeSolid")
def _read_composite_solid(reader: _GeometryReader, element: etree._Element) -> CompositeSolid:
    members = []
    for m in _children(element, "solidMember"):
        solid = reader.read_property(m)
        if not isinstance(solid, Solid):
            raise GmlParseError(f"CompositeSolid member must be a Solid, got '{type(solid).__name__}'.")
        members.append(solid)
    return CompositeSolid(members=members, id=_gml_id(element), srs=reader.srs_of(element))


_MULTI_TYPES: dict[str, tuple[type[MultiGeometry], str, str]] = {
    "MultiPoint": (MultiPoint, "pointMember", "pointMembers"),
    "MultiCurve": (MultiCurve, "curveMember", "curveMembers"),
    "MultiSurface": (MultiSurface, "surfaceMember", "surfaceMembers"),
    "MultiSolid": (MultiSolid, "solidMember", "solidMembers"),
    "MultiGeometry": (MultiGeometry, "geometryMember", "geometryMembers"),
}


@register_reader(*_MULTI_TYPES)
def _read_multi(reader: _GeometryReader, element: etree._Element) -> MultiGeometry:
    cls, single, plural = _MULTI_TYPES[local_name(element)]
    return cls(members=reader.members(element, single, plural), id=_gml_id(element), srs=reader.srs_of(element))


@register_reader("GeometricComplex")
def _read_complex(reader: _GeometryReader, element: etree._Element) -> CompositeGeometry:
    members = [reader.read_property(e) for e in _children(element, "element")]
    return CompositeGeometry(members=members, id=_gml_id(element), srs=reader.srs_of(element))


# ------------------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------------------
def read_geometry(element: etree._Element, srs_lookup: Optional[SrsLookup] = None) -> Geometry:
    """
    Convert a GML geometry element into the geometry model.

    Args:
        element: The geometry element (e.g. gml:Polygon), not a property element.
        srs_lookup: Resolves the SRS of each geometry; without it only a direct
            `srsName` attribute is used.

    Raises:
        GmlParseError: If the element is not a supported geometry or is malformed.
    """
    return _GeometryReader(srs_lookup).read(element)


def _is_gml(element: etree._Element) -> bool:
    return isinstance(element.tag, str) and etree.QName(element).namespace in GML_NAMESPACES


def iter_geometries(root: etree._Element) -> Iterator[etree._Element]:
    """Yield the outermost GML geometry elements below (and including) root."""
    stack = [root]
    while stack:
        element = stack.pop()
        if _is_gml(element) and local_name(element) in _READERS:
            yield element
            continue
        stack.extend(reversed(_children(element)))


def parse_document(source: Union[str, Path, bytes]) -> etree._ElementTree:
    """
    Parse a GML document without resolving entities or accessing the network.

    Args:
        source: A file path, or the document content as bytes.

    Raises:
        GmlParseError: If the document is not well-formed.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False, remove_comments=True)
    try:
        if isinstance(source, bytes):
            return etree.ElementTree(etree.fromstring(source, parser))
        return etree.parse(str(source), parser)
    except (etree.XMLSyntaxError, OSError) as exc:
        raise GmlParseError(f"Cannot parse GML document: {exc}") from exc


def read_file(path: Union[str, Path], srs_lookup: Optional[SrsLookup] = None) -> List[Geometry]:
    """Read all outermost geometries of a GML file."""
    tree = parse_document(path)
    geometries = [read_geometry(e, srs_lookup) for e in iter_geometries(tree.getroot())]
    logger.info(f"Read {len(geometries)} geometries from '{path}'.")
    return geometries
