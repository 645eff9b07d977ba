"""
Planar Conversion
=================
Maps the curved geometry model onto shapely geometries.

Curves are linearized first; the resulting geometries are 2D (z ordinates are
dropped) because union and self-intersection are planar operations.
Solids have no planar counterpart and raise UnsupportedGeometryTypeError.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import shapely
from shapely.geometry import (
    GeometryCollection, LinearRing as PlanarLinearRing, LineString as PlanarLineString,
    MultiLineString, MultiPoint as PlanarMultiPoint, MultiPolygon, Point as PlanarPoint,
    Polygon as PlanarPolygon,
)
from shapely.geometry.base import BaseGeometry

from gmlgeom.config import default_criterion
from gmlgeom.errors import UnsupportedGeometryTypeError
from gmlgeom.linearization.linearizer import CurveLinearizer
from gmlgeom.model.geometries import (
    CompositeGeometry, CompositeSolid, Curve, Geometry, LinearRing, MultiCurve,
    MultiGeometry, MultiPoint, MultiSolid, MultiSurface, PointGeometry, PolygonPatch, Ring, Solid,
    Surface,
)

if TYPE_CHECKING:
    from gmlgeom.model.criteria import LinearizationCriterion

logger = logging.getLogger(__name__)


class PlanarConverter:
    """
    Converts model geometries into shapely geometries.
    """

    def __init__(
        self,
        linearizer: Optional[CurveLinearizer] = None,
        criterion: Optional[LinearizationCriterion] = None
    ) -> None:
        self.linearizer = linearizer or CurveLinearizer()
        self.criterion = criterion or default_criterion()

    def curve_coordinates(self, curve: Curve) -> list[tuple[float, float]]:
        """Linearized 2D coordinates of a curve, without consecutive duplicates."""
        linear = self.linearizer.linearize(curve, self.criterion)
        return [p.xy for p in linear.points()]

    def patch_to_polygon(self, patch: PolygonPatch) -> PlanarPolygon:
        shell = self.curve_coordinates(patch.exterior)
        holes = [self.curve_coordinates(ring) for ring in patch.interiors]
        return PlanarPolygon(shell, holes)

    def surface_to_planar(self, surface: Surface) -> BaseGeometry:
        """One patch gives a polygon, several patches give the union of their polygons."""
        polygons = [self.patch_to_polygon(patch) for patch in surface.get_patches()]
        if not polygons:
            return PlanarPolygon()
        if len(polygons) == 1:
            return polygons[0]
        logger.debug(f"Building the union of {len(polygons)} surface patches.")
        return shapely.union_all(polygons)

    def to_planar(self, geometry: Geometry) -> BaseGeometry:
        """
        Convert a model geometry into a shapely geometry.

        Raises:
            UnsupportedGeometryTypeError: For solids and unknown geometry kinds.
        """
        match geometry:
            case PointGeometry(point=p):
                return PlanarPoint(p.xy)
            case Ring() | LinearRing():
                return PlanarLinearRing(self.curve_coordinates(geometry))
            case Curve():
                return PlanarLineString(self.curve_coordinates(geometry))
            case Surface():
                return self.surface_to_planar(geometry)
            case Solid() | CompositeSolid() | MultiSolid():
                raise UnsupportedGeometryTypeError(
                    f"Geometry type '{type(geometry).__name__}' has no planar representation."
                )
            case MultiPoint(members=members):
                return PlanarMultiPoint([self.to_planar(m) for m in members])
            case MultiCurve(members=members):
                return MultiLineString([self.curve_coordinates(m) for m in members])
            case MultiSurface(members=members):
                return MultiPolygon(_polygon_parts([self.to_planar(m) for m in members]))
            case MultiGeometry(members=members) | CompositeGeometry(members=members):
                return GeometryCollection([self.to_planar(m) for m in members])
            case _:
                raise UnsupportedGeometryTypeError(
                    f"Geometry type '{type(geometry).__name__}' is not supported."
                )


def _polygon_parts(geometries: list[BaseGeometry]) -> list[PlanarPolygon]:
    parts: list[PlanarPolygon] = []
    for g in geometries:
        if isinstance(g, MultiPolygon):
            parts.extend(g.geoms)
        elif isinstance(g, PlanarPolygon) and not g.is_empty:
            parts.append(g)
    return parts
