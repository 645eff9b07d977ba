from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Optional

from gmlgeom.errors import UnsupportedGeometryTypeError

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from gmlgeom.model.geometries import Geometry
    from gmlgeom.planar import PlanarConverter

logger = logging.getLogger(__name__)

_NOT_CONVERTED = object()


@dataclass
class ElementContext:
    """
    The geometry under validation together with its planar conversion.

    The planar geometry is computed on first use and cached, so validators
    sharing a context convert only once. A context belongs to one validation
    call and is not retained by validators.
    """
    element_id: Optional[str]
    geometry: Geometry
    converter: PlanarConverter
    _planar: object = field(default=_NOT_CONVERTED, init=False, repr=False)

    def get_planar_geometry(self) -> Optional[BaseGeometry]:
        """
        Planar form of the geometry, or None if its kind cannot be converted.

        Callers treat None as "could not be evaluated" (see ValidationResult.fail_silently).
        """
        if self._planar is _NOT_CONVERTED:
            try:
                self._planar = self.converter.to_planar(self.geometry)
            except UnsupportedGeometryTypeError as e:
                logger.debug(f"No planar geometry for element '{self.element_id}': {e}")
                self._planar = None
        else:
            logger.debug(f"Using cached planar geometry for element '{self.element_id}'.")
        return self._planar  # type: ignore[return-value]
