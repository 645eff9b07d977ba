"""
gmlgeom
=======
Linearization of curved GML geometries and topological validation.

    from gmlgeom import CurveLinearizer, MaxErrorCriterion
    line = CurveLinearizer().linearize(curve, MaxErrorCriterion(0.001))
"""
from gmlgeom.config import APP_VERSION as __version__
from gmlgeom.errors import GeometryError, GmlParseError, LinearizationError, UnsupportedGeometryTypeError
from gmlgeom.linearization import CurveLinearizer
from gmlgeom.model.criteria import MaxErrorCriterion, NumPointsCriterion
from gmlgeom.planar import PlanarConverter
from gmlgeom.srs import SrsLookup
from gmlgeom.validation import ElementContext, ValidationResult, validate
