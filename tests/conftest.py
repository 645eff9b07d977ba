import pytest

from gmlgeom.linearization import CurveLinearizer
from gmlgeom.model import LinearRing, Point, Polygon, PolygonPatch, Surface
from gmlgeom.planar import PlanarConverter
from gmlgeom.validation import ElementContext, ValidationResult


def ring(*coords):
    """LinearRing through the given (x, y) tuples; the closing point is added."""
    points = [Point(x, y) for x, y in coords]
    return LinearRing.from_points(points + [points[0]])


def square(x0, y0, size=1.0):
    return ring((x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size))


def surface(*exteriors, id="surface"):
    return Surface(patches=[PolygonPatch(e) for e in exteriors], id=id)


def polygon(exterior, id="polygon"):
    return Polygon(exterior=exterior, id=id)


@pytest.fixture
def linearizer():
    return CurveLinearizer()


@pytest.fixture
def converter():
    return PlanarConverter()


@pytest.fixture
def make_context(converter):
    def _make(geometry, element_id=None):
        return ElementContext(element_id or getattr(geometry, "id", None), geometry, converter)

    return _make


@pytest.fixture
def result():
    return ValidationResult()
