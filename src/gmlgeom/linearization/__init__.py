"""
Linearization of curved segments (arcs, circles, arc strings, cubic splines).
"""
from gmlgeom.linearization.arc_math import are_collinear, circumcenter, is_clockwise
from gmlgeom.linearization.linearizer import CurveLinearizer

__all__ = ["CurveLinearizer", "are_collinear", "circumcenter", "is_clockwise"]
