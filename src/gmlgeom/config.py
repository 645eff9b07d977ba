"""
Configuration & Numerical Constants
===================================
This module serves as the central registry for tolerances and defaults.

Why is this file needed?
------------------------
1. Consistency: Collinearity and full-circle checks must use the same
   epsilon everywhere, otherwise arcs are classified inconsistently.
2. Defaults: The command line and the planar conversion need a sane
   linearization criterion when the caller does not supply one.

Exports:
    EPSILON (float): Absolute signed-area threshold for collinearity.
    DEFAULT_TOLERANCE (float): Radius padding used when interpolating arcs.
    DEFAULT_MAX_ERROR (float): Default maximum chord deviation.
    DEFAULT_MAX_NUM_POINTS (int): Default cap for computed point counts.
"""
from __future__ import annotations

from importlib.metadata import version, PackageNotFoundError
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gmlgeom.model.criteria import MaxErrorCriterion

try:
    APP_VERSION = version("gmlgeom")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

# Global Constants
EPSILON: float = 1e-6
CIRCLE_ANGLE_EPSILON: float = 1e-10

DEFAULT_TOLERANCE: float = 0.0
DEFAULT_MAX_ERROR: float = 1e-5
DEFAULT_MAX_NUM_POINTS: int = 1000

GML_NAMESPACES: tuple[str, ...] = (
    "http://www.opengis.net/gml/3.2",
    "http://www.opengis.net/gml",
)


def default_criterion() -> MaxErrorCriterion:
    """Criterion used when none is given explicitly."""
    from gmlgeom.model.criteria import MaxErrorCriterion

    return MaxErrorCriterion(max_error=DEFAULT_MAX_ERROR, max_num_points=DEFAULT_MAX_NUM_POINTS)
