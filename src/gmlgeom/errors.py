"""Exception taxonomy for linearization, planar conversion and GML reading."""


class GeometryError(Exception):
    """Base class for all errors raised by gmlgeom."""


class LinearizationError(GeometryError):
    """A curve or curve segment cannot be linearized."""


class UnsupportedSegmentKindError(LinearizationError):
    """The segment kind has no linearization algorithm."""


class UnsupportedCriterionError(LinearizationError):
    """The linearization criterion is of an unknown kind."""


class UnorderedControlPointsError(LinearizationError):
    """Cubic spline control points are not monotonic on the x-axis."""


class UnsupportedDimensionError(LinearizationError):
    """Cubic spline control points are not two-dimensional."""


class PointCountUnderdeterminedError(LinearizationError):
    """No point count can be derived from the criterion for this segment."""


class InvalidControlPointsError(LinearizationError):
    """The number of control points does not fit the segment kind."""


class CollinearPointsError(LinearizationError):
    """The three points are collinear, so no circle passes through them."""


class SplineComputationError(LinearizationError):
    """The spline equation system could not be solved."""


class UnsupportedGeometryTypeError(GeometryError):
    """The geometry kind has no planar representation."""


class GmlParseError(GeometryError):
    """The GML input is malformed or uses an unsupported construct."""
