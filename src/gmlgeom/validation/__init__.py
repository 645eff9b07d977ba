"""
The VALIDATION layer runs topological checks on one element.
Importing it registers the built-in validators.
"""
from gmlgeom.validation.connectivity import PolygonPatchConnectivityValidator, is_connected
from gmlgeom.validation.context import ElementContext
from gmlgeom.validation.pipeline import validate
from gmlgeom.validation.registry import Validator, get_validator, list_ids, register_validator
from gmlgeom.validation.result import Diagnostic, Severity, ValidationResult
from gmlgeom.validation.simplicity import GeometryIsSimpleValidator, find_non_simple_location
