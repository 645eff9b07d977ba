import pytest

from conftest import polygon, ring, square, surface

from gmlgeom.model import Solid
from gmlgeom.validation import ElementContext, Severity, ValidationResult, list_ids, validate
from gmlgeom.validation.messages import (
    NOT_SIMPLE, NOT_SIMPLE_INTERSECTION, SURFACE_PATCHES_NOT_CONNECTED, UNSUPPORTED_GEOMETRY_TYPE,
    format_message, format_value, problem_location,
)
from gmlgeom.validation.registry import _REGISTRY, get_validator, register_validator


###############################################################################
# Messages


@pytest.mark.parametrize(
    "value,expected",
    [
        (1.0, "1.000"),
        (2.5, "2.500"),
        (-0.1, "-0.100"),
        (1.23456789012, "1.2345678901"),
        (12.5, "12.500"),
    ],
)
def test_format_value(value, expected):

    assert format_value(value) == expected


def test_problem_location():

    assert problem_location((1, 2.5)) == "Location: (1.000, 2.500)"
    assert problem_location((1, 2.5, 3)) == "Location: (1.000, 2.500, 3.000)"


def test_format_message():

    assert format_message(NOT_SIMPLE) == "The geometry is not simple."
    assert format_message(NOT_SIMPLE_INTERSECTION, coordinate=(0.5, 0.25)).endswith("Location: (0.500, 0.250)")
    assert "Solid" in format_message(UNSUPPORTED_GEOMETRY_TYPE, "Solid")
    with pytest.raises(KeyError):
        format_message("no.such.key")


###############################################################################
# Result sink


def test_validation_result(make_context):

    context = make_context(polygon(square(0, 0), id="p1"))
    result = ValidationResult()
    assert result.is_valid
    assert not result.failed_silently

    warning = result.add_warning(context, UNSUPPORTED_GEOMETRY_TYPE, "Solid")
    assert result.is_valid
    error = result.add_error(context, NOT_SIMPLE_INTERSECTION, coordinate=(1, 2))
    assert not result.is_valid

    assert result.diagnostics == (warning, error)
    assert result.errors == [error]
    assert result.warnings == [warning]
    assert error.severity == Severity.ERROR
    assert error.element_id == "p1"
    assert error.coordinate == (1.0, 2.0)
    assert warning.coordinate is None

    result.fail_silently()
    assert result.failed_silently


###############################################################################
# Element context


class CountingConverter:

    def __init__(self, wrapped):
        self.wrapped = wrapped
        self.calls = 0

    def to_planar(self, geometry):
        self.calls += 1
        return self.wrapped.to_planar(geometry)


def test_element_context_caches_planar_geometry(converter):

    counting = CountingConverter(converter)
    context = ElementContext("p1", polygon(square(0, 0)), counting)
    first = context.get_planar_geometry()
    assert first.area == pytest.approx(1.0)
    assert context.get_planar_geometry() is first
    assert counting.calls == 1


def test_element_context_unsupported(converter):

    counting = CountingConverter(converter)
    context = ElementContext("s1", Solid(), counting)
    assert context.get_planar_geometry() is None
    assert context.get_planar_geometry() is None
    assert counting.calls == 1


###############################################################################
# Registry and pipeline


def test_registry():

    assert list_ids() == [1, 3]
    with pytest.raises(KeyError):
        get_validator(99)


def test_register_duplicate_id():

    class Duplicate:
        id = 1

        def validate(self, context, result):
            pass

    with pytest.raises(ValueError):
        register_validator(Duplicate)


def test_register_without_id():

    class Anonymous:
        pass

    with pytest.raises(ValueError):
        register_validator(Anonymous)


def test_pipeline_runs_validators_in_id_order(make_context):

    calls = []

    def recording(validator_id):
        class Recording:
            id = validator_id

            def validate(self, context, result):
                calls.append(self.id)

        return Recording

    register_validator(recording(101))
    register_validator(recording(100))
    try:
        validate(make_context(polygon(square(0, 0))), ValidationResult(), validator_ids=[101, 100, 101])
    finally:
        del _REGISTRY[100]
        del _REGISTRY[101]
    assert calls == [100, 101]


def test_pipeline_all_validators(make_context):

    context = make_context(surface(square(0, 0), square(5, 5), id="s"))
    result = validate(context, ValidationResult())
    assert [d.message_key for d in result.errors] == [SURFACE_PATCHES_NOT_CONNECTED]

    context = make_context(polygon(ring((0, 0), (2, 2), (2, 0), (0, 2)), id="bowtie"))
    result = validate(context, ValidationResult())
    assert [d.message_key for d in result.errors] == [NOT_SIMPLE_INTERSECTION]


def test_pipeline_selected_validators(make_context):

    context = make_context(surface(square(0, 0), square(5, 5), id="s"))
    result = validate(context, ValidationResult(), validator_ids=[3])
    assert result.diagnostics == ()

    with pytest.raises(KeyError):
        validate(context, ValidationResult(), validator_ids=[2])
