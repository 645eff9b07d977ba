import logging

from conftest import ring, square, surface

from gmlgeom.model import (
    CompositeGeometry, CompositeSurface, LineString, MultiGeometry, MultiSolid, MultiSurface,
    OrientableSurface, Point, PointGeometry, Solid,
)
from gmlgeom.validation import PolygonPatchConnectivityValidator, Severity, get_validator, is_connected
from gmlgeom.validation.messages import SURFACE_PATCHES_NOT_CONNECTED, UNSUPPORTED_GEOMETRY_TYPE


###############################################################################
# Surfaces


def test_connectivity_registered():

    assert isinstance(get_validator(1), PolygonPatchConnectivityValidator)


def test_connectivity_single_patch(make_context, result):

    context = make_context(surface(square(0, 0)))
    assert is_connected(context, result, context.geometry)
    assert result.diagnostics == ()


def test_connectivity_no_patch(make_context, result):

    context = make_context(surface())
    assert is_connected(context, result, context.geometry)
    assert result.diagnostics == ()


def test_connectivity_shared_edge(make_context, result):

    context = make_context(surface(ring((0, 0), (1, 0), (0, 1)), ring((1, 0), (1, 1), (0, 1))))
    assert is_connected(context, result, context.geometry)
    assert result.diagnostics == ()


def test_connectivity_disjoint(make_context, result):

    context = make_context(surface(ring((0, 0), (1, 0), (0, 1)), ring((5, 5), (6, 5), (5, 6))))
    assert not is_connected(context, result, context.geometry)
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].message_key == SURFACE_PATCHES_NOT_CONNECTED
    assert result.diagnostics[0].element_id == "surface"
    assert not result.is_valid


def test_connectivity_validator_appends_message(make_context, result):

    get_validator(1).validate(make_context(surface(square(0, 0), square(3, 0))), result)
    assert [d.message_key for d in result.errors] == [SURFACE_PATCHES_NOT_CONNECTED]


def test_connectivity_composite_and_orientable_surfaces(make_context, result):

    composite = CompositeSurface(members=[surface(square(0, 0)), surface(square(1, 0))], id="cs")
    assert is_connected(make_context(composite), result, composite)

    orientable = OrientableSurface(base_surface=surface(square(0, 0), square(2, 2)), orientation="-", id="os")
    assert not is_connected(make_context(orientable), result, orientable)
    assert len(result.errors) == 1


###############################################################################
# Solids and aggregates


def test_connectivity_solids_are_not_checked(make_context, result):

    shell = CompositeSurface(members=[surface(square(0, 0)), surface(square(5, 5))])
    solid = Solid(exterior=shell, id="solid")
    multi_solid = MultiSolid(members=[solid], id="ms")

    assert not is_connected(make_context(solid), result, solid)
    assert not is_connected(make_context(multi_solid), result, multi_solid)
    assert result.diagnostics == ()


def test_connectivity_multi_surface(make_context, result):

    multi = MultiSurface(members=[surface(square(0, 0), square(1, 0)), surface(square(5, 5))], id="m")
    assert is_connected(make_context(multi), result, multi)

    multi.members.append(surface(square(0, 0), square(3, 3), id="bad"))
    assert not is_connected(make_context(multi), result, multi)
    assert len(result.errors) == 1


def test_connectivity_short_circuits(make_context, result):

    first = surface(square(0, 0), square(3, 3), id="first")
    second = surface(square(0, 0), square(3, 3), id="second")
    multi = MultiGeometry(members=[first, second], id="m")
    assert not is_connected(make_context(multi), result, multi)
    assert len(result.errors) == 1


def test_connectivity_unsupported_member(make_context, result, caplog):

    solid = Solid(exterior=surface(square(0, 0)))
    multi = CompositeGeometry(members=[solid, surface(square(0, 0), square(1, 0))], id="gc")

    with caplog.at_level(logging.WARNING, logger="gmlgeom"):
        assert is_connected(make_context(multi), result, multi)

    assert result.errors == []
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.severity == Severity.WARNING
    assert warning.message_key == UNSUPPORTED_GEOMETRY_TYPE
    assert "Solid" in warning.text
    assert "treating it as connected" in caplog.text


def test_connectivity_unsupported_member_does_not_hide_later_defect(make_context, result):

    multi = MultiGeometry(members=[Solid(), surface(square(0, 0), square(3, 3))], id="m")
    assert not is_connected(make_context(multi), result, multi)
    assert len(result.warnings) == 1
    assert len(result.errors) == 1


def test_connectivity_other_geometries(make_context, result):

    point = PointGeometry(Point(0, 0))
    line = LineString.from_points([Point(0, 0), Point(1, 1)])
    assert is_connected(make_context(point), result, point)
    assert is_connected(make_context(line), result, line)
    assert result.diagnostics == ()
