import pytest
from stereogems.stereographic import (
    Oblique,
    Polar,
    ProjectionRect,
    Stereographic,
    StereographicBuilder,
)


def test_builder_without_projection_gives_default():
    assert StereographicBuilder().build() == Stereographic()


def test_builder_returns_new_projection():
    p = Stereographic(45, -100, 0.9)

    q = StereographicBuilder(p).set_tangent_lat(30).build()

    assert q is not p
    assert q == Stereographic(30, -100, 0.9)
    # the original is unchanged
    assert p.tangent_lat == 45


def test_builder_setters():
    rect = ProjectionRect(0, 0, 10, 10)

    p = (
        StereographicBuilder()
        .set_tangent_lat(45)
        .set_central_meridian(-100)
        .set_scale(0.9)
        .set_false_easting(10)
        .set_false_northing(-10)
        .set_earth_radius(6371.0)
        .set_default_map_area(rect)
        .set_name("Canada")
        .build()
    )

    assert p.parameters == Oblique(45, -100, 0.9)
    assert p.false_easting == 10
    assert p.false_northing == -10
    assert p.earth_radius == 6371.0
    assert p.effective_scale == pytest.approx(0.9 * 6371.0)
    assert p.default_map_area == rect
    assert p.name == "Canada"


def test_builder_refreshes_trigonometry():
    p = StereographicBuilder(Stereographic(45, -100)).set_tangent_lat(-30).build()

    # The tangent point is the projection origin
    x, y = p.lat_lon_to_proj((-30, -100))
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(0.0, abs=1e-9)


def test_builder_keeps_polar_parameters():
    p = Stereographic.polar(60, 90, -105)

    q = StereographicBuilder(p).set_tangent_lon(0).build()

    assert q.parameters == Polar(60, 90, 0, True)
    assert q.scale == p.scale
    assert q.name == "PolarStereographic"


def test_builder_explicit_scale_makes_polar_oblique():
    p = Stereographic.polar(60, 90, -105)

    q = StereographicBuilder(p).set_scale(1.0).build()

    assert not q.is_polar
    assert q.parameters == Oblique(90, -105, 1.0)
    assert q.name == "Stereographic"
