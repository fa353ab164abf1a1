import math

import numpy as np
import pytest
from stereogems import transform
from stereogems.constants import TOLERANCE


def test_true_scale_factor():
    assert transform.true_scale_factor(90) == 1.0
    assert transform.true_scale_factor(60) == pytest.approx(0.9330127018922193)


@pytest.mark.parametrize("north", [True, False])
def test_polar_scale_factor(north):
    # EPSG Guidance Note 7-2, Polar Stereographic (variant B) example
    lat_ts = math.radians(71 if north else -71)

    assert transform.polar_scale_factor(lat_ts, north) == pytest.approx(
        0.972769012891, rel=1e-7
    )


def test_polar_scale_factor_nan_falls_back_to_one():
    assert transform.polar_scale_factor(np.nan) == 1.0


def test_north_polar_projection():
    R = 6371.229
    latt = math.radians(90)

    x, y = transform.latlon2stereographic(
        [60, 60], [0, 90], latt=latt, lont=0.0, scale=R
    )

    r = R * 2 * math.cos(math.radians(60)) / (1 + math.sin(math.radians(60)))
    np.testing.assert_allclose(x, [0, r], atol=1e-9)
    np.testing.assert_allclose(y, [-r, 0], atol=1e-9)


def test_antipode_stays_finite():
    latt = math.radians(45)

    x, y = transform.latlon2stereographic(
        [-45], [80], latt=latt, lont=math.radians(-100), scale=1.0
    )

    assert np.all(np.isfinite(x)) and np.all(np.isfinite(y))
    assert np.hypot(x, y)[0] > 1.0 / TOLERANCE


def test_inverse_origin_is_tangent_point():
    latt, lont = math.radians(45), math.radians(-100)

    lat, lon = transform.stereographic2latlon(
        [10.0], [-5.0], latt, lont, 1.0, false_easting=10, false_northing=-5
    )

    np.testing.assert_allclose(lat, [45])
    np.testing.assert_allclose(lon, [-100])


def test_inverse_south_polar_branch():
    latt = math.radians(-90)
    x, y = transform.latlon2stereographic([-60], [30], latt, 0.0, 1.0)

    lat, lon = transform.stereographic2latlon(x, y, latt, 0.0, 1.0)

    np.testing.assert_allclose(lat, [-60])
    np.testing.assert_allclose(lon, [30])
