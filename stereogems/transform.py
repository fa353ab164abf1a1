import numpy as np

from .constants import ECCENTRICITY, TOLERANCE


def true_scale_factor(lat_true):
    """Scale factor at the tangent point giving true scale at `lat_true` (degrees).

    The stereographic scale at latitude lat is k = 2 * k0 / (1 + sin(lat)),
    so k = 1 requires k0 = (1 + sin(lat)) / 2.
    """
    return (1.0 + np.sin(np.deg2rad(lat_true))) / 2.0


def polar_scale_factor(lat_ts, north=True):
    """Polar stereographic scale factor for the latitude of natural origin.

    Reference: OGP Surveying and Positioning Guidance Note 7, part 2 (2009).

    Parameters:
        lat_ts: float
            Latitude of natural origin in radians
        north: bool
            North (True) or south (False) polar aspect

    Returns:
        float: scale factor at the pole, 1.0 if the formula degenerates
    """
    e = ECCENTRICITY
    sinlat = np.sin(lat_ts)
    root = (1 + e * sinlat) / (1 - e * sinlat)

    with np.errstate(invalid="ignore", divide="ignore"):
        if north:
            tf = np.tan(np.pi / 4 - lat_ts / 2) * root ** (e / 2)
        else:
            tf = np.tan(np.pi / 4 + lat_ts / 2) * root ** (-e / 2)

        mf = np.cos(lat_ts) / np.sqrt(1 - e**2 * sinlat**2)
        k0 = mf * np.sqrt((1 + e) ** (1 + e) * (1 - e) ** (1 - e)) / (2 * tf)

    return 1.0 if np.isnan(k0) else float(k0)


def latlon2stereographic(
    lat,
    lon,
    latt,
    lont,
    scale,
    false_easting=0.0,
    false_northing=0.0,
    sinlatt=None,
    coslatt=None,
):
    """Oblique stereographic projection on a sphere.

    Parameters:
        lat, lon: array-like
            Geographic coordinates in degrees
        latt, lont: float
            Tangent point in radians
        scale: float
            Scale factor times earth radius
        false_easting, false_northing: float
            Offsets added to the projected coordinates
        sinlatt, coslatt: float
            Precomputed sin/cos of `latt`

    Returns:
        x, y: ndarray
    """
    if sinlatt is None:
        sinlatt = np.sin(latt)
    if coslatt is None:
        coslatt = np.cos(latt)

    lat = np.deg2rad(np.asarray(lat, dtype="f8"))
    lon = np.deg2rad(np.asarray(lon, dtype="f8"))

    # The antipode of the tangent point maps to infinity
    lat = np.where(np.abs(lat + latt) <= TOLERANCE, -latt * (1.0 - TOLERANCE), lat)

    sdlon = np.sin(lon - lont)
    cdlon = np.cos(lon - lont)
    sinlat = np.sin(lat)
    coslat = np.cos(lat)

    # The guard can leave a zero denominator, e.g. for an equatorial tangent point
    with np.errstate(invalid="ignore", divide="ignore"):
        k = 2.0 * scale / (1.0 + sinlatt * sinlat + coslatt * coslat * cdlon)
        x = k * coslat * sdlon
        y = k * (coslatt * sinlat - sinlatt * coslat * cdlon)

    return x + false_easting, y + false_northing


def stereographic2latlon(
    x,
    y,
    latt,
    lont,
    scale,
    false_easting=0.0,
    false_northing=0.0,
    sinlatt=None,
    coslatt=None,
):
    """Inverse of `latlon2stereographic`.

    Returns:
        lat, lon: ndarray in degrees. Longitudes lie within 180 degrees of the
        tangent longitude and are not normalized.
    """
    if sinlatt is None:
        sinlatt = np.sin(latt)
    if coslatt is None:
        coslatt = np.cos(latt)

    fromx = np.asarray(x, dtype="f8") - false_easting
    fromy = np.asarray(y, dtype="f8") - false_northing

    rho = np.sqrt(fromx * fromx + fromy * fromy)
    c = 2.0 * np.arctan2(rho, 2.0 * scale)
    sinc = np.sin(c)
    cosc = np.cos(c)

    # Both branches are evaluated, the division is only used where rho > 0
    with np.errstate(invalid="ignore", divide="ignore"):
        phi = np.where(
            np.abs(rho) < TOLERANCE,
            latt,
            np.arcsin(cosc * sinlatt + fromy * sinc * coslatt / rho),
        )

    if np.abs(coslatt) < TOLERANCE:
        lam = lont + np.arctan2(fromx, -fromy if latt > 0 else fromy)
    else:
        lam = lont + np.arctan2(
            fromx * sinc, rho * coslatt * cosc - fromy * sinc * sinlatt
        )

    at_origin = (np.abs(fromx) < TOLERANCE) & (np.abs(fromy) < TOLERANCE)
    lam = np.where(at_origin, lont, lam)

    return np.rad2deg(phi), np.rad2deg(lam)
