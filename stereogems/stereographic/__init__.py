"""Stereographic projection, spherical earth.

The projection plane is tangent to the sphere at (latt, lont), which is also
the origin of the projected coordinate system.

References:
    John Snyder, Map Projections used by the USGS, Bulletin 1532,
    2nd edition (1983), p. 153
"""
import struct
import warnings
from typing import NamedTuple, Optional

import numpy as np

from .. import constants as cf
from ..constants import EARTH_RADIUS
from ..transform import (
    latlon2stereographic,
    polar_scale_factor,
    stereographic2latlon,
    true_scale_factor,
)


class GeoPoint(NamedTuple):
    lat: float
    lon: float


class ProjectedPoint(NamedTuple):
    x: float
    y: float


class ProjectionRect(NamedTuple):
    """Default map area in projection coordinates."""

    x_min: float
    y_min: float
    x_max: float
    y_max: float


class Oblique(NamedTuple):
    """Tangent point (degrees) and scale factor at the tangent point."""

    latt: float = 90.0
    lont: float = -105.0
    scale: float = 1.0


class Polar(NamedTuple):
    """Polar aspect; the scale factor is derived from the natural origin `latts`."""

    latts: float
    latt: float = 90.0
    lont: float = 0.0
    north: bool = True


def _bits(value):
    return struct.pack("<d", value)


class Stereographic:
    """Stereographic projection on a sphere.

    Instances are immutable, use `StereographicBuilder` or the `with_*`
    methods to derive modified projections.

    Parameters:
        latt, lont: float
            Tangent point of the projection in degrees
        scale: float
            Scale factor at the tangent point, normally 1.0 but may be reduced
        false_easting, false_northing: float
            Offsets in units of the projection coordinates (km)
        earth_radius: float
            Earth radius in km
        name: str
            Display name, defaults to the projection type label
        default_map_area: ProjectionRect
            Optional default extent
    """

    def __init__(
        self,
        latt=90.0,
        lont=-105.0,
        scale=1.0,
        false_easting=0.0,
        false_northing=0.0,
        earth_radius=EARTH_RADIUS,
        name=None,
        default_map_area=None,
    ):
        self._init(
            Oblique(latt, lont, scale),
            false_easting,
            false_northing,
            earth_radius,
            name,
            default_map_area,
        )

    def _init(
        self,
        parameters,
        false_easting,
        false_northing,
        earth_radius,
        name,
        default_map_area,
    ):
        if isinstance(parameters, Polar):
            if parameters.latts in (90.0, -90.0):
                scale = 1.0
            else:
                scale = polar_scale_factor(
                    np.deg2rad(parameters.latts), parameters.north
                )
        elif isinstance(parameters, Oblique):
            scale = parameters.scale
        else:
            raise TypeError(
                f"Unsupported projection parameters {type(parameters).__name__}."
            )

        if not earth_radius > 0:
            warnings.warn(
                f"Earth radius must be positive, got {earth_radius}. "
                "Transformed coordinates will not be finite.",
                RuntimeWarning,
                stacklevel=3,
            )

        self._parameters = parameters
        self._scale = float(scale)
        self._earth_radius = float(earth_radius)
        self._false_easting = float(false_easting)
        self._false_northing = float(false_northing)
        self._name = name if name is not None else self.projection_type_label
        self._default_map_area = (
            None if default_map_area is None else ProjectionRect(*default_map_area)
        )

        # Only ever computed here, instances are never modified afterwards
        self._latt = np.deg2rad(float(parameters.latt))
        self._lont = np.deg2rad(float(parameters.lont))
        self._sinlatt = np.sin(self._latt)
        self._coslatt = np.cos(self._latt)

    @classmethod
    def from_parameters(
        cls,
        parameters,
        false_easting=0.0,
        false_northing=0.0,
        earth_radius=EARTH_RADIUS,
        name=None,
        default_map_area=None,
    ):
        """Create a projection from `Oblique` or `Polar` parameters."""
        self = cls.__new__(cls)
        self._init(
            parameters,
            false_easting,
            false_northing,
            earth_radius,
            name,
            default_map_area,
        )
        return self

    @classmethod
    def from_true_scale(cls, latt, lont, lat_true, **kwargs):
        """Create a projection with true scale at latitude `lat_true` (degrees)."""
        return cls(latt, lont, true_scale_factor(lat_true), **kwargs)

    @classmethod
    def polar(cls, latts, latt=90.0, lont=0.0, north=True, **kwargs):
        """Create a polar projection from the latitude of natural origin.

        Parameters:
            latts: float
                Latitude of natural origin (degrees_north), where scale is 1.0
            latt: float
                Tangent latitude (degrees_north), conventionally +-90
            lont: float
                Tangent longitude (degrees_east), the central meridian
            north: bool
                North or south polar aspect
        """
        return cls.from_parameters(Polar(latts, latt, lont, north), **kwargs)

    # Parameters

    @property
    def parameters(self):
        return self._parameters

    @property
    def tangent_lat(self):
        return self._parameters.latt

    @property
    def tangent_lon(self):
        return self._parameters.lont

    @property
    def natural_origin_lat(self):
        return self._parameters.latts if self.is_polar else 0.0

    @property
    def scale(self):
        return self._scale

    @property
    def earth_radius(self):
        return self._earth_radius

    @property
    def effective_scale(self):
        return self._scale * self._earth_radius

    @property
    def false_easting(self):
        return self._false_easting

    @property
    def false_northing(self):
        return self._false_northing

    @property
    def is_polar(self):
        return isinstance(self._parameters, Polar)

    @property
    def is_north(self):
        return self.is_polar and self._parameters.north

    @property
    def name(self):
        return self._name

    @property
    def default_map_area(self) -> Optional[ProjectionRect]:
        return self._default_map_area

    @property
    def projection_type_label(self):
        return "PolarStereographic" if self.is_polar else "Stereographic"

    @property
    def params(self):
        """CF grid-mapping attributes describing this projection."""
        p = {
            cf.GRID_MAPPING_NAME: (
                cf.POLAR_STEREOGRAPHIC if self.is_polar else cf.STEREOGRAPHIC
            ),
            cf.LONGITUDE_OF_PROJECTION_ORIGIN: self.tangent_lon,
            cf.LATITUDE_OF_PROJECTION_ORIGIN: self.tangent_lat,
            cf.SCALE_FACTOR_AT_PROJECTION_ORIGIN: self._scale,
            cf.EARTH_RADIUS_KEY: self._earth_radius * 1000,
        }
        if self._false_easting != 0.0 or self._false_northing != 0.0:
            p[cf.FALSE_EASTING] = self._false_easting
            p[cf.FALSE_NORTHING] = self._false_northing
            p[cf.UNITS] = "km"

        return p

    # Transforms

    def _kernel_kwargs(self):
        return dict(
            latt=self._latt,
            lont=self._lont,
            scale=self.effective_scale,
            false_easting=self._false_easting,
            false_northing=self._false_northing,
            sinlatt=self._sinlatt,
            coslatt=self._coslatt,
        )

    def lat_lon_to_proj(self, point):
        """Convert a (lat, lon) point in degrees to projection coordinates."""
        lat, lon = point
        x, y = latlon2stereographic(lat, lon, **self._kernel_kwargs())
        return ProjectedPoint(float(x), float(y))

    def proj_to_lat_lon(self, point):
        """Convert an (x, y) point in projection coordinates to (lat, lon)."""
        x, y = point
        lat, lon = stereographic2latlon(x, y, **self._kernel_kwargs())
        return GeoPoint(float(lat), float(lon))

    def lat_lon_to_proj_array(
        self, points, lat_index=0, lon_index=1, dtype=None, out=None
    ):
        """Convert lat/lon coordinates to projection coordinates.

        Parameters:
            points: array-like, shape (2, N)
                `points[lat_index]` holds latitudes, `points[lon_index]`
                longitudes, in degrees
            lat_index, lon_index: int
                Axis order of `points`, either (0, 1) or (1, 0)
            dtype: numpy.float32 or numpy.float64
                Output precision, defaults to the precision of `points`
            out: ndarray, shape (2, N)
                Optional array to write the result to

        Returns:
            ndarray, shape (2, N): rows x and y
        """
        if {lat_index, lon_index} != {0, 1}:
            raise ValueError(
                f"lat_index and lon_index must be 0 and 1, got {lat_index} and {lon_index}."
            )
        points, out = _prepare(points, dtype, out)

        out[0], out[1] = latlon2stereographic(
            points[lat_index], points[lon_index], **self._kernel_kwargs()
        )
        return out

    def proj_to_lat_lon_array(self, points, dtype=None, out=None):
        """Convert projection coordinates to lat/lon coordinates.

        Parameters:
            points: array-like, shape (2, N)
                Rows x and y
            dtype: numpy.float32 or numpy.float64
                Output precision, defaults to the precision of `points`
            out: ndarray, shape (2, N)
                Optional array to write the result to

        Returns:
            ndarray, shape (2, N): rows lat and lon in degrees
        """
        points, out = _prepare(points, dtype, out)

        out[0], out[1] = stereographic2latlon(
            points[0], points[1], **self._kernel_kwargs()
        )
        return out

    def cross_seam(self, pt1, pt2):
        """Does the line between two projection points cross the projection seam?

        Always False: the stereographic projection is treated as seamless.
        This has not been checked against lines passing near the antipode.
        """
        return False

    # Value semantics

    def copy(self):
        return type(self).from_parameters(
            self._parameters,
            false_easting=self._false_easting,
            false_northing=self._false_northing,
            earth_radius=self._earth_radius,
            name=self._name,
            default_map_area=self._default_map_area,
        )

    __copy__ = copy

    def with_default_map_area(self, default_map_area):
        return StereographicBuilder(self).set_default_map_area(default_map_area).build()

    def with_name(self, name):
        return StereographicBuilder(self).set_name(name).build()

    def _key(self):
        return (
            _bits(self._earth_radius),
            _bits(self._false_easting),
            _bits(self._false_northing),
            _bits(self._latt),
            _bits(self._lont),
            _bits(self.effective_scale),
        )

    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(other) is not type(self):
            return NotImplemented
        # The polar parameters (latts, north) are not compared
        return (
            self._key() == other._key()
            and self._default_map_area == other._default_map_area
        )

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return (
            f"Stereographic(false_easting={self._false_easting}, "
            f"false_northing={self._false_northing}, "
            f"scale={self.effective_scale}, "
            f"earth_radius={self._earth_radius}, "
            f"latt={self.tangent_lat}, lont={self.tangent_lon})"
        )


def _prepare(points, dtype, out):
    points = np.asarray(points)
    if points.ndim != 2 or points.shape[0] != 2:
        raise ValueError(f"Expected coordinates of shape (2, N), got {points.shape}.")

    if dtype is None:
        dtype = np.float32 if points.dtype == np.float32 else np.float64
    dtype = np.dtype(dtype)
    if dtype not in (np.float32, np.float64):
        raise ValueError(f"Unsupported precision {dtype}.")

    if out is None:
        out = np.empty(points.shape, dtype=dtype)
    elif out.shape != points.shape or out.dtype != dtype:
        raise ValueError(
            f"Output array must have shape {points.shape} and dtype {dtype}."
        )

    return points, out


class StereographicBuilder:
    """Collect parameter changes and build a new `Stereographic`.

    Replaces in-place parameter editing, e.g. when restoring a projection
    from a serialized form. Every setter returns the builder.

    Setting an explicit scale on a polar projection turns it into an oblique
    one with that scale.
    """

    def __init__(self, projection=None):
        if projection is None:
            projection = Stereographic()

        self._parameters = projection.parameters
        self._false_easting = projection.false_easting
        self._false_northing = projection.false_northing
        self._earth_radius = projection.earth_radius
        self._default_map_area = projection.default_map_area
        # An unchanged default name follows the projection type
        self._name = (
            None
            if projection.name == projection.projection_type_label
            else projection.name
        )

    def set_scale(self, scale):
        p = self._parameters
        self._parameters = Oblique(p.latt, p.lont, scale)
        return self

    def set_tangent_lat(self, latt):
        self._parameters = self._parameters._replace(latt=latt)
        return self

    def set_tangent_lon(self, lont):
        self._parameters = self._parameters._replace(lont=lont)
        return self

    set_central_meridian = set_tangent_lon

    def set_false_easting(self, false_easting):
        self._false_easting = false_easting
        return self

    def set_false_northing(self, false_northing):
        self._false_northing = false_northing
        return self

    def set_earth_radius(self, earth_radius):
        self._earth_radius = earth_radius
        return self

    def set_default_map_area(self, default_map_area):
        self._default_map_area = default_map_area
        return self

    def set_name(self, name):
        self._name = name
        return self

    def build(self):
        return Stereographic.from_parameters(
            self._parameters,
            false_easting=self._false_easting,
            false_northing=self._false_northing,
            earth_radius=self._earth_radius,
            name=self._name,
            default_map_area=self._default_map_area,
        )


__all__ = [
    "GeoPoint",
    "ProjectedPoint",
    "ProjectionRect",
    "Oblique",
    "Polar",
    "Stereographic",
    "StereographicBuilder",
]
