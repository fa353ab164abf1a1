import warnings

import numpy as np
import cf_xarray as cf_xarray
import xarray as xr


X_ATTRS = {
    "units": "km",
    "standard_name": "projection_x_coordinate",
}
Y_ATTRS = {
    "units": "km",
    "standard_name": "projection_y_coordinate",
}
LAT_ATTRS = {"units": "degree_north", "standard_name": "latitude"}
LON_ATTRS = {"units": "degree_east", "standard_name": "longitude"}


def _precision(*arrays):
    # DataArrays are not converted, that would load dask-backed data
    dtypes = [a.dtype if hasattr(a, "dtype") else np.asarray(a).dtype for a in arrays]
    if all(dtype == np.float32 for dtype in dtypes):
        return np.float32
    return np.float64


def _forward(lat, lon, projection, dtype):
    lat, lon = np.broadcast_arrays(lat, lon)
    xy = projection.lat_lon_to_proj_array(
        np.stack([lat.ravel(), lon.ravel()]), dtype=dtype
    )
    return xy[0].reshape(lat.shape), xy[1].reshape(lat.shape)


def _inverse(x, y, projection, dtype):
    x, y = np.broadcast_arrays(x, y)
    latlon = projection.proj_to_lat_lon_array(
        np.stack([x.ravel(), y.ravel()]), dtype=dtype
    )
    return latlon[0].reshape(x.shape), latlon[1].reshape(x.shape)


def latlon2xy(lat, lon, projection):
    """Project (arrays of) geographic coordinates.

    Works on numpy arrays as well as (dask-backed) `xarray.DataArray`s, which
    are broadcast against each other by dimension name.

    Parameters:
        lat, lon: array-like
            Coordinates in degrees
        projection: Stereographic

    Returns:
        x, y: projection coordinates with the broadcast shape of the input
    """
    dtype = _precision(lat, lon)
    return xr.apply_ufunc(
        _forward,
        lat,
        lon,
        kwargs={"projection": projection, "dtype": dtype},
        output_core_dims=[[], []],
        dask="parallelized",
        output_dtypes=[dtype, dtype],
    )


def xy2latlon(x, y, projection):
    """Inverse of `latlon2xy`."""
    dtype = _precision(x, y)
    return xr.apply_ufunc(
        _inverse,
        x,
        y,
        kwargs={"projection": projection, "dtype": dtype},
        output_core_dims=[[], []],
        dask="parallelized",
        output_dtypes=[dtype, dtype],
    )


def crs_coord(projection):
    """Grid mapping variable carrying the projection parameters."""
    return xr.DataArray(0, name="crs", attrs=projection.params)


def get_coord(ds, standard_name, fallback):
    """Look up a coordinate by CF standard name, falling back to a variable name."""
    try:
        return ds.cf[standard_name]
    except KeyError:
        warnings.warn(
            f"No unique variable with standard_name '{standard_name}' was found. "
            f"Using '{fallback}' instead, please check the result!",
            stacklevel=3,
        )
        return ds[fallback]


def _set_grid_mapping(ds, projection):
    ds = ds.assign_coords(crs=crs_coord(projection))
    return ds.assign(
        {name: var.assign_attrs(grid_mapping="crs") for name, var in ds.data_vars.items()}
    )


def attach_xy(ds: xr.Dataset, projection, x_name="x", y_name="y"):
    """Attach projection coordinates to a dataset on a geographic grid.

    Latitude and longitude are found by their CF attributes (or named
    `lat`/`lon`). A `crs` coordinate with the projection parameters is added
    and referenced by all data variables.
    """
    lat = get_coord(ds, "latitude", "lat")
    lon = get_coord(ds, "longitude", "lon")

    x, y = latlon2xy(lat, lon, projection)

    ds = ds.assign_coords(
        {
            x_name: x.assign_attrs(X_ATTRS),
            y_name: y.assign_attrs(Y_ATTRS),
        }
    )
    return _set_grid_mapping(ds, projection)


def attach_latlon(ds: xr.Dataset, projection):
    """Attach 2D latitude and longitude to a dataset on a projected grid."""
    x = get_coord(ds, "projection_x_coordinate", "x")
    y = get_coord(ds, "projection_y_coordinate", "y")

    # Conventional (y, x) dimension order for the 2D coordinates
    y, x = xr.broadcast(y, x)
    lat, lon = xy2latlon(x, y, projection)

    ds = ds.assign_coords(
        lat=lat.assign_attrs(LAT_ATTRS),
        lon=lon.assign_attrs(LON_ATTRS),
    )
    return _set_grid_mapping(ds, projection)


__all__ = [
    "latlon2xy",
    "xy2latlon",
    "crs_coord",
    "get_coord",
    "attach_xy",
    "attach_latlon",
]
