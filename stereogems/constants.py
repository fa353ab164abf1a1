EARTH_RADIUS = 6371.229  # km
TOLERANCE = 1.0e-6
ECCENTRICITY = 0.081819191  # WGS84, used by the polar scale factor only

# CF grid-mapping attribute names
GRID_MAPPING_NAME = "grid_mapping_name"
STEREOGRAPHIC = "stereographic"
POLAR_STEREOGRAPHIC = "polar_stereographic"
LONGITUDE_OF_PROJECTION_ORIGIN = "longitude_of_projection_origin"
LATITUDE_OF_PROJECTION_ORIGIN = "latitude_of_projection_origin"
SCALE_FACTOR_AT_PROJECTION_ORIGIN = "scale_factor_at_projection_origin"
EARTH_RADIUS_KEY = "earth_radius"
FALSE_EASTING = "false_easting"
FALSE_NORTHING = "false_northing"
UNITS = "units"
