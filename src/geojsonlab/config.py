# config.py
# Defaults for CRS, earth model, validation and query limits

DEFAULT_CRS = "EPSG:4326"

# Mean earth radius (meters) for the spherical great-circle model
EARTH_RADIUS_METERS = 6371008.8

LNG_BOUNDS = (-180.0, 180.0)
LAT_BOUNDS = (-90.0, 90.0)

MAX_COORDINATE_ERRORS = 5
TOP_VALUES_LIMIT = 10
DEFAULT_NEAREST_LIMIT = 10

# Segments per quarter circle used when buffering
BUFFER_RESOLUTION = 16
