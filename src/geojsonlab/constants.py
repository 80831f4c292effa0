# constants.py

GEOMETRY_TYPES = [
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
]
POLYGON_TYPES = ["Polygon", "MultiPolygon"]
LINE_TYPES = ["LineString", "MultiLineString"]

SPATIAL_RELATIONS = [
    "intersects",
    "contains",
    "within",
    "overlaps",
    "touches",
    "crosses",
    "disjoint",
]

FILTER_OPERATORS = ["equals", "contains", "gt", "lt", "gte", "lte"]
NUMERIC_OPERATORS = ["gt", "lt", "gte", "lte"]

# Extra spellings accepted by attribute queries
ATTRIBUTE_OPERATOR_ALIASES = {
    "=": "equals",
    "==": "equals",
    "!=": "not_equals",
    ">": "gt",
    "<": "lt",
    ">=": "gte",
    "<=": "lte",
    "startsWith": "starts_with",
    "endsWith": "ends_with",
}
ATTRIBUTE_OPERATORS = FILTER_OPERATORS + ["not_equals", "starts_with", "ends_with"]

MEASUREMENT_MODES = ["distance", "area", "bearing"]

CARDINAL_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

# Meters per unit
DISTANCE_UNITS = {
    "m": 1.0,
    "km": 1000.0,
    "mi": 1609.344,
    "ft": 1 / 3.28084,
}

# Square meters per unit
AREA_UNITS = {
    "m2": 1.0,
    "km2": 1_000_000.0,
    "ha": 10_000.0,
    "ac": 4046.86,
    "mi2": 2589988.0,
}
