from .filters import apply_filters, unique_geometry_types, unique_property_names
from .spatial import (
    nearest,
    query,
    query_by_attribute,
    within_bounds,
    union,
    intersection,
    difference,
)
