"""
Dataset statistics for a loaded feature collection.
"""

import json
import warnings
from collections import Counter

import numpy as np

from geojsonlab.config import TOP_VALUES_LIMIT
from geojsonlab.constants import LINE_TYPES
from geojsonlab.exceptions import GeometryError
from geojsonlab.spatial.geometry import bounding_box, feature_list
from geojsonlab.spatial.measure import geometry_area, geometry_length
from geojsonlab.types import BoundingBox, PropertyStatistics, StatisticsResult, TopValue


def classify_value(value):
    """
    Name the JSON type of a property value.

    Returns one of "null", "boolean", "number", "string" or "object"
    (arrays and mappings).
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _unique_key(type_name, value):
    if type_name == "object":
        return (type_name, json.dumps(value, sort_keys=True, default=str))
    return (type_name, value)


def analyze_property(name, values):
    """
    Summarise every value observed for one property name.

    Args:
        name (str): Property name.
        values (list): Values in feature order, nulls included.

    Returns:
        PropertyStatistics
    """
    types = {classify_value(v) for v in values if v is not None}
    non_null = [v for v in values if v is not None]

    if not types:
        prop_type = "null"
    elif len(types) == 1:
        prop_type = types.pop()
    else:
        prop_type = "mixed"

    stat = PropertyStatistics(
        name=name,
        type=prop_type,
        unique_values=len({_unique_key(classify_value(v), v) for v in non_null}),
        null_count=len(values) - len(non_null),
    )

    if prop_type == "number":
        numbers = np.asarray(non_null, dtype=float)
        stat.min = float(numbers.min())
        stat.max = float(numbers.max())
        stat.mean = float(numbers.mean())
        stat.median = float(np.median(numbers))

    if prop_type == "string":
        # most_common keeps first-seen order among equal counts
        counts = Counter(non_null)
        stat.top_values = [
            TopValue(value, count) for value, count in counts.most_common(TOP_VALUES_LIMIT)
        ]

    return stat


def analyze(collection):
    """
    Compute statistics for a feature collection in a single pass.

    Polygon areas (km²) and line lengths (km) are accumulated per feature;
    a feature whose measurement fails is skipped with a warning. The totals
    are None when no feature of that kind contributed.

    Args:
        collection: FeatureCollection mapping or sequence of Features.

    Returns:
        StatisticsResult
    """
    features = feature_list(collection)
    geometry_types = {}
    property_values = {}
    total_area = 0.0
    total_length = 0.0
    has_area = False
    has_length = False

    for index, feature in enumerate(features):
        geometry = feature.get("geometry")
        geom_type = geometry.get("type") if isinstance(geometry, dict) else None
        key = geom_type or "null"
        geometry_types[key] = geometry_types.get(key, 0) + 1

        try:
            if geom_type and "Polygon" in geom_type:
                total_area += geometry_area(geometry) / 1_000_000
                has_area = True
            if geom_type in LINE_TYPES:
                total_length += geometry_length(geometry) / 1000
                has_length = True
        except GeometryError as e:
            warnings.warn(f"Skipping measurement of feature {index}: {e}")

        for name, value in (feature.get("properties") or {}).items():
            property_values.setdefault(name, []).append(value)

    try:
        bounds = bounding_box(features)
    except GeometryError:
        bounds = BoundingBox.empty()

    return StatisticsResult(
        feature_count=len(features),
        geometry_types=geometry_types,
        bounds=bounds,
        properties=[analyze_property(name, values) for name, values in property_values.items()],
        total_area=total_area if has_area else None,
        total_length=total_length if has_length else None,
    )
