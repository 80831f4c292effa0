"""
Attribute and text filtering of features.

Filters select references into a new list and never modify a feature.
Relative order is preserved.
"""

import json

from geojsonlab.constants import ATTRIBUTE_OPERATORS, NUMERIC_OPERATORS


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_text(value):
    """Render a property value the way it reads as text (JSON literals for null/booleans)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def matches(value, operator, target):
    """
    Compare one property value against a target.

    String operators compare case-insensitively on the text form of both
    sides. Numeric operators require both sides to be numbers; anything else
    does not match.

    Args:
        value: Property value of the feature.
        operator (str): One of ``ATTRIBUTE_OPERATORS``.
        target: Value to compare against.

    Returns:
        bool
    """
    if operator in NUMERIC_OPERATORS:
        if not (_is_number(value) and _is_number(target)):
            return False
        if operator == "gt":
            return value > target
        if operator == "lt":
            return value < target
        if operator == "gte":
            return value >= target
        return value <= target

    text = as_text(value).lower()
    needle = as_text(target).lower()
    if operator == "equals":
        return text == needle
    if operator == "not_equals":
        return text != needle
    if operator == "contains":
        return needle in text
    if operator == "starts_with":
        return text.startswith(needle)
    if operator == "ends_with":
        return text.endswith(needle)

    raise ValueError(f"Unknown operator '{operator}'. Expected one of {ATTRIBUTE_OPERATORS}.")


def _matches_search(feature, search):
    properties = feature.get("properties")
    if properties is not None:
        text = json.dumps(properties, separators=(",", ":"), ensure_ascii=False, default=str)
        if search in text.lower():
            return True

    geometry = feature.get("geometry")
    if geometry and search in str(geometry.get("type", "")).lower():
        return True
    return False


def _matches_property(feature, prop_filter):
    properties = feature.get("properties") or {}
    if prop_filter.property not in properties:
        return False
    return matches(properties[prop_filter.property], prop_filter.operator, prop_filter.value)


def apply_filters(features, criteria=None):
    """
    Apply search text, geometry types and property filters as an AND chain.

    Args:
        features (list): Features in display order.
        criteria (FilterCriteria, optional): Active filters. Empty criteria
            return every feature.

    Returns:
        list: The surviving features, in their original order.
    """
    filtered = list(features)
    if criteria is None:
        return filtered

    if criteria.search_text.strip():
        search = criteria.search_text.lower()
        filtered = [f for f in filtered if _matches_search(f, search)]

    if criteria.geometry_types:
        filtered = [
            f for f in filtered
            if f.get("geometry") and f["geometry"].get("type") in criteria.geometry_types
        ]

    for prop_filter in criteria.property_filters:
        filtered = [f for f in filtered if _matches_property(f, prop_filter)]

    return filtered


def unique_property_names(features):
    names = set()
    for feature in features:
        names.update((feature.get("properties") or {}).keys())
    return sorted(names)


def unique_geometry_types(features):
    return sorted({f["geometry"]["type"] for f in features if f.get("geometry")})
