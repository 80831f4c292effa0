"""
Display formatting and unit conversion for measurements.
"""

import math

from geojsonlab.constants import AREA_UNITS, CARDINAL_DIRECTIONS, DISTANCE_UNITS


def format_distance(meters):
    if meters < 1000:
        return f"{meters:.2f} m"
    if meters < 100_000:
        return f"{meters / 1000:.2f} km"
    return f"{meters / 1000:.0f} km"


def format_area(square_meters):
    if square_meters < 10_000:
        return f"{square_meters:.2f} m²"
    if square_meters < 1_000_000:
        return f"{square_meters / 10_000:.2f} ha"
    return f"{square_meters / 1_000_000:.2f} km²"


def cardinal_direction(degrees):
    """16-point compass direction nearest to a bearing."""
    index = math.floor(degrees / 22.5 + 0.5) % len(CARDINAL_DIRECTIONS)
    return CARDINAL_DIRECTIONS[index]


def format_bearing(degrees):
    return f"{degrees:.1f}° ({cardinal_direction(degrees)})"


def convert_distance(meters, unit):
    """
    Convert meters to another distance unit.

    Args:
        meters (float): Distance in meters.
        unit (str): One of "m", "km", "mi", "ft".
    """
    if unit not in DISTANCE_UNITS:
        raise ValueError(f"Unknown distance unit '{unit}'. Expected one of {list(DISTANCE_UNITS)}.")
    return meters / DISTANCE_UNITS[unit]


def convert_area(square_meters, unit):
    """
    Convert square meters to another area unit.

    Args:
        square_meters (float): Area in square meters.
        unit (str): One of "m2", "km2", "ha", "ac", "mi2".
    """
    if unit not in AREA_UNITS:
        raise ValueError(f"Unknown area unit '{unit}'. Expected one of {list(AREA_UNITS)}.")
    return square_meters / AREA_UNITS[unit]
