"""
Coordinate reference system checks for GeoJSON input.

RFC 7946 mandates WGS84 longitude/latitude. These helpers detect legacy
``crs`` members, out-of-range coordinates and the usual signs of projected
or axis-swapped data. Results are findings for the caller, never errors.
"""

import re

from geojsonlab.config import DEFAULT_CRS, LAT_BOUNDS, LNG_BOUNDS, MAX_COORDINATE_ERRORS
from geojsonlab.spatial.geometry import feature_positions
from geojsonlab.types import CoordinateValidation, CRSInfo, ProjectionCheck

WGS84_NAME = "WGS 84"
EPSG_PATTERN = re.compile(r"EPSG[:/](\d+)", re.IGNORECASE)


def _fmt(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def detect_crs(geojson):
    """
    Detect the CRS declared by a raw GeoJSON object.

    Args:
        geojson (dict): Raw GeoJSON as parsed, before normalisation.

    Returns:
        CRSInfo: WGS84 unless a legacy ``crs`` member names something else.
    """
    warnings = []
    name = WGS84_NAME
    epsg_code = DEFAULT_CRS
    is_wgs84 = True
    is_valid = True

    crs = geojson.get("crs") if isinstance(geojson, dict) else None
    if crs:
        warnings.append(
            "CRS object detected. Note: RFC 7946 removes CRS support. "
            "GeoJSON should use WGS84 (EPSG:4326)."
        )

        props = crs.get("properties") or {}
        crs_name = None
        if crs.get("type") == "name":
            crs_name = props.get("name") or crs.get("name")
        elif crs.get("type") == "EPSG" and props.get("code") is not None:
            # GeoJSON 2008 draft form: {"type": "EPSG", "properties": {"code": 4326}}
            crs_name = f"EPSG:{props['code']}"

        if crs_name:
            name = str(crs_name)
            is_wgs84 = "4326" in name or "WGS84" in name
            match = EPSG_PATTERN.search(name)
            if match:
                epsg_code = f"EPSG:{match.group(1)}"
            elif not is_wgs84:
                epsg_code = None

            if not is_wgs84:
                warnings.append(
                    f"Non-WGS84 CRS detected: {name}. This may cause display issues "
                    "as the map expects WGS84 coordinates."
                )
                is_valid = False

    return CRSInfo(
        name=name,
        epsg_code=epsg_code,
        is_wgs84=is_wgs84,
        is_valid=is_valid,
        warnings=tuple(warnings),
    )


def format_crs(info):
    if info.epsg_code:
        return f"{info.name} ({info.epsg_code})"
    return info.name


def validate_coordinates(collection):
    """
    Check every coordinate against WGS84 bounds.

    Longitude and latitude violations are counted separately, so one
    coordinate can add two to ``out_of_bounds_count``. Only the first
    violations are described individually, followed by a summary line.

    Args:
        collection: FeatureCollection mapping or sequence of Features.

    Returns:
        CoordinateValidation
    """
    errors = []
    count = 0
    min_lng, max_lng = LNG_BOUNDS
    min_lat, max_lat = LAT_BOUNDS

    for index, (lng, lat) in feature_positions(collection):
        if lng < min_lng or lng > max_lng:
            count += 1
            if len(errors) < MAX_COORDINATE_ERRORS:
                errors.append(
                    f"Feature {index}: Longitude {_fmt(lng)} is out of valid range [-180, 180]"
                )

        if lat < min_lat or lat > max_lat:
            count += 1
            if len(errors) < MAX_COORDINATE_ERRORS:
                errors.append(
                    f"Feature {index}: Latitude {_fmt(lat)} is out of valid range [-90, 90]"
                )

    if count > MAX_COORDINATE_ERRORS:
        errors.append(f"... and {count - MAX_COORDINATE_ERRORS} more coordinate errors")

    return CoordinateValidation(
        valid=count == 0,
        errors=tuple(errors),
        out_of_bounds_count=count,
    )


def detect_projection_issues(collection):
    """
    Heuristic check for projected or axis-swapped coordinates.

    This is not authoritative; it only looks at coordinate magnitudes.

    Returns:
        ProjectionCheck
    """
    coords = [(abs(lng), abs(lat)) for _, (lng, lat) in feature_positions(collection)]
    if not coords:
        return ProjectionCheck(likely_issue=False, suggestions=())

    suggestions = []
    likely_issue = False

    if all(lng > 180 or lat > 90 for lng, lat in coords):
        likely_issue = True
        suggestions.extend([
            "Coordinates appear to be in a projected coordinate system (e.g., UTM, Web Mercator).",
            "GeoJSON requires WGS84 (EPSG:4326) coordinates in decimal degrees.",
            "Please reproject your data to WGS84 before loading.",
        ])
    else:
        if all(lng < 1 and lat < 1 for lng, lat in coords):
            suggestions.append(
                "Coordinates are very close to [0, 0]. This might indicate an issue with the data."
            )

        if any(lat > 90 and lng <= 90 for lng, lat in coords):
            likely_issue = True
            suggestions.extend([
                "Some coordinates have latitude values > 90° but longitude values within range.",
                "Your latitude and longitude values might be swapped.",
                "GeoJSON coordinates should be in [longitude, latitude] order.",
            ])

    return ProjectionCheck(likely_issue=likely_issue, suggestions=tuple(suggestions))
