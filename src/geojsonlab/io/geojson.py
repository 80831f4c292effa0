"""
Reading and structural validation of GeoJSON input.
"""

import json
import os

from geojsonlab.constants import GEOMETRY_TYPES
from geojsonlab.exceptions import DataSchemaError
from geojsonlab.types import ValidationIssue, ValidationResult


def parse(source):
    """
    Parse GeoJSON from a file path, a JSON string or an already decoded mapping.

    Args:
        source (str, os.PathLike or dict): Input to parse.

    Returns:
        dict: The decoded GeoJSON object.

    Raises:
        DataSchemaError: If the input is not valid JSON.
    """
    if isinstance(source, dict):
        return source

    try:
        if isinstance(source, os.PathLike) or (
            isinstance(source, str) and not source.lstrip().startswith(("{", "[")) and os.path.exists(source)
        ):
            with open(source, "r", encoding="utf-8") as f:
                return json.load(f)
        return json.loads(source)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise DataSchemaError(f"Failed to parse GeoJSON: {e}") from e


def _validate_geometry(geometry, errors, path=""):
    if geometry.get("type") == "GeometryCollection":
        if not isinstance(geometry.get("geometries"), list):
            errors.append(ValidationIssue(
                "GeometryCollection must have geometries array", "MISSING_GEOMETRIES", path,
            ))
        return

    coordinates = geometry.get("coordinates")
    if coordinates is None:
        errors.append(ValidationIssue("Geometry must have coordinates", "MISSING_COORDINATES", path))
        return

    if not isinstance(coordinates, list):
        errors.append(ValidationIssue("Coordinates must be an array", "INVALID_COORDINATES", path))


def _validate_feature(feature, errors, warnings, path=""):
    if "geometry" not in feature:
        errors.append(ValidationIssue("Feature must have a geometry property", "MISSING_GEOMETRY", path))
        return

    geometry = feature["geometry"]
    if geometry is None:
        warnings.append(ValidationIssue("Feature has null geometry", path=path))
        return

    if not isinstance(geometry, dict):
        errors.append(ValidationIssue("Feature must have a geometry property", "MISSING_GEOMETRY", path))
        return

    _validate_geometry(geometry, errors, f"{path}.geometry")


def validate(geojson):
    """
    Validate the structure of a GeoJSON object.

    Coordinates are not range-checked here; see
    ``geojsonlab.spatial.crs.validate_coordinates``.

    Returns:
        ValidationResult
    """
    errors = []
    warnings = []

    if not isinstance(geojson, dict):
        errors.append(ValidationIssue("GeoJSON must be an object", "INVALID_TYPE"))
        return ValidationResult(False, errors, warnings)

    geo_type = geojson.get("type")
    if not geo_type:
        errors.append(ValidationIssue('Missing required "type" property', "MISSING_TYPE"))
        return ValidationResult(False, errors, warnings)

    if geo_type == "FeatureCollection":
        features = geojson.get("features")
        if not isinstance(features, list):
            errors.append(ValidationIssue(
                'FeatureCollection must have a "features" array', "MISSING_FEATURES",
            ))
        else:
            for index, feature in enumerate(features):
                path = f"features[{index}]"
                if not isinstance(feature, dict) or feature.get("type") != "Feature":
                    errors.append(ValidationIssue(
                        f"Feature at index {index} has invalid type", "INVALID_FEATURE_TYPE", path,
                    ))
                    if not isinstance(feature, dict):
                        continue
                _validate_feature(feature, errors, warnings, path)
    elif geo_type == "Feature":
        _validate_feature(geojson, errors, warnings)
    elif geo_type in GEOMETRY_TYPES:
        _validate_geometry(geojson, errors)
    else:
        errors.append(ValidationIssue(f"Invalid GeoJSON type: {geo_type}", "INVALID_GEOJSON_TYPE"))

    return ValidationResult(not errors, errors, warnings)


def to_feature_collection(geojson):
    """Wrap a Feature or bare Geometry in a FeatureCollection."""
    if geojson.get("type") == "FeatureCollection":
        return geojson
    if geojson.get("type") == "Feature":
        return {"type": "FeatureCollection", "features": [geojson]}
    return {
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "geometry": geojson, "properties": {}}],
    }


def load_geojson(source):
    """
    Parse, validate and normalise GeoJSON input.

    Returns:
        tuple: (raw GeoJSON object, FeatureCollection, ValidationResult)

    Raises:
        DataSchemaError: If the input cannot be parsed or fails validation.
    """
    raw = parse(source)
    result = validate(raw)
    if not result.valid:
        details = "; ".join(
            f"{e.path}: {e.message}" if e.path else e.message for e in result.errors
        )
        raise DataSchemaError(f"Invalid GeoJSON: {details}")
    return raw, to_feature_collection(raw), result
