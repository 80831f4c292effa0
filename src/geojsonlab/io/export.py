"""
Export of (filtered) features to GeoDataFrame, GeoJSON and CSV.
"""

import json

import geopandas as gpd
import pandas as pd

from geojsonlab.config import DEFAULT_CRS
from geojsonlab.spatial.geometry import is_position


def to_geodataframe(features, crs=DEFAULT_CRS):
    """
    Convert features to a GeoDataFrame.

    Args:
        features (list): GeoJSON Features.
        crs (str): CRS assigned to the result (features are WGS84 lng/lat).

    Returns:
        geopandas.GeoDataFrame: One row per feature, properties as columns.
    """
    if not features:
        return gpd.GeoDataFrame(columns=["geometry"], geometry="geometry", crs=crs)
    return gpd.GeoDataFrame.from_features(list(features), crs=crs)


def to_geojson(features, pretty=True, indent=2):
    """Serialise features as a FeatureCollection string."""
    collection = {"type": "FeatureCollection", "features": list(features)}
    if pretty:
        return json.dumps(collection, indent=indent, ensure_ascii=False)
    return json.dumps(collection, ensure_ascii=False)


def _csv_rows(features, properties, include_geometry):
    rows = []
    for feature in features:
        values = feature.get("properties") or {}
        row = {}
        for prop in properties:
            value = values.get(prop)
            row[prop] = "" if value is None else value

        geometry = feature.get("geometry")
        if include_geometry and geometry:
            row["geometry_type"] = geometry.get("type")
            if geometry.get("type") == "Point" and is_position(geometry.get("coordinates")):
                row["longitude"] = geometry["coordinates"][0]
                row["latitude"] = geometry["coordinates"][1]
            else:
                row["geometry"] = json.dumps(
                    geometry.get("coordinates", geometry.get("geometries")),
                    separators=(",", ":"),
                )
        rows.append(row)
    return rows


def to_csv(features, path=None, include_geometry=True, delimiter=",", selected_properties=None):
    """
    Write features as CSV, one row per feature.

    Columns are the property names in first-seen order (or
    ``selected_properties``), followed by ``geometry_type`` and either
    ``longitude``/``latitude`` for points or a JSON ``geometry`` column.

    Args:
        features (list): Features to export.
        path (str, optional): Output file. If None the CSV text is returned.
        include_geometry (bool): Add the geometry columns.
        delimiter (str): Field separator.
        selected_properties (list, optional): Property columns to keep.

    Returns:
        str or None: CSV text when ``path`` is None.
    """
    features = list(features)
    if not features:
        return "" if path is None else None

    if selected_properties is None:
        properties = list(dict.fromkeys(
            name for f in features for name in (f.get("properties") or {})
        ))
    else:
        properties = list(selected_properties)

    df = pd.DataFrame(_csv_rows(features, properties, include_geometry))
    return df.to_csv(path, index=False, sep=delimiter)


def format_size(num_bytes):
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.2f} KB"
    return f"{num_bytes / (1024 * 1024):.2f} MB"
