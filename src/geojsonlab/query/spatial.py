"""
Spatial, nearest-neighbour and attribute queries over features.
"""

import numpy as np
from shapely.errors import ShapelyError
from shapely.geometry import box, mapping
from shapely.ops import unary_union

from geojsonlab.config import DEFAULT_NEAREST_LIMIT
from geojsonlab.constants import (
    ATTRIBUTE_OPERATOR_ALIASES,
    ATTRIBUTE_OPERATORS,
    POLYGON_TYPES,
    SPATIAL_RELATIONS,
)
from geojsonlab.exceptions import GeometryError
from geojsonlab.query.filters import matches
from geojsonlab.spatial import geometry as geo
from geojsonlab.spatial.measure import distances_from
from geojsonlab.types import BoundingBox


def _in_relation(relation, geometry, region):
    # "contains" selects features the query region contains
    if relation == "contains":
        return geo.evaluate(relation, region, geometry)
    return geo.evaluate(relation, geometry, region)


def _as_feature(geom, properties=None):
    return {"type": "Feature", "geometry": mapping(geom), "properties": properties or {}}


def _shape_or_none(geometry):
    try:
        return geo.to_shape(geometry)
    except GeometryError:
        return None


def query(features, relation, geometry, buffer=None):
    """
    Select features standing in a spatial relation to a query geometry.

    Relations read "feature <relation> query geometry", except ``contains``
    which selects features contained by the query geometry.

    Args:
        features (list): Features to test.
        relation (str): One of ``SPATIAL_RELATIONS``.
        geometry (dict): GeoJSON query geometry.
        buffer (float, optional): Distance in meters to buffer the query
            geometry by before testing.

    Returns:
        list: Matching features, in input order.
    """
    if relation not in SPATIAL_RELATIONS:
        raise ValueError(f"Unknown spatial relation '{relation}'. Expected one of {SPATIAL_RELATIONS}.")

    region = _shape_or_none(geometry)
    if region is not None and buffer and buffer > 0:
        try:
            region = geo.buffer(region, buffer / 1000)
        except GeometryError:
            pass  # keep the unbuffered region

    if region is None:
        return []

    return [f for f in features if f.get("geometry") and _in_relation(relation, f["geometry"], region)]


def nearest(features, point, limit=DEFAULT_NEAREST_LIMIT, max_distance=None):
    """
    Features closest to a point, nearest first.

    Non-point features are measured from their centroid. Equal distances keep
    input order. A feature whose distance cannot be computed sorts last and is
    dropped entirely when ``max_distance`` is given.

    Args:
        features (list): Candidate features.
        point (sequence): Query position [lng, lat].
        limit (int): Maximum number of features returned.
        max_distance (float, optional): Maximum distance in meters.

    Returns:
        list: Up to ``limit`` features sorted by ascending distance.
    """
    candidates = [f for f in features if f.get("geometry")]
    if not candidates:
        return []

    dists = np.full(len(candidates), np.inf)
    located = []
    positions = []
    for i, feature in enumerate(candidates):
        try:
            positions.append(geo.centroid(feature["geometry"]))
            located.append(i)
        except GeometryError:
            continue

    if located:
        dists[located] = distances_from(point, positions)

    order = np.argsort(dists, kind="stable")
    if max_distance is not None:
        order = order[dists[order] <= max_distance]

    return [candidates[i] for i in order[:limit]]


def query_by_attribute(features, property, operator, value):
    """
    One-shot attribute query.

    Accepts the filter operators plus ``!=``, ``starts_with``/``ends_with``
    and the symbolic comparison forms. Features where the property is missing
    or null never match, whatever the operator.
    """
    op = ATTRIBUTE_OPERATOR_ALIASES.get(operator, operator)
    if op not in ATTRIBUTE_OPERATORS:
        raise ValueError(f"Unknown attribute operator '{operator}'.")

    results = []
    for feature in features:
        properties = feature.get("properties") or {}
        if properties.get(property) is None:
            continue
        if matches(properties[property], op, value):
            results.append(feature)
    return results


def within_bounds(features, bounds):
    """
    Features lying within or crossing a bounding box.

    Args:
        features (list): Features to test.
        bounds (BoundingBox or tuple): (west, south, east, north).
    """
    if isinstance(bounds, BoundingBox):
        bounds = bounds.as_tuple()
    region = box(*bounds)
    return [
        f for f in features
        if f.get("geometry") and (geo.within(f["geometry"], region) or geo.intersects(f["geometry"], region))
    ]


def buffer_point(point, distance):
    """Circle of ``distance`` meters around a position as a Feature, or None."""
    try:
        region = geo.buffer({"type": "Point", "coordinates": list(point[:2])}, distance / 1000)
    except (GeometryError, TypeError):
        return None
    return _as_feature(region)


def get_by_id(features, feature_id):
    for feature in features:
        if feature.get("id") == feature_id:
            return feature
    return None


def get_by_ids(features, ids):
    wanted = set(ids)
    return [f for f in features if f.get("id") is not None and f["id"] in wanted]


def get_bounds(features):
    """Bounding box of the features that have a geometry, or None."""
    try:
        return geo.bounding_box([f for f in features if f.get("geometry")])
    except GeometryError:
        return None


def convex_hull(features):
    """Convex hull of all feature geometries as a Feature, or None."""
    shapes = [s for s in (_shape_or_none(f.get("geometry")) for f in features) if s is not None]
    if not shapes:
        return None
    try:
        hull = unary_union(shapes).convex_hull
    except ShapelyError:
        return None
    if hull.is_empty or hull.geom_type not in POLYGON_TYPES:
        return None
    return _as_feature(hull)


def _polygons(features):
    return [
        f for f in features
        if f and f.get("geometry") and f["geometry"].get("type") in POLYGON_TYPES
    ]


def union(features):
    """
    Union of the polygonal features, folded pairwise from the left.

    Returns:
        dict or None: The merged Feature, the only polygon when there is one,
        or None when there is nothing to merge.
    """
    polygons = _polygons(features)
    if not polygons:
        return None
    if len(polygons) == 1:
        return polygons[0]

    try:
        result = geo.to_shape(polygons[0]["geometry"])
        for feature in polygons[1:]:
            result = result.union(geo.to_shape(feature["geometry"]))
    except (GeometryError, ShapelyError):
        return None
    return _as_feature(result)


def _overlay(first, second, op):
    if len(_polygons([first, second])) != 2:
        return None
    try:
        left = geo.to_shape(first["geometry"])
        right = geo.to_shape(second["geometry"])
        result = getattr(left, op)(right)
    except (GeometryError, ShapelyError):
        return None
    if result.is_empty or result.geom_type not in POLYGON_TYPES:
        return None
    return _as_feature(result)


def intersection(first, second):
    """Polygon intersection of two features, or None when they do not overlap."""
    return _overlay(first, second, "intersection")


def difference(first, second):
    """``first`` minus ``second`` for two polygon features, or None."""
    return _overlay(first, second, "difference")
