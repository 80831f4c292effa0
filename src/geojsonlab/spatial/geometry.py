"""
Geometry conversion, bounding boxes, centroids, buffering and spatial predicates.

Features and geometries arrive as GeoJSON mappings and are converted to
shapely geometries on demand. Predicates follow DE-9IM semantics and never
raise: a geometry that cannot be evaluated yields ``False``.
"""

from collections.abc import Mapping

import numpy as np
import shapely
from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError
from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from geojsonlab.config import BUFFER_RESOLUTION, EARTH_RADIUS_METERS
from geojsonlab.constants import SPATIAL_RELATIONS
from geojsonlab.exceptions import EmptyGeometryError, GeometryError
from geojsonlab.types import BoundingBox
import warnings


def geometry_of(obj):
    """
    Return the GeoJSON geometry of a Feature, or ``obj`` itself when it is a geometry.

    Raises:
        GeometryError: If ``obj`` is neither a mapping nor a shapely geometry.
    """
    if obj is None:
        return None
    if isinstance(obj, BaseGeometry):
        return obj
    obj = getattr(obj, "__geo_interface__", obj)
    if not isinstance(obj, Mapping):
        raise GeometryError(f"Expected a GeoJSON object, got {type(obj).__name__}.")
    if obj.get("type") == "Feature":
        return obj.get("geometry")
    return obj


def feature_list(collection):
    """Features of a FeatureCollection mapping, or the sequence itself."""
    if isinstance(collection, dict):
        return list(collection.get("features") or [])
    return list(collection)


def to_shape(geometry):
    """
    Convert a GeoJSON geometry (or Feature) to a shapely geometry.

    Raises:
        GeometryError: If the geometry is missing, malformed or empty.
    """
    geometry = geometry_of(geometry)
    if geometry is None:
        raise GeometryError("Geometry is missing.")

    if isinstance(geometry, BaseGeometry):
        geom = geometry
    elif not isinstance(geometry, Mapping):
        raise GeometryError(f"Expected a GeoJSON geometry, got {type(geometry).__name__}.")
    else:
        try:
            geom = shape(geometry)
        except (ShapelyError, AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise GeometryError(f"Malformed {geometry.get('type', 'geometry')}: {e}") from e

    if geom.is_empty:
        raise GeometryError(f"{geom.geom_type} is empty.")
    return geom


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_position(value):
    """True for a sequence holding at least a numeric longitude and latitude."""
    return (
        isinstance(value, (list, tuple))
        and len(value) >= 2
        and _is_number(value[0])
        and _is_number(value[1])
    )


def _walk(coords, rejected):
    if coords is None:
        return
    if not isinstance(coords, (list, tuple)):
        rejected.append(coords)
        return
    if not coords:
        return
    if not isinstance(coords[0], (list, tuple)):
        if is_position(coords):
            yield coords
        else:
            rejected.append(coords)
        return
    for part in coords:
        yield from _walk(part, rejected)


def iter_positions(geometry, rejected=None):
    """
    Yield every position of a GeoJSON geometry, recursing through
    GeometryCollection members.

    Only sequences of at least two numbers are yielded. Anything else found
    where a position belongs is appended to ``rejected`` when given.
    """
    if rejected is None:
        rejected = []
    geometry = geometry_of(geometry)
    if not geometry:
        return
    if isinstance(geometry, BaseGeometry):
        geometry = geometry.__geo_interface__
    if not isinstance(geometry, Mapping):
        raise GeometryError(f"Expected a GeoJSON geometry, got {type(geometry).__name__}.")

    if geometry.get("type") == "GeometryCollection":
        for member in geometry.get("geometries") or []:
            yield from iter_positions(member, rejected)
        return

    yield from _walk(geometry.get("coordinates"), rejected)


def feature_positions(collection):
    """
    Yield ``(feature index, (lng, lat))`` for every well-formed position.

    Malformed positions and geometries are skipped with a warning naming
    the feature, so one bad feature never stops a whole collection.
    """
    for index, feature in enumerate(feature_list(collection)):
        rejected = []
        try:
            for position in iter_positions(feature, rejected):
                yield index, (position[0], position[1])
        except GeometryError as e:
            warnings.warn(f"Skipping coordinates of feature {index}: {e}")
            continue
        if rejected:
            warnings.warn(f"Skipping {len(rejected)} malformed position(s) in feature {index}")


def polygon_parts(geom):
    """Yield the Polygon parts of a shapely geometry."""
    if geom.geom_type == "Polygon":
        yield geom
    elif hasattr(geom, "geoms"):
        for part in geom.geoms:
            yield from polygon_parts(part)


def bounding_box(features):
    """
    Bounding box over every coordinate of a set of features.

    Args:
        features: FeatureCollection mapping or sequence of Features/geometries.

    Returns:
        BoundingBox: min/max longitude and latitude.

    Raises:
        EmptyGeometryError: If there are no coordinates at all.
    """
    coords = [position for _, position in feature_positions(features)]
    if not coords:
        raise EmptyGeometryError("Cannot compute a bounding box without coordinates.")

    arr = np.asarray(coords, dtype=float)
    min_lng, min_lat = arr.min(axis=0)
    max_lng, max_lat = arr.max(axis=0)
    return BoundingBox(float(min_lng), float(min_lat), float(max_lng), float(max_lat))


def centroid(feature):
    """
    Representative center of a feature.

    Points return their own position; other geometries return the
    area/length weighted centroid.

    Returns:
        tuple: (lng, lat)
    """
    geom = to_shape(feature)
    if geom.geom_type == "Point":
        return (geom.x, geom.y)

    center = geom.centroid
    if center.is_empty:
        raise GeometryError(f"{geom.geom_type} has no centroid.")
    return (center.x, center.y)


def buffer(geometry, distance_km):
    """
    Expand a geometry outward by a distance.

    The geometry is projected to an azimuthal equidistant plane centred on
    its centroid, buffered in meters and projected back to lng/lat.

    Args:
        geometry: GeoJSON geometry, Feature or shapely geometry.
        distance_km (float): Buffer distance in kilometers.

    Returns:
        shapely.geometry.base.BaseGeometry: Buffered geometry in lng/lat.
    """
    geom = to_shape(geometry)
    if distance_km < 0:
        raise GeometryError("Buffer distance must not be negative.")
    if distance_km == 0:
        return geom

    center = geom.centroid
    try:
        lnglat = CRS.from_dict({"proj": "longlat", "R": EARTH_RADIUS_METERS})
        local = CRS.from_dict({
            "proj": "aeqd",
            "lat_0": center.y,
            "lon_0": center.x,
            "R": EARTH_RADIUS_METERS,
            "units": "m",
        })
        forward = Transformer.from_crs(lnglat, local, always_xy=True)
        backward = Transformer.from_crs(local, lnglat, always_xy=True)

        projected = shapely.transform(geom, forward.transform, interleaved=False)
        buffered = projected.buffer(distance_km * 1000.0, quad_segs=BUFFER_RESOLUTION)
        result = shapely.transform(buffered, backward.transform, interleaved=False)
    except (ProjError, ShapelyError, ValueError) as e:
        raise GeometryError(f"Failed to buffer {geom.geom_type}: {e}") from e

    if result.is_empty or not np.all(np.isfinite(result.bounds)):
        raise GeometryError(f"Buffering {geom.geom_type} produced no usable geometry.")
    return result


def _test(op, a, b):
    try:
        left, right = to_shape(a), to_shape(b)
        return bool(getattr(left, op)(right))
    except (GeometryError, ShapelyError):
        return False


def intersects(a, b):
    return _test("intersects", a, b)


def contains(a, b):
    """True if ``a`` contains ``b``."""
    return _test("contains", a, b)


def within(a, b):
    """True if ``a`` lies within ``b``."""
    return _test("within", a, b)


def overlaps(a, b):
    return _test("overlaps", a, b)


def crosses(a, b):
    return _test("crosses", a, b)


def disjoint(a, b):
    return _test("disjoint", a, b)


def touches(a, b, strict=False):
    """
    Boundary contact between two geometries.

    By default this is the approximation "intersects and does not overlap".
    With ``strict=True`` the DE-9IM touches predicate is used instead (no
    shared interior points at all).
    """
    if strict:
        return _test("touches", a, b)
    return intersects(a, b) and not overlaps(a, b)


PREDICATES = {
    "intersects": intersects,
    "contains": contains,
    "within": within,
    "overlaps": overlaps,
    "touches": touches,
    "crosses": crosses,
    "disjoint": disjoint,
}


def evaluate(relation, a, b):
    """
    Evaluate a named spatial relation, read as "``a`` <relation> ``b``".

    Args:
        relation (str): One of ``SPATIAL_RELATIONS``.
        a: GeoJSON geometry, Feature or shapely geometry.
        b: GeoJSON geometry, Feature or shapely geometry.

    Returns:
        bool: False when either geometry cannot be evaluated.

    Raises:
        ValueError: If the relation is unknown.
    """
    if relation not in PREDICATES:
        raise ValueError(f"Unknown spatial relation '{relation}'. Expected one of {SPATIAL_RELATIONS}.")
    return PREDICATES[relation](a, b)
