"""
Great-circle measurements on a spherical earth.

All functions take ``[longitude, latitude(, altitude)]`` positions in decimal
degrees and return meters (or square meters). Altitude is ignored.
"""

import math

import numpy as np
from pyproj import Geod
from shapely.geometry.polygon import orient

from geojsonlab.config import EARTH_RADIUS_METERS
from geojsonlab.exceptions import GeometryError
from geojsonlab.spatial.geometry import polygon_parts, to_shape

GEOD = Geod(a=EARTH_RADIUS_METERS, b=EARTH_RADIUS_METERS)


def _lnglat(position):
    try:
        lng, lat = float(position[0]), float(position[1])
    except (TypeError, ValueError, IndexError) as e:
        raise GeometryError(f"Invalid position {position!r}: {e}") from e
    if not (math.isfinite(lng) and math.isfinite(lat)):
        raise GeometryError(f"Position {position!r} is not finite.")
    return lng, lat


def _split(points):
    coords = [_lnglat(p) for p in points]
    lngs = np.array([c[0] for c in coords])
    lats = np.array([c[1] for c in coords])
    return lngs, lats


def distance(a, b):
    """
    Great-circle distance between two positions.

    Args:
        a (sequence): Start position [lng, lat].
        b (sequence): End position [lng, lat].

    Returns:
        float: Distance in meters.
    """
    lng1, lat1 = _lnglat(a)
    lng2, lat2 = _lnglat(b)
    _, _, dist = GEOD.inv(lng1, lat1, lng2, lat2)
    return float(dist)


def distances_from(origin, positions):
    """
    Vectorised great-circle distances from one origin to many positions.

    Returns:
        numpy.ndarray: Distances in meters, same order as ``positions``.
    """
    if len(positions) == 0:
        return np.array([])
    lng, lat = _lnglat(origin)
    lngs, lats = _split(positions)
    _, _, dists = GEOD.inv(np.full(lngs.shape, lng), np.full(lats.shape, lat), lngs, lats)
    return np.asarray(dists, dtype=float)


def bearing(a, b):
    """
    Initial bearing from ``a`` to ``b``.

    Args:
        a (sequence): Start position [lng, lat].
        b (sequence): End position [lng, lat].

    Returns:
        float: Bearing in degrees, in the range [0, 360).

    Raises:
        GeometryError: If both positions coincide (bearing undefined).
    """
    lng1, lat1 = _lnglat(a)
    lng2, lat2 = _lnglat(b)
    if lng1 == lng2 and lat1 == lat2:
        raise GeometryError("Bearing is undefined between coincident positions.")

    azimuth, _, _ = GEOD.inv(lng1, lat1, lng2, lat2)
    azimuth = float(azimuth)
    if azimuth < 0:
        azimuth += 360.0
    # -0.0 + 360 rounds up to the excluded upper bound
    if azimuth >= 360.0:
        azimuth -= 360.0
    return azimuth


def area(ring):
    """
    Area enclosed by a ring of positions.

    The ring is closed (first position appended) when the last position
    differs from the first.

    Args:
        ring (sequence): At least three [lng, lat] positions.

    Returns:
        float: Area in square meters.

    Raises:
        GeometryError: If fewer than three positions are given.
    """
    if len(ring) < 3:
        raise GeometryError("Area calculation requires at least 3 points.")

    coords = list(ring)
    if _lnglat(coords[0]) != _lnglat(coords[-1]):
        coords.append(coords[0])

    lngs, lats = _split(coords)
    signed_area, _ = GEOD.polygon_area_perimeter(lngs, lats)
    return abs(float(signed_area))


def path_length(points):
    """Cumulative distance along consecutive positions (open path), in meters."""
    if len(points) < 2:
        raise GeometryError("Distance calculation requires at least 2 points.")
    lngs, lats = _split(points)
    return float(GEOD.line_length(lngs, lats))


def perimeter(points):
    """
    Perimeter of a sequence of positions.

    Two positions give the single segment length. Three or more are treated
    as a loop and the closing segment (last back to first) is added.

    Raises:
        GeometryError: If fewer than two positions are given.
    """
    if len(points) < 2:
        raise GeometryError("Perimeter calculation requires at least 2 points.")

    total = path_length(points)
    if len(points) > 2:
        total += distance(points[-1], points[0])
    return total


def geometry_area(geometry):
    """
    Area of the polygonal parts of a GeoJSON geometry, in square meters.

    Holes are subtracted. Non-polygonal parts contribute nothing.
    """
    geom = to_shape(geometry)
    total = 0.0
    for polygon in polygon_parts(geom):
        # exterior counter-clockwise, holes clockwise -> positive area with holes removed
        signed_area, _ = GEOD.geometry_area_perimeter(orient(polygon, sign=1.0))
        total += float(signed_area)
    return abs(total)


def geometry_length(geometry):
    """Great-circle length of a (Multi)LineString geometry, in meters."""
    geom = to_shape(geometry)
    return float(GEOD.geometry_length(geom))
