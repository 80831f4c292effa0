import pytest
from geojsonlab.query import spatial
from geojsonlab.spatial.measure import geometry_area
from geojsonlab.types import BoundingBox

def polygon(x0, y0, x1, y1):
    return {"type": "Polygon", "coordinates": [[[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]]}

def feature(fid, geometry, **properties):
    return {"type": "Feature", "id": fid, "geometry": geometry, "properties": properties}

@pytest.fixture
def features():
    return [
        feature("a", {"type": "Point", "coordinates": [0.5, 0.5]}, name="inside", height=10),
        feature("b", {"type": "Point", "coordinates": [3, 3]}, name="outside", height=25),
        feature("c", {"type": "LineString", "coordinates": [[-1, 0.5], [2, 0.5]]}, name="crossing"),
        feature("d", polygon(0.2, 0.2, 0.4, 0.4), name="small square", height="tall"),
        feature("e", None, name="no geometry", height=30),
    ]

@pytest.fixture
def region():
    return polygon(0, 0, 1, 1)

def ids(features):
    return [f["id"] for f in features]

def test_query_intersects(features, region):
    assert ids(spatial.query(features, "intersects", region)) == ["a", "c", "d"]

def test_query_within(features, region):
    assert ids(spatial.query(features, "within", region)) == ["a", "d"]

def test_query_contains_reads_region_contains_feature(features, region):
    assert ids(spatial.query(features, "contains", region)) == ["a", "d"]

def test_query_disjoint(features, region):
    assert ids(spatial.query(features, "disjoint", region)) == ["b"]

def test_query_crosses(features, region):
    assert ids(spatial.query(features, "crosses", region)) == ["c"]

def test_query_touches(features):
    edge_neighbour = [feature("n", polygon(1, 0, 2, 1))]
    assert ids(spatial.query(edge_neighbour, "touches", polygon(0, 0, 1, 1))) == ["n"]
    assert spatial.query(edge_neighbour, "overlaps", polygon(0, 0, 1, 1)) == []

def test_query_with_buffer(features):
    near = [feature("p", {"type": "Point", "coordinates": [0.005, 0]})]  # ~556 m from origin
    origin = {"type": "Point", "coordinates": [0, 0]}
    assert spatial.query(near, "intersects", origin) == []
    assert ids(spatial.query(near, "intersects", origin, buffer=1000)) == ["p"]
    assert spatial.query(near, "intersects", origin, buffer=100) == []

def test_query_malformed_geometry_matches_nothing(features):
    broken = {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}
    assert spatial.query(features, "intersects", broken) == []

def test_query_unknown_relation(features, region):
    with pytest.raises(ValueError):
        spatial.query(features, "near", region)

def test_nearest_orders_by_distance(features):
    result = spatial.nearest(features, [3.1, 3.1])
    # a and c share the same centroid; input order breaks the tie
    assert ids(result) == ["b", "a", "c", "d"]
    assert "e" not in ids(result)

def test_nearest_uses_centroid_for_polygons():
    candidates = [
        feature("far", {"type": "Point", "coordinates": [0, 2]}),
        feature("square", polygon(-1, -1, 1, 1)),  # centroid at the query point
    ]
    assert ids(spatial.nearest(candidates, [0, 0])) == ["square", "far"]

def test_nearest_limit_and_ties():
    candidates = [
        feature("west", {"type": "Point", "coordinates": [-1, 0]}),
        feature("far", {"type": "Point", "coordinates": [5, 0]}),
        feature("east", {"type": "Point", "coordinates": [1, 0]}),
        feature("near", {"type": "Point", "coordinates": [0.5, 0]}),
    ]
    assert ids(spatial.nearest(candidates, [0, 0], limit=2)) == ["near", "west"]
    assert ids(spatial.nearest(candidates, [0, 0])) == ["near", "west", "east", "far"]


def test_nearest_max_distance_zero_is_empty(features):
    assert spatial.nearest(features, [10, 10], max_distance=0) == []

def test_nearest_max_distance(features):
    # a and c are about 157 km away, d and b further
    result = spatial.nearest(features, [1.5, 1.5], max_distance=160_000)
    assert ids(result) == ["a", "c"]

def test_nearest_unmeasurable_feature_sorts_last():
    candidates = [
        feature("broken", {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}),
        feature("ok", {"type": "Point", "coordinates": [50, 50]}),
    ]
    assert ids(spatial.nearest(candidates, [0, 0])) == ["ok", "broken"]
    assert ids(spatial.nearest(candidates, [0, 0], max_distance=1e9)) == ["ok"]

def test_query_by_attribute(features):
    assert ids(spatial.query_by_attribute(features, "height", ">", 15)) == ["b", "e"]
    assert ids(spatial.query_by_attribute(features, "height", "gte", 10)) == ["a", "b", "e"]
    assert ids(spatial.query_by_attribute(features, "name", "=", "INSIDE")) == ["a"]
    assert ids(spatial.query_by_attribute(features, "name", "startsWith", "no")) == ["e"]
    assert ids(spatial.query_by_attribute(features, "name", "ends_with", "square")) == ["d"]

def test_query_by_attribute_not_equals_skips_missing(features):
    # c has no height at all and must not match "!="
    assert ids(spatial.query_by_attribute(features, "height", "!=", 10)) == ["b", "d", "e"]

def test_query_by_attribute_unknown_operator(features):
    with pytest.raises(ValueError):
        spatial.query_by_attribute(features, "height", "~", 1)

def test_within_bounds_is_inclusive(features):
    result = spatial.within_bounds(features, (0, 0, 1, 1))
    assert ids(result) == ["a", "c", "d"]
    assert ids(spatial.within_bounds(features, BoundingBox(2, 2, 4, 4))) == ["b"]

def test_union_of_adjacent_squares():
    squares = [feature("l", polygon(0, 0, 1, 1)), feature("r", polygon(1, 0, 2, 1))]
    merged = spatial.union(squares)
    assert merged["geometry"]["type"] == "Polygon"
    assert geometry_area(merged["geometry"]) == pytest.approx(
        geometry_area(polygon(0, 0, 2, 1)), rel=1e-3
    )

def test_union_folds_many_polygons():
    squares = [feature(str(i), polygon(i, 0, i + 1, 1)) for i in range(4)]
    merged = spatial.union(squares)
    assert geometry_area(merged["geometry"]) == pytest.approx(
        geometry_area(polygon(0, 0, 4, 1)), rel=1e-3
    )

def test_union_edge_cases(features):
    single = feature("s", polygon(0, 0, 1, 1))
    assert spatial.union([single]) is single
    assert spatial.union([]) is None
    # only points and lines
    assert spatial.union(features[:3]) is None

def test_intersection_and_difference():
    left = feature("l", polygon(0, 0, 2, 2))
    right = feature("r", polygon(1, 1, 3, 3))
    far = feature("f", polygon(10, 10, 11, 11))

    overlap = spatial.intersection(left, right)
    assert overlap["geometry"]["type"] == "Polygon"
    assert geometry_area(overlap["geometry"]) == pytest.approx(
        geometry_area(polygon(1, 1, 2, 2)), rel=1e-3
    )
    assert spatial.intersection(left, far) is None

    rest = spatial.difference(left, right)
    assert geometry_area(rest["geometry"]) == pytest.approx(
        geometry_area(polygon(0, 0, 2, 2)) - geometry_area(polygon(1, 1, 2, 2)), rel=1e-3
    )
    assert spatial.difference(left, left) is None

def test_set_operations_reject_non_polygons(features):
    point = features[0]
    assert spatial.intersection(point, feature("sq", polygon(0, 0, 1, 1))) is None
    assert spatial.difference(feature("sq", polygon(0, 0, 1, 1)), None) is None

def test_convex_hull(features):
    hull = spatial.convex_hull(features)
    assert hull["geometry"]["type"] == "Polygon"
    assert spatial.convex_hull([]) is None

def test_buffer_point():
    circle = spatial.buffer_point([0, 0], 1000)
    assert circle["geometry"]["type"] == "Polygon"
    assert spatial.buffer_point([0, 0], -5) is None

def test_get_by_id(features):
    assert spatial.get_by_id(features, "b")["properties"]["name"] == "outside"
    assert spatial.get_by_id(features, "zz") is None
    assert ids(spatial.get_by_ids(features, ["d", "a"])) == ["a", "d"]

def test_get_bounds(features):
    assert spatial.get_bounds(features).as_tuple() == (-1, 0.2, 3, 3)
    assert spatial.get_bounds([features[4]]) is None

def test_query_skips_unreadable_feature_geometry(features, region):
    mixed = features + [feature("wkt", "POINT (0.5 0.5)"), feature("list", [0.5, 0.5])]
    assert ids(spatial.query(mixed, "intersects", region)) == ["a", "c", "d"]
    assert ids(spatial.query(mixed, "contains", region)) == ["a", "d"]
