import warnings
import pytest
from shapely.geometry import Point, mapping
from geojsonlab.exceptions import EmptyGeometryError, GeometryError
from geojsonlab.spatial import geometry as geo
from geojsonlab.spatial.measure import geometry_area

@pytest.fixture
def square():
    return {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]}

@pytest.fixture
def neighbour():
    # shares the x=1 edge with square
    return {"type": "Polygon", "coordinates": [[[1, 0], [2, 0], [2, 1], [1, 1], [1, 0]]]}

@pytest.fixture
def overlapping():
    return {"type": "Polygon", "coordinates": [[[0.5, 0.5], [1.5, 0.5], [1.5, 1.5], [0.5, 1.5], [0.5, 0.5]]]}

@pytest.fixture
def inside_point():
    return {"type": "Point", "coordinates": [0.5, 0.5]}

def test_to_shape_accepts_feature(square):
    geom = geo.to_shape({"type": "Feature", "geometry": square, "properties": {}})
    assert geom.geom_type == "Polygon"

def test_to_shape_rejects_missing_and_malformed():
    with pytest.raises(GeometryError):
        geo.to_shape(None)
    with pytest.raises(GeometryError):
        geo.to_shape({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})
    with pytest.raises(GeometryError):
        geo.to_shape({"type": "Hexagon", "coordinates": []})

def test_iter_positions_recurses_geometry_collection():
    collection = {
        "type": "GeometryCollection",
        "geometries": [
            {"type": "Point", "coordinates": [1, 2]},
            {"type": "LineString", "coordinates": [[3, 4], [5, 6, 7]]},
        ],
    }
    positions = list(geo.iter_positions(collection))
    assert [p[:2] for p in positions] == [[1, 2], [3, 4], [5, 6]]

def test_bounding_box(square, inside_point):
    features = [
        {"type": "Feature", "geometry": square, "properties": {}},
        {"type": "Feature", "geometry": {"type": "Point", "coordinates": [-3, 4]}, "properties": {}},
        {"type": "Feature", "geometry": None, "properties": {}},
    ]
    bbox = geo.bounding_box(features)
    assert bbox.as_tuple() == (-3, 0, 1, 4)

def test_bounding_box_accepts_feature_collection(square):
    collection = {"type": "FeatureCollection", "features": [{"type": "Feature", "geometry": square}]}
    assert geo.bounding_box(collection).as_tuple() == (0, 0, 1, 1)

def test_bounding_box_skips_malformed_positions(square):
    features = [
        {"type": "Feature", "geometry": square, "properties": {}},
        {"type": "Feature", "geometry": {"type": "Point", "coordinates": [9]}, "properties": {}},
        {"type": "Feature", "geometry": {"type": "Point", "coordinates": ["9", "9"]}, "properties": {}},
    ]
    with pytest.warns(UserWarning, match="malformed position"):
        bbox = geo.bounding_box(features)
    assert bbox.as_tuple() == (0, 0, 1, 1)

def test_bounding_box_empty_raises():
    with pytest.raises(EmptyGeometryError):
        geo.bounding_box([])
    with pytest.raises(EmptyGeometryError):
        geo.bounding_box([{"type": "Feature", "geometry": None, "properties": {}}])

def test_centroid_point_returns_itself(inside_point):
    assert geo.centroid(inside_point) == (0.5, 0.5)

def test_centroid_polygon_is_area_weighted():
    # vertex mean of this L-shape is pulled toward the dense corner
    l_shape = {"type": "Polygon", "coordinates": [[
        [0, 0], [4, 0], [4, 1], [1, 1], [1, 4], [0, 4], [0, 0],
    ]]}
    x, y = geo.centroid(l_shape)
    assert x == pytest.approx(y)
    assert x == pytest.approx(((4 * 1) * 2 + (1 * 3) * 0.5) / 7)

def test_centroid_missing_geometry_raises():
    with pytest.raises(GeometryError):
        geo.centroid({"type": "Feature", "geometry": None, "properties": {}})

def test_predicates_point_in_polygon(square, inside_point):
    assert geo.intersects(inside_point, square)
    assert geo.within(inside_point, square)
    assert geo.contains(square, inside_point)
    assert not geo.disjoint(inside_point, square)

def test_predicates_far_point(square):
    far = {"type": "Point", "coordinates": [10, 10]}
    assert geo.disjoint(far, square)
    assert not geo.intersects(far, square)

def test_overlaps_and_crosses(square, overlapping):
    assert geo.overlaps(square, overlapping)
    line = {"type": "LineString", "coordinates": [[-1, 0.5], [2, 0.5]]}
    assert geo.crosses(line, square)

def test_predicates_return_false_on_malformed(square):
    broken = {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}
    for predicate in (geo.intersects, geo.contains, geo.within, geo.overlaps,
                      geo.crosses, geo.disjoint, geo.touches):
        assert predicate(broken, square) is False
        assert predicate(None, square) is False
        # WKT text and bare coordinate lists are not GeoJSON objects
        assert predicate("POINT (0 0)", square) is False
        assert predicate(square, [0.5, 0.5]) is False

def test_geometry_of_rejects_non_mappings():
    with pytest.raises(GeometryError):
        geo.geometry_of("POINT (0 0)")
    with pytest.raises(GeometryError):
        geo.to_shape({"type": "Feature", "geometry": "POINT (0 0)", "properties": {}})

def test_evaluate(square, inside_point):
    assert geo.evaluate("within", inside_point, square)
    assert geo.evaluate("contains", square, inside_point)
    assert not geo.evaluate("contains", inside_point, square)
    assert geo.evaluate("disjoint", {"type": "Point", "coordinates": [5, 5]}, square)
    assert geo.evaluate("intersects", "POINT (0 0)", square) is False
    with pytest.raises(ValueError):
        geo.evaluate("near", inside_point, square)

@pytest.mark.parametrize("relation", ["intersects", "contains", "within", "overlaps",
                                      "touches", "crosses", "disjoint"])
def test_evaluate_matches_named_predicate(relation, square, overlapping):
    assert geo.evaluate(relation, square, overlapping) == geo.PREDICATES[relation](square, overlapping)

def test_iter_positions_skips_malformed():
    rejected = []
    geometry = {"type": "MultiPoint", "coordinates": [[1, 2], [5], ["1", "2"], [True, 3]]}
    assert list(geo.iter_positions(geometry, rejected)) == [[1, 2]]
    assert rejected == [[5], ["1", "2"], [True, 3]]

def test_iter_positions_string_coordinates():
    rejected = []
    assert list(geo.iter_positions({"type": "Point", "coordinates": "1,2"}, rejected)) == []
    assert rejected == ["1,2"]

def test_feature_positions_warns_and_continues():
    features = [
        {"type": "Feature", "geometry": {"type": "Point", "coordinates": [5]}, "properties": {}},
        {"type": "Feature", "geometry": "POINT (0 0)", "properties": {}},
        {"type": "Feature", "geometry": {"type": "Point", "coordinates": [3, 4]}, "properties": {}},
    ]
    with pytest.warns(UserWarning) as record:
        positions = list(geo.feature_positions(features))
    assert positions == [(2, (3, 4))]
    messages = [str(w.message) for w in record]
    assert any("feature 0" in m for m in messages)
    assert any("feature 1" in m for m in messages)

def test_touches_shared_edge(square, neighbour, overlapping):
    assert geo.touches(square, neighbour)
    assert geo.touches(square, neighbour, strict=True)
    assert not geo.touches(square, overlapping)

def test_touches_approximation_differs_from_strict(square):
    # a line entering the polygon interior intersects but cannot "overlap" a polygon
    line = {"type": "LineString", "coordinates": [[-1, 0.5], [0.5, 0.5]]}
    assert geo.touches(line, square)
    assert not geo.touches(line, square, strict=True)

def test_buffer_point_radius():
    origin = {"type": "Point", "coordinates": [0, 0]}
    region = geo.buffer(origin, 1.0)
    assert region.contains(Point(0.005, 0))  # ~556 m east
    assert not region.contains(Point(0.02, 0))  # ~2.2 km east
    # a 1 km disc is close to pi km^2
    assert geometry_area(mapping(region)) == pytest.approx(3.14159e6, rel=1e-2)

def test_buffer_emits_no_deprecation_warning(square):
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        region = geo.buffer(square, 0.5)
    assert region.contains(geo.to_shape(square))

def test_buffer_zero_returns_geometry(square):
    assert geo.buffer(square, 0).equals(geo.to_shape(square))

def test_buffer_negative_raises(square):
    with pytest.raises(GeometryError):
        geo.buffer(square, -1)
