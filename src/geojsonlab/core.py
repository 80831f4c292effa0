from geojsonlab.config import DEFAULT_NEAREST_LIMIT
from geojsonlab.io.geojson import load_geojson
from geojsonlab.io.export import to_csv, to_geodataframe, to_geojson
from geojsonlab.metrics.statistics import analyze
from geojsonlab.query import spatial
from geojsonlab.query.filters import apply_filters
from geojsonlab.spatial.crs import detect_crs, detect_projection_issues, validate_coordinates
from geojsonlab.types import FilterCriteria, PropertyFilter
import warnings

class GeoJSONLab:
    """
    Core class for GeoJSONLab.
    Holds one loaded feature collection (a layer) together with its load-time
    validation and statistics, and the filters currently applied to it.
    """

    def __init__(self, source, name=None):
        """
        Load and check a GeoJSON source.

        Coordinates and CRS are validated and statistics computed once here.
        Data quality findings are reported as warnings, never raised.

        Args:
            source (str, os.PathLike or dict): GeoJSON file path, text or mapping.
            name (str, optional): Display name of the layer.
        """
        raw, collection, validation = load_geojson(source)

        self.name = name
        self.raw = raw
        self.features = tuple(collection["features"])
        self.validation = validation

        self.crs_info = detect_crs(raw)
        self.coordinate_validation = validate_coordinates(self.features)
        self.projection_check = detect_projection_issues(self.features)
        self.statistics = analyze(self.features)

        self.criteria = FilterCriteria()

        for message in self.crs_info.warnings:
            warnings.warn(message)
        if not self.coordinate_validation.valid:
            warnings.warn(
                f"{self.coordinate_validation.out_of_bounds_count} coordinate values are "
                "outside WGS84 bounds: " + "; ".join(self.coordinate_validation.errors)
            )
        if self.projection_check.likely_issue:
            warnings.warn(" ".join(self.projection_check.suggestions))

    @property
    def is_valid(self):
        return self.crs_info.is_valid and self.coordinate_validation.valid

    def set_filters(self, search_text="", geometry_types=None, property_filters=None):
        """
        Replace the active filters.

        Args:
            search_text (str): Free text matched against properties and geometry type.
            geometry_types (iterable, optional): Geometry type names to keep.
            property_filters (list, optional): PropertyFilter objects or
                (property, operator, value) tuples, applied in order.

        Returns:
            list: The filtered features.
        """
        filters = []
        for item in property_filters or []:
            if not isinstance(item, PropertyFilter):
                item = PropertyFilter(*item)
            filters.append(item)

        self.criteria = FilterCriteria(
            search_text=search_text,
            geometry_types=set(geometry_types or []),
            property_filters=filters,
        )
        return self.filtered_features()

    def clear_filters(self):
        self.criteria = FilterCriteria()

    def filtered_features(self):
        return apply_filters(self.features, self.criteria)

    def spatial_query(self, relation, geometry, buffer=None):
        return spatial.query(self.features, relation, geometry, buffer=buffer)

    def nearest(self, point, limit=DEFAULT_NEAREST_LIMIT, max_distance=None):
        return spatial.nearest(self.features, point, limit=limit, max_distance=max_distance)

    def select_by_attribute(self, property, operator, value):
        return spatial.query_by_attribute(self.features, property, operator, value)

    def select_in_bounds(self, bounds):
        return spatial.within_bounds(self.features, bounds)

    def to_geodataframe(self, filtered=True):
        """
        Export the features as a GeoDataFrame.

        Args:
            filtered (bool): Export only features passing the active filters.
        """
        return to_geodataframe(self.filtered_features() if filtered else self.features)

    def export_geojson(self, path=None, filtered=True, pretty=True):
        text = to_geojson(self.filtered_features() if filtered else self.features, pretty=pretty)
        if path is None:
            return text
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return None

    def export_csv(self, path=None, filtered=True, **kwargs):
        return to_csv(self.filtered_features() if filtered else self.features, path=path, **kwargs)
