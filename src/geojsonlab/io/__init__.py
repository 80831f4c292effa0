from .geojson import load_geojson, parse, validate, to_feature_collection
from .export import to_csv, to_geodataframe, to_geojson
