class GeoJSONLabError(Exception):
    """Base exception for geojsonlab"""
    pass

class GeometryError(GeoJSONLabError):
    """Raised when a geometry is degenerate, empty or has too few coordinates"""
    pass

class EmptyGeometryError(GeometryError):
    """Raised when an operation has no coordinates to work on"""
    pass

class DataSchemaError(GeoJSONLabError):
    """Raised when data does not match the GeoJSON schema"""
    pass

class MeasurementStateError(GeoJSONLabError):
    """Raised when a measurement operation is not valid in the current session state"""
    pass
