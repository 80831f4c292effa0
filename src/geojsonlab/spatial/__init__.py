"""
Geometry math and coordinate checks for WGS84 GeoJSON.
"""
