from .core import GeoJSONLab
from .measurement.session import MeasurementSession
from .types import BoundingBox, FilterCriteria, PropertyFilter
from .__about__ import __version__
