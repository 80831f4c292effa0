from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple, Optional, Union

from .constants import FILTER_OPERATORS

Position = tuple[float, float]


@dataclass
class BoundingBox:
    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @classmethod
    def empty(cls):
        return cls(0.0, 0.0, 0.0, 0.0)

    def as_tuple(self):
        """(west, south, east, north)"""
        return (self.min_lng, self.min_lat, self.max_lng, self.max_lat)


@dataclass(frozen=True)
class CRSInfo:
    name: str
    epsg_code: Optional[str]
    is_wgs84: bool
    is_valid: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class CoordinateValidation:
    valid: bool
    errors: tuple[str, ...]
    out_of_bounds_count: int


@dataclass(frozen=True)
class ProjectionCheck:
    likely_issue: bool
    suggestions: tuple[str, ...]


class TopValue(NamedTuple):
    value: str
    count: int


@dataclass
class PropertyStatistics:
    name: str
    type: str
    unique_values: int
    null_count: int
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    median: Optional[float] = None
    top_values: Optional[list[TopValue]] = None


@dataclass
class StatisticsResult:
    feature_count: int
    geometry_types: dict[str, int]
    bounds: BoundingBox
    properties: list[PropertyStatistics]
    total_area: Optional[float] = None  # km²
    total_length: Optional[float] = None  # km

    def get_property(self, name):
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass(frozen=True)
class PropertyFilter:
    property: str
    operator: str
    value: Union[str, int, float]

    def __post_init__(self):
        if self.operator not in FILTER_OPERATORS:
            raise ValueError(
                f"Unknown filter operator '{self.operator}'. Expected one of {FILTER_OPERATORS}."
            )


@dataclass
class FilterCriteria:
    search_text: str = ""
    geometry_types: set[str] = field(default_factory=set)
    property_filters: list[PropertyFilter] = field(default_factory=list)

    def is_empty(self):
        return (
            not self.search_text.strip()
            and not self.geometry_types
            and not self.property_filters
        )


@dataclass(frozen=True)
class MeasurementResult:
    id: str
    type: str
    value: float
    coordinates: tuple[Position, ...]
    label: str
    timestamp: datetime


@dataclass(frozen=True)
class ValidationIssue:
    message: str
    code: Optional[str] = None
    path: Optional[str] = None


@dataclass
class ValidationResult:
    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
