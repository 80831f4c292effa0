from .session import MeasurementSession
from .units import (
    convert_area,
    convert_distance,
    format_area,
    format_bearing,
    format_distance,
)
