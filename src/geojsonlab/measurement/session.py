"""
Interactive multi-point measurement capture.

A ``MeasurementSession`` is owned by whatever handles map interaction. It is
either idle or collecting points for one mode; completing a measurement
records an immutable ``MeasurementResult`` and returns the session to idle.
"""

import uuid
import warnings
from datetime import datetime, timezone

from geojsonlab.constants import MEASUREMENT_MODES
from geojsonlab.exceptions import GeometryError, MeasurementStateError
from geojsonlab.measurement.units import format_area, format_bearing, format_distance
from geojsonlab.spatial.measure import area, bearing, path_length
from geojsonlab.types import MeasurementResult

IDLE = "idle"
COLLECTING = "collecting"

# mode -> (minimum points, maximum points)
POINT_LIMITS = {
    "distance": (2, None),
    "area": (3, None),
    "bearing": (2, 2),
}


class MeasurementSession:
    """
    State machine for distance, area and bearing measurements.

    Completed results are kept in ``measurements`` independently of the
    in-progress point list.
    """

    def __init__(self):
        self.mode = None
        self._points = []
        self._measurements = []

    @property
    def state(self):
        return IDLE if self.mode is None else COLLECTING

    @property
    def points(self):
        return tuple(self._points)

    @property
    def measurements(self):
        return tuple(self._measurements)

    @property
    def ready(self):
        """True when ``complete()`` would produce a result for the current points."""
        if self.mode is None:
            return False
        minimum, maximum = POINT_LIMITS[self.mode]
        count = len(self._points)
        return count >= minimum and (maximum is None or count <= maximum)

    def start(self, mode):
        """
        Begin collecting points for a measurement mode.

        Any points collected for a previous, unfinished measurement are discarded.

        Args:
            mode (str): "distance", "area" or "bearing".
        """
        if mode not in MEASUREMENT_MODES:
            raise ValueError(f"Unknown measurement mode '{mode}'. Expected one of {MEASUREMENT_MODES}.")
        self.mode = mode
        self._points = []

    def add_point(self, position):
        if self.mode is None:
            raise MeasurementStateError("Call start() before adding measurement points.")
        self._points.append((float(position[0]), float(position[1])))

    def _measure(self):
        if self.mode == "distance":
            value = path_length(self._points)
            return value, format_distance(value)
        if self.mode == "area":
            value = area(self._points)
            return value, format_area(value)
        value = bearing(self._points[0], self._points[1])
        return value, format_bearing(value)

    def complete(self):
        """
        Finalise the current measurement.

        Returns:
            MeasurementResult or None: None (and the session keeps collecting)
            when there are not enough points or the value cannot be computed.
        """
        if not self.ready:
            return None

        try:
            value, label = self._measure()
        except GeometryError as e:
            warnings.warn(f"Could not complete {self.mode} measurement: {e}")
            return None

        result = MeasurementResult(
            id=f"{self.mode}-{uuid.uuid4().hex[:12]}",
            type=self.mode,
            value=value,
            coordinates=tuple(self._points),
            label=label,
            timestamp=datetime.now(timezone.utc),
        )
        self._measurements.append(result)
        self.mode = None
        self._points = []
        return result

    def cancel(self):
        self.mode = None
        self._points = []

    def remove_measurement(self, measurement_id):
        """Remove one completed measurement. Returns True if it existed."""
        before = len(self._measurements)
        self._measurements = [m for m in self._measurements if m.id != measurement_id]
        return len(self._measurements) < before

    def clear_measurements(self):
        self._measurements = []
