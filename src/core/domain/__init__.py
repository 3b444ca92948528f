"""
Domain models and value objects.

Contains the time-zone object model: Period, Occurrence, UTCOffset,
TimeZoneObservance, TimeZone.
"""

from src.core.domain.observance import ObservanceKind, TimeZoneObservance
from src.core.domain.period import SMALLEST_TIME_UNIT, Occurrence, Period
from src.core.domain.time_zone import TimeZone
from src.core.domain.utc_offset import MAX_OFFSET_SECONDS, UTCOffset

__all__ = [
    # Period module
    "SMALLEST_TIME_UNIT",
    "Period",
    "Occurrence",
    # UTC offset
    "MAX_OFFSET_SECONDS",
    "UTCOffset",
    # Observance
    "ObservanceKind",
    "TimeZoneObservance",
    # Time zone
    "TimeZone",
]
