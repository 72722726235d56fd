#!/usr/bin/env python3
"""
Location record: a single GPS sample from a location history export.
"""

from datetime import datetime, timezone
from typing import NamedTuple, Optional
import calendar

from . import geometry


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as a timezone-aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def datetime_to_epoch_seconds(value: datetime) -> int:
    """Whole seconds since the Unix epoch, discarding any sub-second part."""
    return calendar.timegm(value.utctimetuple())


def divide_toward_zero(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero rather than flooring."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def epoch_seconds_to_datetime(seconds: int) -> datetime:
    """UTC datetime for a whole number of seconds since the Unix epoch."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class Location(NamedTuple):
    """Represents one GPS sample."""

    timestamp: datetime
    latitude: float
    longitude: float
    accuracy: int  # horizontal accuracy in meters
    altitude: Optional[int] = None  # meters, None when the export omits it

    @property
    def epoch_seconds(self) -> int:
        """Timestamp as whole seconds since the Unix epoch."""
        return datetime_to_epoch_seconds(self.timestamp)

    def distance(self, other: "Location") -> float:
        """Haversine distance to ``other`` in meters."""
        return geometry.haversine_distance(self, other)

    def speed_kmh(self, other: "Location") -> float:
        """
        Speed implied by moving from ``other`` to this sample.

        Falls back to the distance in kilometers when this sample is not
        strictly later than ``other``.
        """
        return geometry.speed_kmh(self, other)
