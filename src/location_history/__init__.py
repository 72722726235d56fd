#!/usr/bin/env python3
"""
Location History - analysis of GPS location history exports.

This package loads location history exports into a timestamp-ordered series
and provides nearest-timestamp lookup, speed-based outlier filtering and
sampling interval statistics.
"""
import importlib.metadata

__version__ = importlib.metadata.version("location-history")

# Import main classes for public API
from .config import DEFAULT_MAX_SPEED_KMH, LocationHistoryConfig
from .errors import (
    EmptyLocationsError,
    IngestionError,
    InsufficientDataError,
    InvalidFieldError,
    LocationHistoryError,
    MalformedJSONError,
)
from .geometry import EARTH_RADIUS_M, haversine_distance, speed_kmh
from .ingest import parse_locations
from .location import Location
from .locations import Locations

__all__ = [
    "DEFAULT_MAX_SPEED_KMH",
    "EARTH_RADIUS_M",
    "EmptyLocationsError",
    "IngestionError",
    "InsufficientDataError",
    "InvalidFieldError",
    "Location",
    "LocationHistoryConfig",
    "LocationHistoryError",
    "Locations",
    "MalformedJSONError",
    "haversine_distance",
    "parse_locations",
    "speed_kmh",
]
