#!/usr/bin/env python3
"""
Distance and speed calculations between location samples.

The functions accept any objects exposing ``latitude`` and ``longitude`` in
decimal degrees; ``speed_kmh`` additionally needs ``epoch_seconds``.
"""

import math

# Mean Earth radius in meters
EARTH_RADIUS_M = 6_371_000.0

# 1 m/s expressed in km/h
MPS_TO_KMH = 3.6


def haversine_distance(a, b) -> float:
    """
    Calculate the great-circle distance between two samples.

    Args:
        a: First sample
        b: Second sample

    Returns:
        Distance in meters
    """
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push h just past 1 for antipodal points
    c = 2 * math.asin(min(1.0, math.sqrt(h)))

    return c * EARTH_RADIUS_M


def elapsed_seconds(a, b) -> int:
    """Whole seconds from sample ``b`` to sample ``a`` (negative if ``a`` is earlier)."""
    return a.epoch_seconds - b.epoch_seconds


def speed_kmh(a, b) -> float:
    """
    Calculate the speed implied by travelling from sample ``b`` to sample ``a``.

    When no time has elapsed, or ``a`` is not after ``b``, there is no rate to
    compute and the raw distance in kilometers is returned instead.

    Args:
        a: The current sample
        b: The reference sample

    Returns:
        Speed in km/h, or distance in km if the elapsed time is not positive
    """
    distance = haversine_distance(a, b)
    elapsed = elapsed_seconds(a, b)
    if elapsed > 0:
        return distance / elapsed * MPS_TO_KMH
    return distance / 1000.0
