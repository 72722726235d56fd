from dataclasses import dataclass

# Samples implying a speed at or above this, relative to the last accepted
# sample, are treated as outliers.
DEFAULT_MAX_SPEED_KMH = 300.0


@dataclass
class LocationHistoryConfig:
    """Configuration for location history analysis."""

    max_speed_kmh: float = DEFAULT_MAX_SPEED_KMH
