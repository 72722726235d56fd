#!/usr/bin/env python3
"""
Location series: an ordered collection of samples from one history export.
"""

from datetime import datetime
from typing import IO, Iterable, Iterator, List, Optional, Tuple, Union
import bisect
import logging

from .config import LocationHistoryConfig
from .errors import EmptyLocationsError, InsufficientDataError
from .ingest import parse_locations
from .location import Location, divide_toward_zero, to_utc

logger = logging.getLogger(__name__)


class Locations:
    """Represents a location history, ordered by timestamp."""

    def __init__(
        self,
        locations: Iterable[Location] = (),
        config: Optional[LocationHistoryConfig] = None,
    ):
        """Initializes a Locations object.

        The samples are sorted by timestamp here, so every Locations instance
        is ordered regardless of the order it was given. The sort is stable:
        samples sharing a timestamp keep their relative order.

        Args:
            locations: Samples in any order.
            config: Analysis configuration. Defaults to LocationHistoryConfig().
        """
        self.config = config if config is not None else LocationHistoryConfig()
        self._locations: Tuple[Location, ...] = tuple(
            sorted(locations, key=lambda loc: to_utc(loc.timestamp))
        )
        self._timestamps: List[datetime] = [
            to_utc(loc.timestamp) for loc in self._locations
        ]

    @classmethod
    def from_json(
        cls, text: Union[str, bytes], config: Optional[LocationHistoryConfig] = None
    ) -> "Locations":
        """
        Create a Locations object from the JSON text of a history export.

        Args:
            text: JSON document with a top-level ``locations`` array
            config: Analysis configuration

        Returns:
            Locations sorted by timestamp

        Raises:
            MalformedJSONError: If the text is not valid JSON
            InvalidFieldError: If a sample is missing a field or has the wrong shape
        """
        staged = parse_locations(text)
        locations = cls(staged, config)
        logger.debug(f"Loaded location history with {len(locations)} samples")
        return locations

    @classmethod
    def from_stream(
        cls, file_input: IO, config: Optional[LocationHistoryConfig] = None
    ) -> "Locations":
        """
        Create a Locations object from an open file containing a history export.

        Args:
            file_input: File-like object opened for reading, in text or binary mode
            config: Analysis configuration

        Returns:
            Locations sorted by timestamp

        Raises:
            MalformedJSONError: If the content is not valid JSON
            InvalidFieldError: If a sample is missing a field or has the wrong shape
        """
        return cls.from_json(file_input.read(), config)

    def __len__(self) -> int:
        return len(self._locations)

    def __getitem__(self, index):
        return self._locations[index]

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Locations):
            return NotImplemented
        return self._locations == other._locations

    def __repr__(self) -> str:
        return f"Locations({len(self._locations)} samples)"

    @property
    def locations(self) -> Tuple[Location, ...]:
        """The samples, ordered by timestamp."""
        return self._locations

    @property
    def timestamps(self) -> List[datetime]:
        """UTC timestamps of the samples, in order."""
        return list(self._timestamps)

    def average_interval(self) -> int:
        """
        Average signed gap between consecutive samples, in whole seconds.

        Each gap is the earlier timestamp minus the later one, so the result
        is zero or negative for an ordered series. The sum of gaps is divided
        by the number of samples, not the number of gaps, and the division
        truncates toward zero.

        Returns:
            Average interval in seconds

        Raises:
            InsufficientDataError: If there are fewer than two samples
        """
        if len(self._locations) < 2:
            raise InsufficientDataError(
                f"Average interval needs at least two samples, got {len(self._locations)}"
            )

        total = 0
        for i in range(1, len(self._locations)):
            total += (
                self._locations[i - 1].epoch_seconds - self._locations[i].epoch_seconds
            )
        return divide_toward_zero(total, len(self._locations))

    def find_closest(self, target_time: datetime) -> Optional[Location]:
        """
        Find the sample at or just after ``target_time``.

        An exact match returns that sample (the first one, if several share the
        timestamp). Otherwise the sample following ``target_time`` is returned
        only when ``target_time`` lies strictly between two samples; times
        before the first sample or after the last one give None.

        Args:
            target_time: Time to look up. Naive datetimes are taken as UTC.

        Returns:
            Matching Location, or None if there is no match
        """
        target = to_utc(target_time)
        index = bisect.bisect_left(self._timestamps, target)

        if index < len(self._timestamps) and self._timestamps[index] == target:
            return self._locations[index]

        # No extrapolation past either end of the series
        if 0 < index < len(self._locations):
            return self._locations[index]
        return None

    def filter_outliers(self, max_speed_kmh: Optional[float] = None) -> "Locations":
        """
        Drop samples implying an implausible speed.

        The first sample is always kept. Each later sample is compared against
        the last sample kept so far, not the previous raw sample, and is kept
        only if the implied speed is strictly below the threshold. A rejected
        sample never becomes the reference for the ones after it.

        Args:
            max_speed_kmh: Speed threshold in km/h. Defaults to
                ``self.config.max_speed_kmh``.

        Returns:
            New Locations holding the retained samples in their original order

        Raises:
            EmptyLocationsError: If there are no samples
        """
        if not self._locations:
            raise EmptyLocationsError("Cannot filter outliers of an empty location history")

        if max_speed_kmh is None:
            max_speed_kmh = self.config.max_speed_kmh

        retained = [self._locations[0]]
        for location in self._locations[1:]:
            if location.speed_kmh(retained[-1]) < max_speed_kmh:
                retained.append(location)

        dropped = len(self._locations) - len(retained)
        logger.debug(
            f"Dropped {dropped} of {len(self._locations)} samples at or above {max_speed_kmh} km/h"
        )
        return Locations(retained, self.config)
