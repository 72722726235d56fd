#!/usr/bin/env python3
"""
Deserialization of location history exports.

The export is a JSON object whose ``locations`` array holds one object per
sample::

    {"locations": [{"timestampMs": "1491801919709",
                    "latitudeE7": 500373489,
                    "longitudeE7": 83320934,
                    "accuracy": 19,
                    "altitude": 112}]}

Parsing yields an unsorted staging list; ``Locations`` sorts it on
construction.
"""

from datetime import datetime
from typing import Annotated, List, Optional, Union
import logging
import math
import re

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    StringConstraints,
    ValidationError,
)

from .errors import InvalidFieldError, MalformedJSONError
from .location import Location, divide_toward_zero, epoch_seconds_to_datetime

logger = logging.getLogger(__name__)

# Fixed-point scale of the latitudeE7/longitudeE7 fields
E7_SCALE = 10_000_000.0

_JSON_POSITION = re.compile(r"line (\d+) column (\d+)")


def _millis_to_datetime(value: str) -> datetime:
    seconds = divide_toward_zero(int(value), 1000)
    try:
        return epoch_seconds_to_datetime(seconds)
    except (OverflowError, OSError) as e:
        raise ValueError(f"timestamp {value} is out of range") from e


def _from_e7(value: Union[int, float]) -> float:
    try:
        degrees = value / E7_SCALE
    except OverflowError as e:
        raise ValueError("coordinate is out of range") from e
    if not math.isfinite(degrees):
        raise ValueError("coordinate is not finite")
    return degrees


# "1491801919709" -> whole-second UTC datetime
EpochMillis = Annotated[
    StrictStr,
    StringConstraints(pattern=r"^[+-]?[0-9]+$"),
    AfterValidator(_millis_to_datetime),
]

# 500373489 -> 50.0373489
E7Coordinate = Annotated[Union[StrictInt, StrictFloat], AfterValidator(_from_e7)]


class LocationRecord(BaseModel):
    """One entry of the export's ``locations`` array."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    timestamp: EpochMillis = Field(alias="timestampMs")
    latitude: E7Coordinate = Field(alias="latitudeE7")
    longitude: E7Coordinate = Field(alias="longitudeE7")
    accuracy: StrictInt
    altitude: Optional[StrictInt] = None

    def to_location(self) -> Location:
        return Location(
            timestamp=self.timestamp,
            latitude=self.latitude,
            longitude=self.longitude,
            accuracy=self.accuracy,
            altitude=self.altitude,
        )


class LocationsDocument(BaseModel):
    """Top level of a location history export."""

    locations: List[LocationRecord]


def _to_ingestion_error(exc: ValidationError):
    """Translate the first pydantic error into MalformedJSONError or InvalidFieldError."""
    error = exc.errors()[0]
    if error["type"] == "json_invalid":
        detail = str(error.get("ctx", {}).get("error", error["msg"]))
        match = _JSON_POSITION.search(detail)
        if match:
            return MalformedJSONError(detail, int(match.group(1)), int(match.group(2)))
        return MalformedJSONError(detail)

    # loc is ("locations", <index>, <field alias>, ...) for per-sample errors
    loc = error["loc"]
    index = loc[1] if len(loc) > 1 and isinstance(loc[1], int) else None
    field = str(loc[2]) if len(loc) > 2 else "locations"
    return InvalidFieldError(field, error["msg"], index)


def parse_locations(text: Union[str, bytes]) -> List[Location]:
    """
    Parse a location history export into an unsorted list of samples.

    Fields other than the ones making up a Location (activity annotations,
    velocity, heading, ...) are ignored.

    Args:
        text: JSON text of the export

    Returns:
        Locations in source order

    Raises:
        MalformedJSONError: If the text is not valid UTF-8 JSON
        InvalidFieldError: If the document or any sample has the wrong shape
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedJSONError(f"Invalid UTF-8: {e.reason} at byte {e.start}") from e

    try:
        document = LocationsDocument.model_validate_json(text)
    except ValidationError as e:
        raise _to_ingestion_error(e) from e

    locations = [record.to_location() for record in document.locations]
    logger.debug(f"Parsed {len(locations)} samples from location history export")
    return locations
