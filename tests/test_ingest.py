#!/usr/bin/env python3
"""
Tests for loading location history exports.
"""

import io
import json
import pytest
from datetime import datetime, timezone
from location_history.errors import (
    IngestionError,
    InvalidFieldError,
    MalformedJSONError,
)
from location_history.ingest import parse_locations
from location_history.locations import Locations

EXPORT_SAMPLE = """{"locations" : [ {
    "timestampMs" : "1491801919709",
    "latitudeE7" : 500373489,
    "longitudeE7" : 83320934,
    "accuracy" : 19,
    "activitys" : [ {
        "timestampMs" : "1491802042056",
        "activities" : [ {
            "type" : "still",
            "confidence" : 100
        } ]
        }, {
        "timestampMs" : "1491801923049",
        "activities" : [ {
        "type" : "still",
        "confidence" : 100
        } ]
    } ]
    }]}"""


def sample(timestamp_ms="1000", lat=0, lon=0, accuracy=10, **extra):
    entry = {
        "timestampMs": timestamp_ms,
        "latitudeE7": lat,
        "longitudeE7": lon,
        "accuracy": accuracy,
    }
    entry.update(extra)
    return entry


def export(*entries):
    return json.dumps({"locations": list(entries)})


class TestParseLocations:
    def test_export_sample(self):
        locations = parse_locations(EXPORT_SAMPLE)

        assert len(locations) == 1
        loc = locations[0]
        assert loc.latitude == 50.0373489
        assert loc.longitude == pytest.approx(8.3320934)
        assert loc.accuracy == 19
        assert loc.altitude is None
        assert loc.epoch_seconds == 1491801919
        assert loc.timestamp == datetime(2017, 4, 10, 5, 25, 19, tzinfo=timezone.utc)

    def test_milliseconds_are_truncated(self):
        (loc,) = parse_locations(export(sample(timestamp_ms="1999")))
        assert loc.epoch_seconds == 1

    def test_negative_milliseconds_truncate_toward_zero(self):
        (loc,) = parse_locations(export(sample(timestamp_ms="-1500")))
        assert loc.epoch_seconds == -1

    def test_altitude(self):
        locations = parse_locations(
            export(
                sample(altitude=112),
                sample(),
                sample(altitude=None),
            )
        )
        assert [loc.altitude for loc in locations] == [112, None, None]

    def test_negative_and_float_coordinates(self):
        (loc,) = parse_locations(export(sample(lat=-337000000, lon=1512000000.0)))
        assert loc.latitude == pytest.approx(-33.7)
        assert loc.longitude == pytest.approx(151.2)

    def test_out_of_range_coordinates_are_not_validated(self):
        (loc,) = parse_locations(export(sample(lat=1_000_000_000)))
        assert loc.latitude == 100.0

    def test_keeps_source_order(self):
        locations = parse_locations(
            export(sample(timestamp_ms="3000"), sample(timestamp_ms="1000"))
        )
        assert [loc.epoch_seconds for loc in locations] == [3, 1]

    def test_empty_locations(self):
        assert parse_locations('{"locations": []}') == []

    def test_accepts_bytes(self):
        assert len(parse_locations(export(sample()).encode("utf-8"))) == 1


class TestMalformedInput:
    def test_invalid_json(self):
        with pytest.raises(MalformedJSONError) as excinfo:
            parse_locations('{"locations": [')
        assert isinstance(excinfo.value, IngestionError)
        assert isinstance(excinfo.value, ValueError)
        assert not isinstance(excinfo.value, InvalidFieldError)
        assert excinfo.value.line == 1

    def test_top_level_not_an_object(self):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations("[]")
        assert excinfo.value.field == "locations"
        assert excinfo.value.index is None

    def test_missing_locations_key(self):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations('{"other": []}')
        assert excinfo.value.field == "locations"

    def test_locations_not_an_array(self):
        with pytest.raises(InvalidFieldError):
            parse_locations('{"locations": {}}')

    def test_entry_not_an_object(self):
        with pytest.raises(InvalidFieldError):
            parse_locations(export(sample(), 42))

    @pytest.mark.parametrize(
        "field", ["timestampMs", "latitudeE7", "longitudeE7", "accuracy"]
    )
    def test_missing_required_field(self, field):
        entry = sample()
        del entry[field]
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(), entry))
        assert excinfo.value.field == field
        assert excinfo.value.index == 1
        assert f"locations[1].{field}" in str(excinfo.value)

    @pytest.mark.parametrize(
        "value", [1491801919709, "14918019x9709", "", " 1000", "1.5", None, True]
    )
    def test_bad_timestamp(self, value):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(timestamp_ms=value)))
        assert excinfo.value.field == "timestampMs"
        assert excinfo.value.index == 0

    def test_timestamp_out_of_range(self):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(timestamp_ms="9" * 30)))
        assert excinfo.value.field == "timestampMs"

    @pytest.mark.parametrize("value", ["500373489", None, True, [1]])
    def test_bad_coordinate(self, value):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(lon=value)))
        assert excinfo.value.field == "longitudeE7"

    @pytest.mark.parametrize("value", [19.5, "19", False])
    def test_bad_accuracy(self, value):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(accuracy=value)))
        assert excinfo.value.field == "accuracy"

    def test_bad_altitude(self):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(altitude="high")))
        assert excinfo.value.field == "altitude"

    def test_invalid_utf8_bytes(self):
        with pytest.raises(MalformedJSONError):
            parse_locations(b'{"locations": [\xff]}')

    def test_invalid_utf8_binary_stream(self):
        with pytest.raises(MalformedJSONError):
            Locations.from_stream(io.BytesIO(b'{"locations": [\xff]}'))

    def test_timestamp_with_too_many_digits(self):
        with pytest.raises(InvalidFieldError) as excinfo:
            parse_locations(export(sample(timestamp_ms="9" * 5000)))
        assert excinfo.value.field == "timestampMs"
        assert excinfo.value.index == 0

    def test_coordinate_too_large_for_float(self):
        with pytest.raises(IngestionError):
            parse_locations(export(sample(lat=10**400)))


class TestLocationsFromJson:
    def test_sorted_after_ingestion(self):
        locations = Locations.from_json(
            export(
                sample(timestamp_ms="30000"),
                sample(timestamp_ms="10000"),
                sample(timestamp_ms="20000"),
            )
        )
        assert [loc.epoch_seconds for loc in locations] == [10, 20, 30]

    def test_from_stream(self):
        locations = Locations.from_stream(io.StringIO(EXPORT_SAMPLE))
        assert len(locations) == 1
        assert locations[0].epoch_seconds == 1491801919

    def test_failure_returns_nothing(self):
        with pytest.raises(InvalidFieldError):
            Locations.from_json(export(sample(), sample(accuracy="bad")))

    def test_end_to_end(self):
        locations = Locations.from_json(
            export(
                sample(timestamp_ms="120000", lat=0, lon=100000),  # ~33 km/h from first
                sample(timestamp_ms="0"),
                sample(timestamp_ms="60000", lat=0, lon=10000000),  # ~111 km in a minute
                sample(timestamp_ms="180000", lat=0, lon=200000),
            )
        )

        filtered = locations.filter_outliers()

        assert [loc.epoch_seconds for loc in filtered] == [0, 120, 180]
        assert filtered.average_interval() == -60
        assert filtered.find_closest(datetime(1970, 1, 1, 0, 1, 0)).epoch_seconds == 120
