"""Tests for vessel/position parsing."""

from __future__ import annotations

import math
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pyvesseldash.exceptions import VesselDashPayloadError
from pyvesseldash.ingestion.vessels import parse_vessel_list
from pyvesseldash.models.vessel import Position, StatusBucket, Vessel, VesselStatus

# ------------------------------------------------------------------
# Position
# ------------------------------------------------------------------


class TestPosition:
    def test_numeric_strings_are_coerced(self) -> None:
        pos = Position.model_validate({"lat": "51.95", "lon": "4.14", "cog": "90.5"})
        assert pos.lat == 51.95
        assert pos.lon == 4.14
        assert pos.cog == 90.5
        assert pos.is_mappable

    def test_long_field_names_are_accepted(self) -> None:
        pos = Position.model_validate({"latitude": -23.9, "longitude": -46.3, "speed": 11.2})
        assert (pos.lat, pos.lon) == (-23.9, -46.3)
        assert pos.sog == 11.2

    def test_source_defaults_to_stored(self) -> None:
        assert Position.model_validate({"lat": 1, "lon": 2}).source == "stored"
        assert Position.model_validate({"lat": 1, "lon": 2, "source": ""}).source == "stored"

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [
            (91.0, 10.0),
            (-90.5, 10.0),
            (10.0, 180.5),
            (10.0, -181.0),
            (math.inf, 10.0),
            (10.0, -math.inf),
            ("NaN", 10.0),
            (None, 10.0),
            ("north", 10.0),
        ],
    )
    def test_invalid_coordinates_are_not_mappable(self, lat: object, lon: object) -> None:
        pos = Position.model_validate({"lat": lat, "lon": lon})
        assert not pos.is_mappable

    def test_range_bounds_are_inclusive(self) -> None:
        assert Position(lat=90.0, lon=180.0).is_mappable
        assert Position(lat=-90.0, lon=-180.0).is_mappable

    def test_iso_timestamp_with_z_suffix(self) -> None:
        pos = Position.model_validate({"lat": 1, "lon": 2, "timestamp": "2026-01-01T12:00:00Z"})
        assert pos.timestamp == datetime(2026, 1, 1, 12, tzinfo=UTC)

    def test_epoch_milliseconds_timestamp(self) -> None:
        pos = Position.model_validate({"lat": 1, "lon": 2, "timestamp": 1_770_928_447_000})
        assert pos.timestamp == datetime.fromtimestamp(1_770_928_447, tz=UTC)

    def test_unparseable_timestamp_is_none(self) -> None:
        assert Position.model_validate({"lat": 1, "lon": 2, "timestamp": "yesterday"}).timestamp is None

    @pytest.mark.parametrize("value", [1e17, 1e25, 10**400, "1e400"])
    def test_out_of_range_epoch_is_none(self, value: object) -> None:
        pos = Position.model_validate({"lat": 1, "lon": 2, "timestamp": value})
        assert pos.timestamp is None
        assert pos.is_mappable

    def test_integer_too_large_for_float_is_absent(self) -> None:
        pos = Position.model_validate({"lat": 10**400, "lon": 2})
        assert pos.lat is None
        assert not pos.is_mappable

    def test_rotation_prefers_course_over_heading(self) -> None:
        assert Position(lat=0, lon=0, cog=45.0, heading=90.0).rotation == 45.0
        assert Position(lat=0, lon=0, heading=90.0).rotation == 90.0
        assert Position(lat=0, lon=0).rotation == 0.0


# ------------------------------------------------------------------
# Vessel
# ------------------------------------------------------------------


class TestVessel:
    SAMPLE_PAYLOAD: dict = {
        "id": 42,
        "name": "Atlantic Star",
        "mmsi": 244123456,
        "imo": "IMO9321483",
        "type": "CONTAINER",
        "status": "AT_SEA",
        "portCallId": "pc-1",
        "position": {
            "lat": 51.95,
            "lon": 4.14,
            "cog": 270,
            "timestamp": "2026-01-01T11:58:00Z",
            "source": "stored",
        },
    }

    def test_basic_parsing(self) -> None:
        vessel = Vessel.model_validate(self.SAMPLE_PAYLOAD)
        assert vessel.id == "42"
        assert vessel.name == "Atlantic Star"
        assert vessel.mmsi == "244123456"
        assert vessel.imo == "IMO9321483"
        assert vessel.status == VesselStatus.AT_SEA
        assert vessel.status_bucket == StatusBucket.AT_SEA
        assert vessel.is_mappable

    def test_raw_keeps_unmapped_fields(self) -> None:
        vessel = Vessel.model_validate(self.SAMPLE_PAYLOAD)
        assert vessel.raw["portCallId"] == "pc-1"

    def test_unknown_status_is_kept_verbatim(self) -> None:
        vessel = Vessel.model_validate({"id": "v1", "status": "moored"})
        assert vessel.status == "moored"
        assert vessel.status_bucket == StatusBucket.OTHER

    def test_missing_status_buckets_to_other(self) -> None:
        assert Vessel.model_validate({"id": "v1"}).status_bucket == StatusBucket.OTHER

    def test_status_bucket_is_case_sensitive(self) -> None:
        assert Vessel.model_validate({"id": "v1", "status": "at_sea"}).status_bucket == StatusBucket.OTHER

    def test_null_position(self) -> None:
        vessel = Vessel.model_validate({"id": "v1", "position": None})
        assert vessel.position is None
        assert vessel.mappable_position is None

    def test_out_of_range_position_is_kept_but_not_mappable(self) -> None:
        vessel = Vessel.model_validate({"id": "v1", "position": {"lat": 123.0, "lon": 4.0}})
        assert vessel.position is not None
        assert vessel.mappable_position is None

    def test_malformed_position_becomes_none(self) -> None:
        assert Vessel.model_validate({"id": "v1", "position": "51.9,4.1"}).position is None

    def test_id_is_required(self) -> None:
        with pytest.raises(ValidationError):
            Vessel.model_validate({"name": "No Id"})
        with pytest.raises(ValidationError):
            Vessel.model_validate({"id": "  "})


# ------------------------------------------------------------------
# Vessel list payloads
# ------------------------------------------------------------------


def test_parse_vessel_list_keeps_response_order() -> None:
    vessels = parse_vessel_list([{"id": "b"}, {"id": "a"}, {"id": "c"}])
    assert [v.id for v in vessels] == ["b", "a", "c"]


def test_parse_vessel_list_skips_invalid_records() -> None:
    vessels = parse_vessel_list([{"id": "a"}, {"name": "anonymous"}, "garbage", {"id": "b"}])
    assert [v.id for v in vessels] == ["a", "b"]


def test_parse_vessel_list_accepts_wrapped_list() -> None:
    assert [v.id for v in parse_vessel_list({"vessels": [{"id": "a"}]})] == ["a"]
    assert [v.id for v in parse_vessel_list({"data": [{"id": "b"}]})] == ["b"]


def test_parse_vessel_list_rejects_non_list_body() -> None:
    with pytest.raises(VesselDashPayloadError):
        parse_vessel_list({"error": "nope"}, endpoint="/dashboard/active-vessels")


def test_parse_vessel_list_keeps_vessels_with_unusable_numbers() -> None:
    vessels = parse_vessel_list(
        [
            {"id": "A", "position": {"lat": 10**400, "lon": 2}},
            {"id": "B", "position": {"lat": 1, "lon": 2, "timestamp": 1e17}},
            {"id": "C", "position": {"lat": 1, "lon": 2, "timestamp": 1e25}},
        ]
    )
    assert [v.id for v in vessels] == ["A", "B", "C"]
    assert not vessels[0].is_mappable
    assert vessels[1].position is not None and vessels[1].position.timestamp is None
    assert vessels[2].is_mappable
