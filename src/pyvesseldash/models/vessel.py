"""Vessel and position models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from pyvesseldash.ingestion.normalize import is_valid_coordinate, parse_fix_timestamp, safe_float, safe_str

FixTimestamp = Annotated[datetime | None, BeforeValidator(parse_fix_timestamp)]
"""Annotated type that coerces ISO strings and epoch numbers to UTC datetimes."""


class VesselStatus(StrEnum):
    """Operational statuses the backend reports."""

    AT_SEA = "AT_SEA"
    IN_PORT = "IN_PORT"
    INBOUND = "INBOUND"
    ANCHORED = "ANCHORED"


class StatusBucket(StrEnum):
    """List groups, declared in display order.

    ``OTHER`` collects every status outside :class:`VesselStatus`,
    including a missing one.
    """

    AT_SEA = "AT_SEA"
    INBOUND = "INBOUND"
    IN_PORT = "IN_PORT"
    ANCHORED = "ANCHORED"
    OTHER = "OTHER"

    @classmethod
    def for_status(cls, status: str | None) -> StatusBucket:
        if status is None:
            return cls.OTHER
        try:
            VesselStatus(status)
        except ValueError:
            return cls.OTHER
        return cls(status)


class Position(BaseModel):
    """A stored fix for a vessel.

    Coordinates are kept as received (after numeric coercion).  Whether
    they can be drawn is answered by :attr:`is_mappable`; out-of-range or
    non-finite values are never an error.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    lat: float | None = Field(default=None, validation_alias=AliasChoices("lat", "latitude", "Lat", "Latitude"))
    lon: float | None = Field(
        default=None,
        validation_alias=AliasChoices("lon", "longitude", "lng", "Lon", "Longitude"),
    )
    cog: float | None = Field(default=None, validation_alias=AliasChoices("cog", "course"))
    heading: float | None = Field(default=None, validation_alias=AliasChoices("heading"))
    sog: float | None = Field(default=None, validation_alias=AliasChoices("sog", "speed"))
    nav_status: str | None = Field(default=None, validation_alias=AliasChoices("navStatus", "nav_status"))
    timestamp: FixTimestamp = Field(default=None, validation_alias=AliasChoices("timestamp", "time"))
    source: str = Field(default="stored", validation_alias=AliasChoices("source"))
    """Origin tag; the dashboard only ever reads stored (non-live) fixes."""

    @field_validator("lat", "lon", "cog", "heading", "sog", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("nav_status", mode="before")
    @classmethod
    def _coerce_nav_status(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("source", mode="before")
    @classmethod
    def _default_source(cls, value: Any) -> str:
        return safe_str(value) or "stored"

    @property
    def is_mappable(self) -> bool:
        return is_valid_coordinate(self.lat, self.lon)

    @property
    def rotation(self) -> float:
        """Marker rotation in degrees: course, else heading, else north."""
        return self.cog or self.heading or 0.0


class Vessel(BaseModel):
    """A vessel as returned by the active-vessels endpoint.

    ``id`` is the stable identity across polls.  ``status`` is kept
    verbatim, including values outside :class:`VesselStatus`; use
    :attr:`status_bucket` for grouping.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str = Field(validation_alias=AliasChoices("id", "vesselId", "vessel_id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "vesselName", "vessel_name"))
    mmsi: str | None = Field(default=None, validation_alias=AliasChoices("mmsi"))
    imo: str | None = Field(default=None, validation_alias=AliasChoices("imo"))
    type: str | None = Field(default=None, validation_alias=AliasChoices("type", "shipType", "ship_type", "vesselType"))
    status: str | None = Field(default=None, validation_alias=AliasChoices("status"))
    position: Position | None = Field(default=None, validation_alias=AliasChoices("position"))

    raw: dict[str, Any] = Field(default_factory=dict)
    """Full API record for access to additional fields."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        return merged

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        vessel_id = safe_str(value)
        if vessel_id is None:
            raise ValueError("id must be non-empty")
        return vessel_id

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("mmsi", "imo", "type", mode="before")
    @classmethod
    def _coerce_optional_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _keep_status_verbatim(cls, value: Any) -> str | None:
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator("position", mode="before")
    @classmethod
    def _drop_malformed_position(cls, value: Any) -> Any:
        if isinstance(value, (dict, Position)):
            return value
        return None

    @property
    def status_bucket(self) -> StatusBucket:
        return StatusBucket.for_status(self.status)

    @property
    def mappable_position(self) -> Position | None:
        """The position, if it can be drawn on the map."""
        if self.position is not None and self.position.is_mappable:
            return self.position
        return None

    @property
    def is_mappable(self) -> bool:
        return self.mappable_position is not None
