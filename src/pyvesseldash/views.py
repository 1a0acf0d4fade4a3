"""Read models for the vessel list.

Rendering is external; these are the values a list renderer needs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from pyvesseldash.layers import status_color
from pyvesseldash.models.vessel import StatusBucket, Vessel

NO_POSITION_TEXT = "No position recorded"
NO_MATCH_TEXT = "No vessels match your search"
NO_VESSELS_TEXT = "No vessels found"

# OTHER is rendered without a header.
GROUP_HEADERS: dict[StatusBucket, str | None] = {
    StatusBucket.AT_SEA: "At Sea",
    StatusBucket.INBOUND: "Inbound",
    StatusBucket.IN_PORT: "In Port",
    StatusBucket.ANCHORED: "Anchored",
    StatusBucket.OTHER: None,
}


def format_time_ago(timestamp: datetime, now: datetime) -> str:
    diff_mins = int((now - timestamp).total_seconds() // 60)
    if diff_mins < 1:
        return "Just now"
    if diff_mins == 1:
        return "1 min ago"
    if diff_mins < 60:
        return f"{diff_mins} min ago"

    diff_hours = diff_mins // 60
    if diff_hours == 1:
        return "1 hour ago"
    if diff_hours < 24:
        return f"{diff_hours} hours ago"

    diff_days = diff_hours // 24
    if diff_days == 1:
        return "1 day ago"
    return f"{diff_days} days ago"


@dataclass(frozen=True, slots=True)
class VesselListItem:
    vessel: Vessel
    selected: bool
    status_color: str
    last_update: str

    @property
    def has_position(self) -> bool:
        return self.vessel.is_mappable

    @classmethod
    def build(cls, vessel: Vessel, *, selected: bool, now: datetime) -> VesselListItem:
        position = vessel.mappable_position
        if position is None:
            last_update = NO_POSITION_TEXT
        elif position.timestamp is None:
            last_update = "Last update: unknown"
        else:
            last_update = f"Last update: {format_time_ago(position.timestamp, now)}"
        return cls(
            vessel=vessel,
            selected=selected,
            status_color=status_color(vessel.status),
            last_update=last_update,
        )


@dataclass(frozen=True, slots=True)
class VesselGroup:
    bucket: StatusBucket
    header: str | None
    items: tuple[VesselListItem, ...]


@dataclass(frozen=True, slots=True)
class VesselListView:
    """Grouped, filtered list plus banner state."""

    total_count: int
    search_term: str
    groups: tuple[VesselGroup, ...]
    error_message: str | None = None
    is_stale: bool = False

    @property
    def filtered_count(self) -> int:
        return sum(len(group.items) for group in self.groups)

    @property
    def empty_message(self) -> str | None:
        if self.filtered_count:
            return None
        return NO_MATCH_TEXT if self.search_term.strip() else NO_VESSELS_TEXT

    @classmethod
    def build(
        cls,
        *,
        total_count: int,
        search_term: str,
        groups: Mapping[StatusBucket, Sequence[Vessel]],
        selected_id: str | None,
        now: datetime,
        error_message: str | None = None,
        is_stale: bool = False,
    ) -> VesselListView:
        built = tuple(
            VesselGroup(
                bucket=bucket,
                header=GROUP_HEADERS[bucket],
                items=tuple(
                    VesselListItem.build(vessel, selected=vessel.id == selected_id, now=now)
                    for vessel in groups.get(bucket, ())
                ),
            )
            for bucket in StatusBucket
            if groups.get(bucket)
        )
        return cls(
            total_count=total_count,
            search_term=search_term,
            groups=built,
            error_message=error_message,
            is_stale=is_stale,
        )
