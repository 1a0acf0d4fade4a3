"""Pure derivations over a vessel list.

Nothing here mutates its input.  :class:`VesselFilterIndex` memoises the
derived views so they are recomputed only when the vessel list or the
search term actually changes.
"""

from __future__ import annotations

from collections.abc import Sequence

from pyvesseldash.models.vessel import StatusBucket, Vessel


def _matches(vessel: Vessel, term: str) -> bool:
    fields = (vessel.name, vessel.mmsi, vessel.imo, vessel.type, vessel.status)
    return any(value is not None and term in value.lower() for value in fields)


def filter_vessels(vessels: Sequence[Vessel], term: str | None) -> Sequence[Vessel]:
    """Case-insensitive substring search over name, MMSI, IMO, type and status.

    A blank term returns *vessels* itself.
    """
    if term is None or not term.strip():
        return vessels
    needle = term.lower()
    return [vessel for vessel in vessels if _matches(vessel, needle)]


def group_vessels(vessels: Sequence[Vessel]) -> dict[StatusBucket, list[Vessel]]:
    """Stable partition by status bucket.

    Every bucket is present (possibly empty), keys follow display order and
    each vessel keeps its relative input order.
    """
    groups: dict[StatusBucket, list[Vessel]] = {bucket: [] for bucket in StatusBucket}
    for vessel in vessels:
        groups[vessel.status_bucket].append(vessel)
    return groups


def mappable_vessels(vessels: Sequence[Vessel]) -> list[Vessel]:
    """Vessels whose position can be drawn; the only input the map layer accepts."""
    return [vessel for vessel in vessels if vessel.is_mappable]


def find_vessel(vessels: Sequence[Vessel], vessel_id: str | None) -> Vessel | None:
    if vessel_id is None:
        return None
    for vessel in vessels:
        if vessel.id == vessel_id:
            return vessel
    return None


class VesselFilterIndex:
    """Memoised ``filter``/``group``/``mappable`` views of one vessel list."""

    def __init__(self) -> None:
        self._vessels: Sequence[Vessel] = ()
        self._term = ""
        self._filtered: Sequence[Vessel] = ()
        self._groups: dict[StatusBucket, list[Vessel]] = group_vessels(())
        self._mappable: list[Vessel] = []

    def update(self, vessels: Sequence[Vessel] | None = None, term: str | None = None) -> bool:
        """Install new inputs; returns True when derived views were recomputed.

        ``None`` keeps the current value of that input.  Vessel lists are
        compared by identity since every poll installs a new list.
        """
        new_vessels = self._vessels if vessels is None else vessels
        new_term = self._term if term is None else term
        vessels_changed = new_vessels is not self._vessels
        term_changed = new_term != self._term
        if not (vessels_changed or term_changed):
            return False

        self._vessels = new_vessels
        self._term = new_term
        if vessels_changed:
            self._mappable = mappable_vessels(new_vessels)
        self._filtered = filter_vessels(new_vessels, new_term)
        self._groups = group_vessels(self._filtered)
        return True

    @property
    def vessels(self) -> Sequence[Vessel]:
        return self._vessels

    @property
    def term(self) -> str:
        return self._term

    @property
    def filtered(self) -> Sequence[Vessel]:
        return self._filtered

    @property
    def groups(self) -> dict[StatusBucket, list[Vessel]]:
        return self._groups

    @property
    def mappable(self) -> list[Vessel]:
        return self._mappable
