from __future__ import annotations

import math

from pyvesseldash.filtering import VesselFilterIndex, filter_vessels, find_vessel, group_vessels, mappable_vessels
from pyvesseldash.models.vessel import Position, StatusBucket, Vessel


def _vessel(vessel_id: str, name: str = "", status: str | None = "AT_SEA", **extra: object) -> Vessel:
    return Vessel.model_validate({"id": vessel_id, "name": name, "status": status, **extra})


ALPHA = _vessel("A", "Alpha", "AT_SEA", position={"lat": 10, "lon": 20})
BETA = _vessel("B", "Beta", "IN_PORT", position=None)
FLEET = [
    ALPHA,
    BETA,
    _vessel("C", "Cormorant", "INBOUND", mmsi="244123456", type="TANKER"),
    _vessel("D", "Dolphin", "ANCHORED", imo="IMO9321483"),
    _vessel("E", "Egret", "moored"),
    _vessel("F", "Falcon", None),
    _vessel("G", "Gannet", "AT_SEA"),
]


def test_blank_term_returns_input_unchanged() -> None:
    for term in ("", "   ", None):
        result = filter_vessels(FLEET, term)
        assert result is FLEET
    assert [v.id for v in FLEET] == ["A", "B", "C", "D", "E", "F", "G"]


def test_name_match_is_case_insensitive() -> None:
    assert filter_vessels([ALPHA, BETA], "al") == [ALPHA]
    assert filter_vessels([ALPHA, BETA], "BET") == [BETA]


def test_matches_mmsi_imo_type_and_status() -> None:
    assert [v.id for v in filter_vessels(FLEET, "2441")] == ["C"]
    assert [v.id for v in filter_vessels(FLEET, "imo93")] == ["D"]
    assert [v.id for v in filter_vessels(FLEET, "tanker")] == ["C"]
    assert [v.id for v in filter_vessels(FLEET, "in_port")] == ["B"]
    assert [v.id for v in filter_vessels(FLEET, "moor")] == ["E"]


def test_filter_does_not_mutate_input() -> None:
    vessels = list(FLEET)
    filter_vessels(vessels, "a")
    assert vessels == FLEET


def test_group_is_exhaustive_disjoint_and_stable() -> None:
    groups = group_vessels(FLEET)
    assert list(groups) == list(StatusBucket)
    assert [v.id for v in groups[StatusBucket.AT_SEA]] == ["A", "G"]
    assert [v.id for v in groups[StatusBucket.INBOUND]] == ["C"]
    assert [v.id for v in groups[StatusBucket.IN_PORT]] == ["B"]
    assert [v.id for v in groups[StatusBucket.ANCHORED]] == ["D"]
    assert [v.id for v in groups[StatusBucket.OTHER]] == ["E", "F"]

    seen = [v.id for bucket in groups.values() for v in bucket]
    assert sorted(seen) == sorted(v.id for v in FLEET)
    assert len(seen) == len(set(seen))


def test_group_is_deterministic() -> None:
    assert group_vessels(FLEET) == group_vessels(FLEET)


def test_mappable_excludes_missing_and_invalid_positions() -> None:
    vessels = [
        ALPHA,
        BETA,
        _vessel("X", position={"lat": 95.0, "lon": 0.0}),
        _vessel("Y", position={"lat": 0.0, "lon": 200.0}),
        _vessel("Z", position={"lat": math.inf, "lon": 0.0}),
        _vessel("W", position={"lat": None, "lon": 3.0}),
        Vessel(id="V", position=Position(lat=-33.9, lon=151.2)),
    ]
    assert [v.id for v in mappable_vessels(vessels)] == ["A", "V"]


def test_find_vessel() -> None:
    assert find_vessel(FLEET, "C") is FLEET[2]
    assert find_vessel(FLEET, "missing") is None
    assert find_vessel(FLEET, None) is None


class TestVesselFilterIndex:
    def test_recomputes_only_when_inputs_change(self) -> None:
        index = VesselFilterIndex()
        vessels = tuple(FLEET)

        assert index.update(vessels=vessels) is True
        assert index.update(vessels=vessels) is False
        assert index.update(term="") is False

        assert index.update(term="al") is True
        assert [v.id for v in index.filtered] == ["A"]
        assert [v.id for v in index.groups[StatusBucket.AT_SEA]] == ["A"]

    def test_mappable_follows_vessels_not_term(self) -> None:
        index = VesselFilterIndex()
        index.update(vessels=tuple(FLEET), term="beta")
        assert [v.id for v in index.filtered] == ["B"]
        assert [v.id for v in index.mappable] == ["A"]

    def test_new_list_keeps_term(self) -> None:
        index = VesselFilterIndex()
        index.update(vessels=tuple(FLEET), term="gannet")
        refreshed = (ALPHA, _vessel("G", "Gannet", "ANCHORED"))
        index.update(vessels=refreshed)
        assert [v.id for v in index.groups[StatusBucket.ANCHORED]] == ["G"]
        assert index.term == "gannet"
