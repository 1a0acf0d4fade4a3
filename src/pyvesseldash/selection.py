"""Single-vessel selection shared by the list and the map."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from pyvesseldash.filtering import find_vessel
from pyvesseldash.models.vessel import Vessel

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SelectionChange:
    previous: str | None
    current: str | None

    @property
    def reselected(self) -> bool:
        return self.current is not None and self.current == self.previous


SelectionListener = Callable[[SelectionChange], None]


class SelectionCoordinator:
    """Holds zero or one selected vessel id.

    The id is not validated against any vessel list: it may point at a
    vessel that is missing from the current poll and resolve again later.
    Listeners are notified synchronously, for every change and for an
    explicit re-selection of the current id.
    """

    def __init__(self) -> None:
        self._selected_id: str | None = None
        self._listeners: list[SelectionListener] = []

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def is_selected(self, vessel_id: str) -> bool:
        return self._selected_id is not None and self._selected_id == vessel_id

    def select(self, vessel_id: str | None) -> None:
        """Select *vessel_id*; ``None`` is the same as :meth:`clear`."""
        if vessel_id is None:
            self.clear()
            return
        previous = self._selected_id
        self._selected_id = vessel_id
        self._notify(SelectionChange(previous=previous, current=vessel_id))

    def clear(self) -> None:
        previous = self._selected_id
        if previous is None:
            return
        self._selected_id = None
        self._notify(SelectionChange(previous=previous, current=None))

    def resolve(self, vessels: Sequence[Vessel]) -> Vessel | None:
        """The selected vessel within *vessels*, if present."""
        return find_vessel(vessels, self._selected_id)

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, change: SelectionChange) -> None:
        _logger.debug("Selection %s -> %s", change.previous, change.current)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.debug("Selection listener failed", exc_info=True)
