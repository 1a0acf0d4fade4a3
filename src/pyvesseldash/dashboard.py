"""Live vessel position dashboard.

Wires the polling data source, the filter index, the selection and the
viewport together:

* every installed snapshot feeds the list (filtered/grouped) and the map
  (mappable vessels only) from the same vessel tuple;
* clicks from either the list or the map go to the selection;
* a selection that resolves to a mappable vessel centers the camera;
* the first non-empty list triggers the automatic fit, unless the user
  already moved the map or the data source is failing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Literal

import aiohttp

from pyvesseldash._transport import Transport
from pyvesseldash.config import DashboardConfig
from pyvesseldash.exceptions import VesselFetchError
from pyvesseldash.filtering import VesselFilterIndex, find_vessel
from pyvesseldash.models.vessel import Vessel
from pyvesseldash.selection import SelectionChange, SelectionCoordinator
from pyvesseldash.source import PollHandle, PositionDataSource, VesselSnapshot
from pyvesseldash.viewport import LonLat, MapSurface, ViewportController
from pyvesseldash.views import VesselListView

_logger = logging.getLogger(__name__)

ClickOrigin = Literal["list", "map"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Dashboard:
    """One dashboard session.

    Usage::

        async with Dashboard(config) as dashboard:
            dashboard.attach_map(surface)
            ...  # engine calls dashboard.map_ready(), dashboard.user_gesture()
            view = dashboard.list_view()

    Closing the dashboard stops polling; a response that lands afterwards
    changes nothing.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        *,
        source: PositionDataSource | None = None,
        transport: Transport | None = None,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = _utcnow,
        on_vessel_open: Callable[[Vessel], None] | None = None,
    ) -> None:
        self._config = config or DashboardConfig()
        self._clock = clock
        self._owns_source = source is None
        self._source = source or PositionDataSource(self._config, transport=transport, session=session, clock=clock)
        self._index = VesselFilterIndex()
        self._selection = SelectionCoordinator()
        self._viewport = ViewportController(self._config)
        self._on_vessel_open = on_vessel_open
        self._snapshot = VesselSnapshot()
        self._poll_handle: PollHandle | None = None
        self._closed = False
        self._unsubscribers = [
            self._source.subscribe(self._on_snapshot),
            self._selection.subscribe(self._on_selection_change),
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Dashboard:
        if self._owns_source:
            await self._source.__aenter__()
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def start(self) -> PollHandle:
        """Start polling at ``config.poll_interval``.

        A poll loop that was already running on a caller-provided source is
        reused but left running on :meth:`close`.
        """
        already_polling = self._source.is_polling
        handle = self._source.poll()
        if not already_polling:
            self._poll_handle = handle
        return handle

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        handle = self._poll_handle
        self._poll_handle = None
        if handle is not None:
            await handle.stop()
        if self._owns_source:
            await self._source.close()
        self._viewport.detach()
        self._selection.clear()

    async def refresh(self) -> VesselSnapshot:
        """Force an out-of-cadence poll."""
        return await self._source.refresh(force=True)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def source(self) -> PositionDataSource:
        return self._source

    @property
    def selection(self) -> SelectionCoordinator:
        return self._selection

    @property
    def viewport(self) -> ViewportController:
        return self._viewport

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> VesselSnapshot:
        return self._snapshot

    @property
    def vessels(self) -> tuple[Vessel, ...]:
        return self._snapshot.vessels

    @property
    def map_vessels(self) -> list[Vessel]:
        return self._index.mappable

    @property
    def error(self) -> VesselFetchError | None:
        return self._snapshot.error

    @property
    def auto_viewport_suspended(self) -> bool:
        """Automatic camera moves are held back while polling fails."""
        return self._snapshot.error is not None

    @property
    def search_term(self) -> str:
        return self._index.term

    @property
    def selected_vessel(self) -> Vessel | None:
        return self._selection.resolve(self._snapshot.vessels)

    def list_view(self, now: datetime | None = None) -> VesselListView:
        current = now or self._clock()
        error = self._snapshot.error
        return VesselListView.build(
            total_count=len(self._snapshot.vessels),
            search_term=self._index.term,
            groups=self._index.groups,
            selected_id=self._selection.selected_id,
            now=current,
            error_message=str(error) if error is not None else None,
            is_stale=self._snapshot.is_stale(current, self._config.stale_after),
        )

    # ------------------------------------------------------------------
    # User input
    # ------------------------------------------------------------------

    def set_search_term(self, term: str) -> None:
        self._index.update(term=term)

    def click_vessel(self, vessel_id: str, origin: ClickOrigin = "list") -> None:
        """A vessel was clicked in the list or on the map."""
        _logger.debug("Vessel %s clicked on %s", vessel_id, origin)
        self._selection.select(vessel_id)
        if self._on_vessel_open is None:
            return
        vessel = find_vessel(self._snapshot.vessels, vessel_id)
        if vessel is not None:
            self._on_vessel_open(vessel)

    def clear_selection(self) -> None:
        self._selection.clear()

    # ------------------------------------------------------------------
    # Map engine events
    # ------------------------------------------------------------------

    def attach_map(self, surface: MapSurface, *, ready: bool = False) -> None:
        self._viewport.attach(surface, ready=ready)
        self._viewport.render(self._index.mappable, self._selection.selected_id)

    def map_ready(self) -> None:
        self._viewport.mark_ready()

    def user_gesture(self, kind: str = "drag") -> None:
        self._viewport.on_user_gesture(kind)

    def camera_moved(self, center: LonLat, zoom: float) -> None:
        self._viewport.on_camera_moved(center, zoom)

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    def _on_snapshot(self, snapshot: VesselSnapshot) -> None:
        if self._closed:
            return
        self._snapshot = snapshot
        if self._index.update(vessels=snapshot.vessels):
            self._viewport.render(self._index.mappable, self._selection.selected_id)
        if snapshot.error is not None:
            return
        if self._index.mappable:
            self._viewport.fit_all(self._index.mappable)

    def _on_selection_change(self, change: SelectionChange) -> None:
        if self._closed:
            return
        self._viewport.render(self._index.mappable, change.current)
        if change.current is None:
            return
        self._viewport.center_on(find_vessel(self._index.mappable, change.current))
