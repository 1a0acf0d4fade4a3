"""Camera ownership for the vessel map.

:class:`ViewportController` is the only component that talks to the map
engine's camera.  It enforces two rules:

* The automatic "fit all vessels" move runs at most once per session and
  never after the user has panned or zoomed the map themselves.
* Requests made before the engine reports readiness are queued and
  replayed in arrival order once it does.

Centering on a selected vessel is a consequence of a user action and is
therefore allowed at any time.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pyvesseldash._constants import VESSEL_ICON_ID, VESSEL_SOURCE_ID
from pyvesseldash.config import DashboardConfig
from pyvesseldash.layers import ship_icon_svg, vessel_feature_collection
from pyvesseldash.models.vessel import Vessel

_logger = logging.getLogger(__name__)

LonLat = tuple[float, float]


class MapSurface(Protocol):
    """Capabilities the controller needs from a map engine.

    Coordinates are ``(lon, lat)``.  Lines (tracks, routes) go through
    :meth:`set_geojson_source` as ``LineString`` features.
    """

    def fit_bounds(self, bounds: tuple[LonLat, LonLat], *, padding: int, duration_ms: int) -> None:
        ...

    def ease_to(self, center: LonLat, *, zoom: float, duration_ms: int) -> None:
        ...

    def has_icon(self, icon_id: str) -> bool:
        ...

    def add_icon(self, icon_id: str, svg: str, *, sdf: bool = True) -> None:
        ...

    def set_geojson_source(self, source_id: str, data: dict[str, Any]) -> None:
        ...


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned lat/lon rectangle, before any padding."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def around(cls, vessels: Iterable[Vessel]) -> BoundingBox | None:
        """Box over every mappable vessel; ``None`` when there is none."""
        lons: list[float] = []
        lats: list[float] = []
        for vessel in vessels:
            position = vessel.mappable_position
            if position is None:
                continue
            # mappable_position guarantees both coordinates are set.
            lons.append(position.lon)  # type: ignore[arg-type]
            lats.append(position.lat)  # type: ignore[arg-type]
        if not lons:
            return None
        return cls(min_lon=min(lons), min_lat=min(lats), max_lon=max(lons), max_lat=max(lats))

    def as_lonlat_pairs(self) -> tuple[LonLat, LonLat]:
        """``((min_lon, min_lat), (max_lon, max_lat))``, the engine's bounds format."""
        return ((self.min_lon, self.min_lat), (self.max_lon, self.max_lat))

    @property
    def center(self) -> LonLat:
        return ((self.min_lon + self.max_lon) / 2, (self.min_lat + self.max_lat) / 2)


@dataclass(frozen=True, slots=True)
class ViewportState:
    center: LonLat
    zoom: float
    user_has_interacted: bool
    bounds_fitted: bool
    ready: bool


@dataclass(slots=True)
class _PendingOp:
    kind: str
    run: Callable[[MapSurface], None]


class ViewportController:
    """Owns the map camera for one dashboard session."""

    def __init__(self, config: DashboardConfig | None = None) -> None:
        self._config = config or DashboardConfig()
        self._surface: MapSurface | None = None
        self._ready = False
        # Readiness reported before any surface was attached.
        self._ready_before_attach = False
        self._pending: deque[_PendingOp] = deque()
        self._center: LonLat = self._config.initial_center
        self._zoom: float = self._config.initial_zoom
        self._user_has_interacted = False
        self._bounds_fitted = False

    # ------------------------------------------------------------------
    # Surface lifecycle
    # ------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self._surface is not None and self._ready

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def state(self) -> ViewportState:
        return ViewportState(
            center=self._center,
            zoom=self._zoom,
            user_has_interacted=self._user_has_interacted,
            bounds_fitted=self._bounds_fitted,
            ready=self.ready,
        )

    @property
    def user_has_interacted(self) -> bool:
        return self._user_has_interacted

    @property
    def bounds_fitted(self) -> bool:
        return self._bounds_fitted

    def attach(self, surface: MapSurface, *, ready: bool = False) -> None:
        """Take ownership of *surface*.

        Pass ``ready=True`` if its style is already loaded.  A readiness
        signal received while nothing was attached counts as well.
        """
        self._surface = surface
        self._ready = False
        if ready or self._ready_before_attach:
            self._ready_before_attach = False
            self.mark_ready()

    def mark_ready(self) -> None:
        """Engine readiness signal: register icons, then replay queued requests."""
        surface = self._surface
        if surface is None:
            _logger.debug("Readiness signalled before attach; replaying on attach")
            self._ready_before_attach = True
            return
        if self._ready:
            return
        self._ready = True
        if not surface.has_icon(VESSEL_ICON_ID):
            surface.add_icon(VESSEL_ICON_ID, ship_icon_svg(), sdf=True)
        if self._pending:
            _logger.debug("Replaying %d deferred map operations", len(self._pending))
        while self._pending and self.ready:
            op = self._pending.popleft()
            op.run(surface)

    def detach(self) -> None:
        """Release the surface and drop queued requests (dashboard teardown)."""
        self._surface = None
        self._ready = False
        self._ready_before_attach = False
        self._pending.clear()

    def _dispatch(self, kind: str, run: Callable[[MapSurface], None], *, replace: bool = False) -> None:
        surface = self._surface
        if surface is not None and self._ready:
            run(surface)
            return
        _logger.debug("Map not ready; deferring %s", kind)
        if replace:
            # Only the latest queued op of this kind matters.
            self._pending = deque(op for op in self._pending if op.kind != kind)
        self._pending.append(_PendingOp(kind=kind, run=run))

    # ------------------------------------------------------------------
    # Camera operations
    # ------------------------------------------------------------------

    def fit_all(self, vessels: Sequence[Vessel]) -> bool:
        """Automatic initial fit over every mappable vessel.

        Returns True when a fit was issued or queued.  Runs at most once
        per session and never once the user has interacted; the check and
        the claim happen in the same call so no gesture can slip between.
        """
        if self._user_has_interacted or self._bounds_fitted:
            return False
        bbox = BoundingBox.around(vessels)
        if bbox is None:
            return False
        self._bounds_fitted = True

        def _run(surface: MapSurface) -> None:
            # The user may have grabbed the map while this was queued.
            if self._user_has_interacted:
                _logger.debug("Dropping deferred fit; user already moved the map")
                return
            surface.fit_bounds(
                bbox.as_lonlat_pairs(),
                padding=self._config.fit_padding,
                duration_ms=self._config.fit_duration_ms,
            )
            self._center = bbox.center

        self._dispatch("fit_all", _run)
        return True

    def center_on(self, vessel: Vessel | None) -> bool:
        """Ease the camera to *vessel* at close zoom; no-op without a mappable position."""
        if vessel is None:
            return False
        position = vessel.mappable_position
        if position is None:
            return False
        target: LonLat = (position.lon, position.lat)  # type: ignore[assignment]
        zoom = self._config.center_zoom

        def _run(surface: MapSurface) -> None:
            surface.ease_to(target, zoom=zoom, duration_ms=self._config.center_duration_ms)
            self._center = target
            self._zoom = zoom

        self._dispatch("center_on", _run)
        return True

    def render(self, vessels: Sequence[Vessel], selected_id: str | None = None) -> None:
        """Push the vessel layer; vessels without a mappable position are left out."""
        data = vessel_feature_collection(vessels, selected_id)
        self._dispatch(
            "render",
            lambda surface: surface.set_geojson_source(VESSEL_SOURCE_ID, data),
            replace=True,
        )

    # ------------------------------------------------------------------
    # Engine events
    # ------------------------------------------------------------------

    def on_user_gesture(self, kind: str = "drag") -> None:
        """Manual pan/zoom start.  Sets the interaction latch for good."""
        if not self._user_has_interacted:
            _logger.debug("User took camera control (%s); automatic fit disabled", kind)
        self._user_has_interacted = True

    def on_camera_moved(self, center: LonLat, zoom: float) -> None:
        """Settled camera reported by the engine."""
        self._center = center
        self._zoom = zoom
