"""Polling data source for stored vessel positions.

The source owns the latest successful vessel list.  A failed poll never
clears it: the previous list stays installed and the failure is exposed
next to it until a later poll succeeds.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

import aiohttp

from pyvesseldash._transport import HttpTransport, Transport
from pyvesseldash.config import DashboardConfig
from pyvesseldash.exceptions import VesselDashError, VesselFetchError
from pyvesseldash.ingestion.vessels import fetch_active_vessels
from pyvesseldash.models.vessel import Vessel

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[["VesselSnapshot"], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class VesselSnapshot:
    """One installed state of the data source.

    ``vessels`` is replaced wholesale by every successful poll.
    ``fetched_at`` is the time of the last success, ``error`` the failure
    of the most recent poll (``None`` once a poll succeeds again).
    """

    vessels: tuple[Vessel, ...] = ()
    fetched_at: datetime | None = None
    error: VesselFetchError | None = None
    generation: int = 0

    @property
    def has_data(self) -> bool:
        return self.fetched_at is not None

    def age_seconds(self, now: datetime) -> float | None:
        if self.fetched_at is None:
            return None
        return (now - self.fetched_at).total_seconds()

    def is_stale(self, now: datetime, threshold: float) -> bool:
        """Whether the installed list is older than *threshold* seconds.

        A source that never succeeded has nothing to be stale about.
        """
        age = self.age_seconds(now)
        return age is not None and age > threshold


class PollHandle:
    """Cancellable handle for a running poll loop.

    Cancelling guarantees that no further snapshot is installed by this
    loop, including a response that is already in flight.
    """

    def __init__(self, source: PositionDataSource, task: asyncio.Task[None]) -> None:
        self._source = source
        self._task = task
        self._cancelled = False

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._source._invalidate_in_flight()  # noqa: SLF001
        self._task.cancel()

    async def stop(self) -> None:
        """Cancel the loop and wait until the task has finished."""
        self.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task


class PositionDataSource:
    """Polls the active-vessels endpoint and keeps the latest snapshot.

    Usage::

        async with PositionDataSource(config) as source:
            handle = source.poll()
            ...
            await handle.stop()
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        transport: Transport | None = None,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._transport = transport
        self._external_session = session is not None
        self._http_session = session
        self._clock = clock
        self._snapshot = VesselSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._poll_handle: PollHandle | None = None
        # Bumped on cancellation/close; results fetched under an older
        # epoch are discarded.
        self._epoch = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PositionDataSource:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        self._closed = False
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop polling and drop any in-flight result."""
        self._closed = True
        self._invalidate_in_flight()
        handle = self._poll_handle
        self._poll_handle = None
        if handle is not None:
            await handle.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> VesselSnapshot:
        return self._snapshot

    @property
    def vessels(self) -> tuple[Vessel, ...]:
        return self._snapshot.vessels

    @property
    def error(self) -> VesselFetchError | None:
        return self._snapshot.error

    @property
    def is_polling(self) -> bool:
        handle = self._poll_handle
        return handle is not None and not handle.done and not handle.cancelled

    def is_stale(self, now: datetime | None = None) -> bool:
        return self._snapshot.is_stale(now or self._clock(), self._config.stale_after)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register *listener* for installed snapshots; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise VesselDashError(
                "Data source not initialized. Use 'async with PositionDataSource(...) as source:'"
            )
        return self._transport

    async def fetch(self) -> list[Vessel]:
        """Fetch the vessel list once, without touching the installed snapshot.

        Raises
        ------
        VesselFetchError
            On network, HTTP or payload failure.
        """
        transport = self._require_transport()
        return await fetch_active_vessels(transport, self._config.active_vessels_endpoint)

    def _is_fresh(self, now: datetime) -> bool:
        snap = self._snapshot
        if snap.error is not None:
            return False
        age = snap.age_seconds(now)
        return age is not None and age < self._config.fresh_ttl

    async def refresh(self, *, force: bool = False) -> VesselSnapshot:
        """Fetch and install a new snapshot.

        A non-forced refresh returns the installed snapshot untouched while
        the last success is younger than ``fresh_ttl``.  On failure the
        previous vessels are kept and the error is recorded.
        """
        if not force and self._is_fresh(self._clock()):
            _logger.debug("Skipping fetch; snapshot still fresh")
            return self._snapshot

        epoch = self._epoch
        try:
            vessels = await self.fetch()
        except VesselFetchError as exc:
            if self._discarded(epoch):
                return self._snapshot
            if self._snapshot.error is None:
                _logger.warning("Fetching active vessels failed: %s", exc)
            else:
                _logger.debug("Fetching active vessels still failing: %s", exc)
            self._install(replace(self._snapshot, error=exc))
            return self._snapshot

        if self._discarded(epoch):
            _logger.debug("Discarding vessel list that arrived after cancellation")
            return self._snapshot
        _logger.debug("Fetched %d vessels", len(vessels))
        self._install(
            VesselSnapshot(
                vessels=tuple(vessels),
                fetched_at=self._clock(),
                error=None,
                generation=self._snapshot.generation + 1,
            )
        )
        return self._snapshot

    def _discarded(self, epoch: int) -> bool:
        return self._closed or epoch != self._epoch

    def _invalidate_in_flight(self) -> None:
        self._epoch += 1

    def _install(self, snapshot: VesselSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll(self, interval: float | None = None) -> PollHandle:
        """Start polling every *interval* seconds (default ``config.poll_interval``).

        The first fetch happens immediately.  Returns the running handle if
        a poll loop is already active.
        """
        if self.is_polling:
            return self._poll_handle  # type: ignore[return-value]
        self._require_transport()
        period = self._config.poll_interval if interval is None else interval
        if period <= 0:
            raise ValueError(f"interval must be positive, got {period}")
        task = asyncio.get_running_loop().create_task(self._poll_loop(period))
        self._poll_handle = PollHandle(self, task)
        return self._poll_handle

    async def _poll_loop(self, interval: float) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                _logger.exception("Polling active vessels failed unexpectedly")
            await asyncio.sleep(interval)
