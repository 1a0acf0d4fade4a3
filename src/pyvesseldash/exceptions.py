"""Custom exception hierarchy for pyvesseldash."""

from __future__ import annotations


class VesselDashError(Exception):
    """Base exception for all pyvesseldash errors."""


class VesselDashConfigError(VesselDashError):
    """Invalid or missing configuration."""


class VesselFetchError(VesselDashError):
    """Polling the active-vessels endpoint did not produce a vessel list.

    Never fatal: the data source keeps its last good list and surfaces
    this error next to it.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class VesselDashTransportError(VesselFetchError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        super().__init__(message, endpoint=endpoint)


class VesselDashPayloadError(VesselFetchError):
    """The backend answered, but not with a list of vessel records."""
