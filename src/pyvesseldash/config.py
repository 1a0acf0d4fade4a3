"""Dashboard configuration for pyvesseldash."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyvesseldash import _constants as C
from pyvesseldash.exceptions import VesselDashConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise VesselDashConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Dashboard configuration.

    Parameters
    ----------
    base_url : str
        REST API base URL (without trailing slash).
    active_vessels_endpoint : str
        Path of the stored-positions endpoint, appended to ``base_url``.
    auth_token : str or None
        Bearer token sent as ``Authorization`` header when set.
    tenant_id : str or None
        Tenant identifier sent as ``X-Tenant-Id`` header when set.
    poll_interval : float
        Seconds between two polls of the active-vessels endpoint.
    fresh_ttl : float
        Seconds a successful result is considered fresh.  A non-forced
        refresh inside this window reuses the cached list instead of
        hitting the network.  Does not affect correctness.
    stale_after : float
        Seconds after which the last good list is flagged as stale.
        Stale data is still displayed.
    fit_padding : int
        Padding in pixels around the bounding box of an automatic fit.
    fit_duration_ms : int
        Transition duration of the automatic fit.
    center_zoom : float
        Zoom level used when centering on a selected vessel.
    center_duration_ms : int
        Transition duration of a center-on-vessel move.
    initial_center : tuple[float, float]
        ``(lon, lat)`` camera center before any fit.
    initial_zoom : float
        Camera zoom before any fit.
    api_trace_enabled : bool
        Log redacted response bodies at DEBUG level.
    """

    base_url: str = C.BASE_URL
    active_vessels_endpoint: str = C.ACTIVE_VESSELS_ENDPOINT
    auth_token: str | None = None
    tenant_id: str | None = None
    poll_interval: float = C.POLL_INTERVAL_S
    fresh_ttl: float = C.FRESH_TTL_S
    stale_after: float = C.STALE_AFTER_S
    fit_padding: int = C.FIT_PADDING_PX
    fit_duration_ms: int = C.FIT_DURATION_MS
    center_zoom: float = C.CENTER_ZOOM
    center_duration_ms: int = C.CENTER_DURATION_MS
    initial_center: tuple[float, float] = C.INITIAL_CENTER
    initial_zoom: float = C.INITIAL_ZOOM
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise VesselDashConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.fresh_ttl < 0:
            raise VesselDashConfigError(f"fresh_ttl must not be negative, got {self.fresh_ttl}")
        if self.stale_after < 0:
            raise VesselDashConfigError(f"stale_after must not be negative, got {self.stale_after}")
        if self.fit_padding < 0:
            raise VesselDashConfigError(f"fit_padding must not be negative, got {self.fit_padding}")
        # Normalise so endpoint concatenation never produces a double slash.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def active_vessels_url(self) -> str:
        return f"{self.base_url}{self.active_vessels_endpoint}"

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from environment variables.

        Reads optional ``VESSELDASH_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        DashboardConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VESSELDASH_BASE_URL": "base_url",
            "VESSELDASH_ENDPOINT": "active_vessels_endpoint",
            "VESSELDASH_AUTH_TOKEN": "auth_token",
            "VESSELDASH_TENANT_ID": "tenant_id",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "VESSELDASH_POLL_INTERVAL": "poll_interval",
            "VESSELDASH_FRESH_TTL": "fresh_ttl",
            "VESSELDASH_STALE_AFTER": "stale_after",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("VESSELDASH_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
