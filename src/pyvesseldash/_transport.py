"""HTTP transport for the dashboard REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyvesseldash._constants import USER_AGENT
from pyvesseldash._redact import redact_for_log
from pyvesseldash.config import DashboardConfig
from pyvesseldash.exceptions import VesselDashTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the ingestion layer.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """JSON-over-HTTP transport with bearer-token and tenant headers."""

    def __init__(self, config: DashboardConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.auth_token:
            headers["authorization"] = f"Bearer {self._config.auth_token}"
        if self._config.tenant_id:
            headers["x-tenant-id"] = self._config.tenant_id
        return headers

    async def get_json(self, endpoint: str) -> Any:
        """GET ``base_url + endpoint`` and return the decoded JSON body."""
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=self._build_headers()) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise VesselDashTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except VesselDashTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise VesselDashTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise VesselDashTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response from %s: %s", endpoint, redact_for_log(body))
        return body
