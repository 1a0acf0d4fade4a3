"""Active-vessel list ingestion + parsing."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyvesseldash._transport import Transport
from pyvesseldash.exceptions import VesselDashPayloadError
from pyvesseldash.models.vessel import Vessel

_logger = logging.getLogger(__name__)


def parse_vessel_list(decoded: Any, *, endpoint: str = "") -> list[Vessel]:
    """Validate a decoded response body into vessels, in response order.

    Accepts a bare list or an object wrapping it under ``vessels`` or
    ``data``.  Records that fail validation (e.g. without an ``id``) are
    skipped; a body that holds no list at all is a payload error.
    """
    items = decoded
    if isinstance(decoded, dict):
        for key in ("vessels", "data"):
            if isinstance(decoded.get(key), list):
                items = decoded[key]
                break
    if not isinstance(items, list):
        raise VesselDashPayloadError(
            f"Expected a list of vessels from {endpoint}, got {type(decoded).__name__}",
            endpoint=endpoint,
        )

    vessels: list[Vessel] = []
    for index, item in enumerate(items):
        try:
            vessels.append(Vessel.model_validate(item))
        except ValidationError:
            _logger.debug("Skipping invalid vessel record #%d from %s", index, endpoint, exc_info=True)
    return vessels


async def fetch_active_vessels(transport: Transport, endpoint: str) -> list[Vessel]:
    """Fetch and parse the stored active-vessel list."""
    decoded = await transport.get_json(endpoint)
    return parse_vessel_list(decoded, endpoint=endpoint)
