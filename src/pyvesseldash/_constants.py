"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000/api"
ACTIVE_VESSELS_ENDPOINT = "/dashboard/active-vessels"
USER_AGENT = "pyvesseldash/1"

# ------------------------------------------------------------------
# Polling cadence (seconds)
# ------------------------------------------------------------------

POLL_INTERVAL_S = 60.0
FRESH_TTL_S = 30.0
STALE_AFTER_S = 90.0

# ------------------------------------------------------------------
# Camera defaults
# ------------------------------------------------------------------

FIT_PADDING_PX = 50
FIT_DURATION_MS = 1000
CENTER_ZOOM = 12.0
CENTER_DURATION_MS = 1000
# (lon, lat) of Sao Paulo.
INITIAL_CENTER: tuple[float, float] = (-46.6333, -23.5505)
INITIAL_ZOOM = 3.0

# ------------------------------------------------------------------
# Map layer identifiers
# ------------------------------------------------------------------

VESSEL_ICON_ID = "vessel-icon-sdf"
VESSEL_SOURCE_ID = "vessels"

STATUS_COLORS: dict[str, str] = {
    "AT_SEA": "#3b82f6",
    "IN_PORT": "#10b981",
    "INBOUND": "#f59e0b",
    "ANCHORED": "#8b5cf6",
}
FALLBACK_STATUS_COLOR = "#64748b"
