"""pyvesseldash - Live vessel position dashboard core."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvesseldash")
except PackageNotFoundError:
    __version__ = "0+local"
from pyvesseldash.config import DashboardConfig
from pyvesseldash.dashboard import Dashboard
from pyvesseldash.exceptions import (
    VesselDashConfigError,
    VesselDashError,
    VesselDashPayloadError,
    VesselDashTransportError,
    VesselFetchError,
)
from pyvesseldash.filtering import VesselFilterIndex, filter_vessels, group_vessels, mappable_vessels
from pyvesseldash.models import Position, StatusBucket, Vessel, VesselStatus
from pyvesseldash.selection import SelectionChange, SelectionCoordinator
from pyvesseldash.source import PollHandle, PositionDataSource, VesselSnapshot
from pyvesseldash.viewport import BoundingBox, MapSurface, ViewportController, ViewportState
from pyvesseldash.views import VesselListItem, VesselListView

__all__ = [
    "__version__",
    "BoundingBox",
    "Dashboard",
    "DashboardConfig",
    "MapSurface",
    "PollHandle",
    "Position",
    "PositionDataSource",
    "SelectionChange",
    "SelectionCoordinator",
    "StatusBucket",
    "Vessel",
    "VesselDashConfigError",
    "VesselDashError",
    "VesselDashPayloadError",
    "VesselDashTransportError",
    "VesselFetchError",
    "VesselFilterIndex",
    "VesselListItem",
    "VesselListView",
    "VesselSnapshot",
    "VesselStatus",
    "ViewportController",
    "ViewportState",
    "filter_vessels",
    "group_vessels",
    "mappable_vessels",
]
