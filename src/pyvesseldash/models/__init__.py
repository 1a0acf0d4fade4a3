"""Data models for the active-vessels API."""

from pyvesseldash.models.vessel import FixTimestamp, Position, StatusBucket, Vessel, VesselStatus

__all__ = [
    "FixTimestamp",
    "Position",
    "StatusBucket",
    "Vessel",
    "VesselStatus",
]
