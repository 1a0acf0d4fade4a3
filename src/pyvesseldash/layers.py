"""Map layer payloads: vessel GeoJSON, status colours and the ship icon."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pyvesseldash._constants import FALLBACK_STATUS_COLOR, STATUS_COLORS
from pyvesseldash.models.vessel import Vessel


def status_color(status: str | None) -> str:
    """Marker/badge colour for a status; unknown statuses are grey."""
    if status is None:
        return FALLBACK_STATUS_COLOR
    return STATUS_COLORS.get(status, FALLBACK_STATUS_COLOR)


def ship_icon_svg(size: int = 32) -> str:
    """Ship marker as an SVG triangle pointing north (heading 0).

    Drawn white so the engine can tint it per feature (SDF icon).
    """
    padding = 2
    extent = size + padding * 2
    cx = extent / 2
    cy = extent / 2
    path = (
        f"M {cx:g} {cy - size * 0.4:g} "
        f"L {cx + size * 0.3:g} {cy + size * 0.3:g} "
        f"L {cx - size * 0.3:g} {cy + size * 0.3:g} Z"
    )
    return (
        f'<svg width="{extent}" height="{extent}" viewBox="0 0 {extent} {extent}" '
        'xmlns="http://www.w3.org/2000/svg">'
        f'<path d="{path}" fill="#ffffff" stroke="#000000" stroke-width="1.5" opacity="0.95"/>'
        f'<circle cx="{cx:g}" cy="{cy - size * 0.1:g}" r="{size * 0.08:g}" fill="#000000"/>'
        "</svg>"
    )


def vessel_feature(vessel: Vessel, *, selected: bool = False) -> dict[str, Any] | None:
    """GeoJSON Point feature for *vessel*, or ``None`` when it has no mappable position."""
    position = vessel.mappable_position
    if position is None:
        return None
    return {
        "type": "Feature",
        "id": vessel.id,
        "geometry": {
            "type": "Point",
            "coordinates": [position.lon, position.lat],
        },
        "properties": {
            "id": vessel.id,
            "name": vessel.name,
            "type": vessel.type or "",
            "status": vessel.status,
            "color": status_color(vessel.status),
            "rotation": position.rotation,
            "cog": position.cog,
            "heading": position.heading,
            "sog": position.sog,
            "timestamp": position.timestamp.isoformat() if position.timestamp is not None else None,
            "mmsi": vessel.mmsi,
            "imo": vessel.imo,
            "selected": selected,
        },
    }


def vessel_feature_collection(vessels: Sequence[Vessel], selected_id: str | None = None) -> dict[str, Any]:
    features = []
    for vessel in vessels:
        feature = vessel_feature(vessel, selected=selected_id is not None and vessel.id == selected_id)
        if feature is not None:
            features.append(feature)
    return {"type": "FeatureCollection", "features": features}
