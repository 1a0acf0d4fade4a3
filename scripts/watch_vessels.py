#!/usr/bin/env python3
"""Watch the active-vessel list from a terminal.

Polls the stored-positions endpoint and prints the grouped vessel list
after every poll, the same list the dashboard sidebar shows.

Usage
-----
Set environment variables and run::

    export VESSELDASH_BASE_URL="https://ops.example.com/api"
    export VESSELDASH_AUTH_TOKEN="..."
    python scripts/watch_vessels.py

Options::

    --once               Fetch a single time and exit
    --search TERM        Only show vessels matching TERM
    --json               Output as machine-readable JSON
    --interval SECONDS   Override the poll interval
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyvesseldash import Dashboard, DashboardConfig, VesselListView  # noqa: E402


def _view_to_dict(view: VesselListView) -> dict[str, Any]:
    return {
        "total": view.total_count,
        "search": view.search_term,
        "error": view.error_message,
        "stale": view.is_stale,
        "groups": {
            group.bucket.value: [
                {
                    "id": item.vessel.id,
                    "name": item.vessel.name,
                    "status": item.vessel.status,
                    "mmsi": item.vessel.mmsi,
                    "imo": item.vessel.imo,
                    "position": item.vessel.position.model_dump(mode="json") if item.has_position else None,
                    "last_update": item.last_update,
                }
                for item in group.items
            ]
            for group in view.groups
        },
    }


def _render_text(view: VesselListView) -> str:
    lines = [f"Active Vessels (Live) - {view.total_count} vessels"]
    if view.error_message:
        lines.append(f"  ! {view.error_message}")
    if view.is_stale:
        lines.append("  ! data is stale")
    if view.empty_message:
        lines.append(f"  {view.empty_message}")
    for group in view.groups:
        if group.header:
            lines.append(f"\n  {group.header}")
        for item in group.items:
            vessel = item.vessel
            ids = " ".join(
                label for label in (vessel.mmsi and f"MMSI {vessel.mmsi}", vessel.imo and f"IMO {vessel.imo}") if label
            )
            lines.append(f"    {vessel.name:<28} {vessel.status or '-':<9} {ids:<32} {item.last_update}")
    return "\n".join(lines)


def _print_view(view: VesselListView, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(_view_to_dict(view), ensure_ascii=False))
    else:
        print(_render_text(view), flush=True)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Print the active-vessel list as the dashboard polls it.")
    parser.add_argument("--once", action="store_true", help="Fetch a single time and exit")
    parser.add_argument("--search", default="", help="Only show vessels matching TERM")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    config = DashboardConfig.from_env(**overrides)

    dashboard = Dashboard(config)
    dashboard.set_search_term(args.search)

    if args.once:
        async with dashboard.source:
            await dashboard.refresh()
            _print_view(dashboard.list_view(), args.json_mode)
        await dashboard.close()
        return

    dashboard.source.subscribe(lambda _snapshot: _print_view(dashboard.list_view(), args.json_mode))
    async with dashboard:
        await asyncio.Event().wait()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
