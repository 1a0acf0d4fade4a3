"""Ingestion layer.

Adapters that fetch stored vessel positions from the backend and emit
validated domain objects.
"""

__all__: list[str] = []
