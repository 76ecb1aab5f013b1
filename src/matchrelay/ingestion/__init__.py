"""Ingestion layer.

Helpers that normalize provider values and reconcile fetched snapshots with
the persisted history.
"""

__all__: list[str] = []
