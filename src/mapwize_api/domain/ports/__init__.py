"""Domain port definitions for adapters."""

from __future__ import annotations

from .remote_store import RemoteObjectStore, StoreProvider

__all__ = ["RemoteObjectStore", "StoreProvider"]
