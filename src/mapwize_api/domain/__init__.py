"""Venue object reconciliation domain."""

from __future__ import annotations

from .comparison import comparable_view, default_alias, equality_for, is_equal
from .errors import (
    MapwizeAPIError,
    NotFoundError,
    RemoteError,
    TransportError,
    UnexpectedPayloadError,
)
from .sync import (
    SyncOptions,
    SyncPlan,
    SyncResult,
    build_sync_plan,
    sync_venue_objects,
    sync_venue_resources,
)
from .types import SYNCABLE_KINDS, Record, RecordFilter, ResourceKind

__all__ = [
    "SYNCABLE_KINDS",
    "MapwizeAPIError",
    "NotFoundError",
    "Record",
    "RecordFilter",
    "RemoteError",
    "ResourceKind",
    "SyncOptions",
    "SyncPlan",
    "SyncResult",
    "TransportError",
    "UnexpectedPayloadError",
    "build_sync_plan",
    "comparable_view",
    "default_alias",
    "equality_for",
    "is_equal",
    "sync_venue_objects",
    "sync_venue_resources",
]
