"""Core domain types shared across the sync engine and adapters."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import StrEnum

# Records stay plain JSON objects; the API owns their schema.
type Record = Mapping[str, object]
type RecordFilter = Callable[[Record], bool]

ID_FIELD = "_id"
NAME_FIELD = "name"


class ResourceKind(StrEnum):
    """Resource collections exposed by the venue-mapping API."""

    VENUE = "venue"
    PLACE = "place"
    PLACE_LIST = "placeList"
    LAYER = "layer"
    CONNECTOR = "connector"
    BEACON = "beacon"
    UNIVERSE = "universe"
    ROUTE_GRAPH = "routeGraph"


SYNCABLE_KINDS: frozenset[ResourceKind] = frozenset(
    {
        ResourceKind.PLACE,
        ResourceKind.PLACE_LIST,
        ResourceKind.LAYER,
        ResourceKind.CONNECTOR,
        ResourceKind.BEACON,
        ResourceKind.UNIVERSE,
    }
)


def record_id(record: Record) -> str | None:
    value = record.get(ID_FIELD)
    return str(value) if value is not None else None


def record_name(record: Record) -> str | None:
    value = record.get(NAME_FIELD)
    return value if isinstance(value, str) else None
