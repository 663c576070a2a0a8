"""Port for the remote object store the sync engine reconciles against."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mapwize_api.domain.types import Record, ResourceKind


@runtime_checkable
class RemoteObjectStore(Protocol):
    """CRUD access to one resource kind of one organization.

    Implementations raise ``TransportError`` when the server cannot be reached,
    ``RemoteError`` on a non-success status and ``NotFoundError`` when an
    identifier is stale.
    """

    @property
    def kind(self) -> ResourceKind: ...

    async def list_for_venue(self, venue_id: str) -> list[Record]: ...

    async def create(self, record: Record) -> Record: ...

    async def update(self, record: Record) -> Record: ...

    async def delete(self, object_id: str) -> None: ...


class StoreProvider(Protocol):
    """Resolves the store serving one resource kind."""

    def store(self, kind: ResourceKind) -> RemoteObjectStore: ...


__all__ = ["RemoteObjectStore", "StoreProvider"]
