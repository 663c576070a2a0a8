"""Per-kind remote object stores backed by the Mapwize REST API."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from mapwize_api.domain.types import SYNCABLE_KINDS, ResourceKind, record_id

from .schema import parse_record, parse_records

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mapwize_api.domain.types import Record

    from .client import MapwizeClient

log = getLogger(__name__)

API_PREFIX = "/api/v1"


@dataclass(frozen=True, slots=True)
class ResourceEndpoint:
    """Collection path and listing rules of one resource kind."""

    kind: ResourceKind
    collection: str
    include_unpublished: bool = True
    paginated: bool = False

    @property
    def collection_path(self) -> str:
        return f"{API_PREFIX}/{self.collection}"

    def object_path(self, object_id: str) -> str:
        return f"{self.collection_path}/{object_id}"


RESOURCE_ENDPOINTS: Mapping[ResourceKind, ResourceEndpoint] = {
    ResourceKind.VENUE: ResourceEndpoint(ResourceKind.VENUE, "venues"),
    ResourceKind.PLACE: ResourceEndpoint(ResourceKind.PLACE, "places", paginated=True),
    ResourceKind.PLACE_LIST: ResourceEndpoint(ResourceKind.PLACE_LIST, "placeLists"),
    ResourceKind.LAYER: ResourceEndpoint(ResourceKind.LAYER, "layers"),
    ResourceKind.CONNECTOR: ResourceEndpoint(
        ResourceKind.CONNECTOR, "connectors", include_unpublished=False
    ),
    ResourceKind.BEACON: ResourceEndpoint(ResourceKind.BEACON, "beacons"),
    ResourceKind.UNIVERSE: ResourceEndpoint(ResourceKind.UNIVERSE, "universes"),
    ResourceKind.ROUTE_GRAPH: ResourceEndpoint(
        ResourceKind.ROUTE_GRAPH, "routegraphs", include_unpublished=False
    ),
}


def endpoint_for(kind: ResourceKind) -> ResourceEndpoint:
    return RESOURCE_ENDPOINTS[kind]


def require_id(record: Record) -> str:
    object_id = record_id(record)
    if object_id is None:
        raise ValueError("The object needs to contain a valid _id")
    return object_id


@dataclass(frozen=True, slots=True)
class ResourceStore:
    """Remote object store for one venue-scoped resource kind."""

    client: MapwizeClient
    endpoint: ResourceEndpoint

    @property
    def kind(self) -> ResourceKind:
        return self.endpoint.kind

    async def list_for_venue(self, venue_id: str) -> list[Record]:
        """Return every object of the venue, unpublished ones included."""

        params = {"venueId": venue_id}
        if self.endpoint.include_unpublished:
            params["isPublished"] = "all"
        if not self.endpoint.paginated:
            payload = await self.client.request_json(
                "GET", self.endpoint.collection_path, params=params
            )
            return list(parse_records(payload))

        records: list[Record] = []
        page = 0
        while True:
            page += 1
            payload = await self.client.request_json(
                "GET",
                self.endpoint.collection_path,
                params={**params, "page": str(page)},
            )
            page_records = parse_records(payload)
            if not page_records:
                break
            records.extend(page_records)
        log.debug("Fetched %d %s objects in %d pages", len(records), self.kind, page - 1)
        return records

    async def create(self, record: Record) -> Record:
        """Create an object; ``venueId`` and ``owner`` must be set on it."""

        payload = await self.client.request_json(
            "POST", self.endpoint.collection_path, json=dict(record)
        )
        return parse_record(payload)

    async def update(self, record: Record) -> Record:
        payload = await self.client.request_json(
            "PUT", self.endpoint.object_path(require_id(record)), json=dict(record)
        )
        return parse_record(payload)

    async def delete(self, object_id: str) -> None:
        await self.client.request_json(
            "DELETE", self.endpoint.object_path(object_id), expected_status=204
        )


def build_store(client: MapwizeClient, kind: ResourceKind) -> ResourceStore:
    if kind not in SYNCABLE_KINDS:
        raise ValueError(f"Resource kind {kind!r} has no venue-scoped store")
    return ResourceStore(client=client, endpoint=endpoint_for(kind))
