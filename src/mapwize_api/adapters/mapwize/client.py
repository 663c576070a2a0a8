"""Mapwize API client."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from mapwize_api.adapters.http_resilience import ResilientClient
from mapwize_api.domain.errors import (
    NotFoundError,
    RemoteError,
    TransportError,
    UnexpectedPayloadError,
)
from mapwize_api.domain.types import ResourceKind

from .schema import GeoPoint, ImportCorner, ImportJob, parse_record, parse_records, parse_user
from .stores import ResourceStore, build_store, endpoint_for, require_id

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType
    from typing import BinaryIO

    from mapwize_api.config.http_resilience import ResilienceConfig
    from mapwize_api.config.mapwize import MapwizeConfig
    from mapwize_api.domain.types import Record

    from .schema import UserPayload

log = getLogger(__name__)

_SUCCESS_STATUS = 200


def _response_body(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return response.text


def _redacted_url(url: httpx.URL) -> str:
    return str(url.copy_remove_param("api_key"))


class MapwizeClient:
    """Async client for one organization of the Mapwize API.

    The client owns a single HTTP session for its lifetime (``async with``),
    so cookies set by :meth:`sign_in` apply to every later call.
    """

    def __init__(
        self,
        *,
        config: MapwizeConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._http: ResilientClient | None = None
        self._stores: dict[ResourceKind, ResourceStore] = {}

    @property
    def config(self) -> MapwizeConfig:
        return self._config

    async def __aenter__(self) -> MapwizeClient:
        if self._http is None:
            self._http = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def store(self, kind: ResourceKind) -> ResourceStore:
        """Return the remote object store serving ``kind``."""

        store = self._stores.get(kind)
        if store is None:
            store = build_store(self, kind)
            self._stores[kind] = store
        return store

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: object = None,
        data: Mapping[str, str] | None = None,
        files: Mapping[str, tuple[str, BinaryIO | bytes, str]] | None = None,
        expected_status: int | None = None,
        authenticate: bool = True,
    ) -> object:
        """Send one request and return the decoded JSON body.

        200 is always accepted; ``expected_status`` adds another accepted
        status (204 for deletes, whose body is then ``None``).
        """

        if self._http is None:
            raise RuntimeError("MapwizeClient session is not open, use 'async with'")

        query: dict[str, str] = dict(self._config.auth_params) if authenticate else {}
        if params:
            query.update(params)

        try:
            response = await self._http.request(
                method,
                path,
                params=query,
                json=json,
                data=data,
                files=files,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {path} failed: {exc}", url=path) from exc

        url = _redacted_url(response.request.url)
        log.debug("%s %s -> %s", method, url, response.status_code)

        accepted = {_SUCCESS_STATUS}
        if expected_status is not None:
            accepted.add(expected_status)
        if response.status_code not in accepted:
            body = _response_body(response)
            error_type = NotFoundError if response.status_code == 404 else RemoteError
            raise error_type(
                f"{method} {url} returned {response.status_code}: {_dump_body(body)}",
                status_code=response.status_code,
                body=body,
                url=url,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UnexpectedPayloadError(f"{method} {url} did not return JSON") from exc

    async def sign_in(self, email: str, password: str) -> UserPayload:
        """Sign in; the session cookie is kept for the following calls."""

        payload = await self.request_json(
            "POST",
            "/auth/signin",
            data={"email": email, "password": password},
            authenticate=False,
        )
        return parse_user(payload)

    async def get_venues(self) -> list[Record]:
        """Return all venues of the organization, unpublished ones included."""

        payload = await self.request_json(
            "GET",
            endpoint_for(ResourceKind.VENUE).collection_path,
            params={"isPublished": "all"},
        )
        return list(parse_records(payload))

    async def create_venue(self, venue: Record) -> Record:
        """Create a venue; its ``owner`` must be set."""

        payload = await self.request_json(
            "POST", endpoint_for(ResourceKind.VENUE).collection_path, json=dict(venue)
        )
        return parse_record(payload)

    async def update_venue(self, venue: Record) -> Record:
        payload = await self.request_json(
            "PUT",
            endpoint_for(ResourceKind.VENUE).object_path(require_id(venue)),
            json=dict(venue),
        )
        return parse_record(payload)

    async def upload_layer_image(
        self,
        layer_id: str,
        image: BinaryIO | bytes,
        top_left: GeoPoint,
        top_right: GeoPoint,
        bottom_left: GeoPoint,
        bottom_right: GeoPoint,
    ) -> object:
        """Upload a PNG to be imported as the layer image at the given corners."""

        import_job = ImportJob(
            corners=[
                ImportCorner.from_point(corner)
                for corner in (top_left, top_right, bottom_left, bottom_right)
            ]
        )
        return await self.request_json(
            "POST",
            f"{endpoint_for(ResourceKind.LAYER).object_path(layer_id)}/image",
            data={"importJob": import_job.model_dump_json()},
            files={"file": ("image.png", image, "image/png")},
        )

    async def get_route_graphs_for_floor(self, venue_id: str, floor: float) -> list[Record]:
        payload = await self.request_json(
            "GET",
            endpoint_for(ResourceKind.ROUTE_GRAPH).collection_path,
            params={"venueId": venue_id, "floor": _format_floor(floor)},
        )
        return list(parse_records(payload))

    async def update_route_graph_for_floor(
        self, venue_id: str, floor: float, route_graph: Record
    ) -> Record:
        """Replace the routeGraph of a floor, creating it when the floor has none."""

        endpoint = endpoint_for(ResourceKind.ROUTE_GRAPH)
        existing = await self.get_route_graphs_for_floor(venue_id, floor)
        if existing:
            payload = await self.request_json(
                "PUT", endpoint.object_path(require_id(existing[0])), json=dict(route_graph)
            )
        else:
            payload = await self.request_json(
                "POST", endpoint.collection_path, json=dict(route_graph)
            )
        return parse_record(payload)


def _format_floor(floor: float) -> str:
    return str(int(floor)) if float(floor).is_integer() else str(floor)


def _dump_body(body: object) -> str:
    if isinstance(body, str):
        return body
    return json.dumps(body, default=str)
