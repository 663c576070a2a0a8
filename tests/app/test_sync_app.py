from __future__ import annotations

import json
from dataclasses import dataclass, field, replace

import httpx
import pytest

from mapwize_api.app import list_venues, sync_venue_objects
from mapwize_api.config import MapwizeConfig  # noqa: TC001
from mapwize_api.domain.errors import RemoteError
from mapwize_api.domain.types import ResourceKind
from tests.support.http import make_client_factory


@dataclass
class FakeMapwizeServer:
    """Serves one collection of venue objects the way the REST API does."""

    collection: str = "layers"
    objects: dict[str, dict[str, object]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    fail_paths: set[str] = field(default_factory=set)
    _next_id: int = 0

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.fail_paths:
            return httpx.Response(500, json={"message": "boom"})
        if path == "/auth/signin":
            return httpx.Response(200, json={"_id": "u1", "email": "ops@example.com"})
        if path == "/api/v1/venues":
            return httpx.Response(200, json=[{"_id": "v1", "name": "HQ"}])

        collection_path = f"/api/v1/{self.collection}"
        if request.method == "GET" and path == collection_path:
            venue_id = request.url.params["venueId"]
            listed = [obj for obj in self.objects.values() if obj.get("venueId") == venue_id]
            return httpx.Response(200, json=listed)
        if request.method == "POST" and path == collection_path:
            self._next_id += 1
            created = {**json.loads(request.content), "_id": f"new-{self._next_id}"}
            self.objects[created["_id"]] = created
            return httpx.Response(200, json=created)

        object_id = path.rsplit("/", 1)[-1]
        if object_id not in self.objects:
            return httpx.Response(404, json={"message": "Not found"})
        if request.method == "PUT":
            self.objects[object_id] = json.loads(request.content)
            return httpx.Response(200, json=self.objects[object_id])
        if request.method == "DELETE":
            del self.objects[object_id]
            return httpx.Response(204)
        return httpx.Response(405)

    def mutations(self) -> list[tuple[str, str]]:
        return [
            (request.method, request.url.path)
            for request in self.requests
            if request.method in {"POST", "PUT", "DELETE"}
            and request.url.path != "/auth/signin"
        ]


def _layer(name: str, **fields: object) -> dict[str, object]:
    return {"name": name, "venueId": "v1", "owner": "org-1", **fields}


@pytest.fixture
def server() -> FakeMapwizeServer:
    return FakeMapwizeServer(
        objects={
            "l1": _layer("Ground", _id="l1", floor=0),
            "l2": _layer("Basement", _id="l2", floor=-1),
            "l3": _layer("Other venue", _id="l3", venueId="v2"),
        }
    )


def test_sync_makes_the_server_match(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    desired = [_layer("Ground", floor=0, isPublished=True), _layer("Roof", floor=5)]

    result = sync_venue_objects(
        ResourceKind.LAYER,
        "v1",
        desired,
        config=mapwize_config,
        client_factory=make_client_factory(server.handle),
    )

    assert server.mutations() == [
        ("DELETE", "/api/v1/layers/l2"),
        ("PUT", "/api/v1/layers/l1"),
        ("POST", "/api/v1/layers"),
    ]
    assert sorted(obj["name"] for obj in server.objects.values()) == [
        "Ground",
        "Other venue",
        "Roof",
    ]
    assert server.objects["l1"]["isPublished"] is True
    assert result.created == [{**desired[1], "_id": "new-1"}]
    assert (result.created_count, result.updated_count, result.deleted_count) == (1, 1, 1)


def test_second_sync_sends_no_mutations(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    desired = [_layer("Ground", floor=0), _layer("Roof", floor=5)]
    factory = make_client_factory(server.handle)

    sync_venue_objects(
        ResourceKind.LAYER, "v1", desired, config=mapwize_config, client_factory=factory
    )
    server.requests.clear()
    second = sync_venue_objects(
        ResourceKind.LAYER, "v1", desired, config=mapwize_config, client_factory=factory
    )

    assert server.mutations() == []
    assert second.plan.is_noop


def test_dry_run_only_reads(server: FakeMapwizeServer, mapwize_config: MapwizeConfig) -> None:
    result = sync_venue_objects(
        ResourceKind.LAYER,
        "v1",
        [],
        dry_run=True,
        config=mapwize_config,
        client_factory=make_client_factory(server.handle),
    )

    assert server.mutations() == []
    assert [obj["name"] for obj in result.plan.to_delete] == ["Ground", "Basement"]
    assert result.deleted_count == 0


def test_filter_limits_what_may_be_deleted(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    sync_venue_objects(
        ResourceKind.LAYER,
        "v1",
        [],
        record_filter=lambda record: record.get("floor") == -1,
        config=mapwize_config,
        client_factory=make_client_factory(server.handle),
    )

    assert server.mutations() == [("DELETE", "/api/v1/layers/l2")]


def test_remote_failure_propagates(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    server.fail_paths.add("/api/v1/layers/l2")

    with pytest.raises(RemoteError) as exc:
        sync_venue_objects(
            ResourceKind.LAYER,
            "v1",
            [_layer("Ground", floor=1)],
            config=mapwize_config,
            client_factory=make_client_factory(server.handle),
        )

    assert exc.value.status_code == 500
    assert ("PUT", "/api/v1/layers/l1") not in server.mutations()


def test_sign_in_happens_first_when_credentials_are_configured(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    config = replace(mapwize_config, email="ops@example.com", password="secret")

    venues = list_venues(config=config, client_factory=make_client_factory(server.handle))

    assert venues == [{"_id": "v1", "name": "HQ"}]
    assert [request.url.path for request in server.requests] == [
        "/auth/signin",
        "/api/v1/venues",
    ]


def test_no_sign_in_without_credentials(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    list_venues(config=mapwize_config, client_factory=make_client_factory(server.handle))

    assert [request.url.path for request in server.requests] == ["/api/v1/venues"]


def test_explicit_zero_concurrency_is_rejected(
    server: FakeMapwizeServer, mapwize_config: MapwizeConfig
) -> None:
    with pytest.raises(ValueError, match="at least 1"):
        sync_venue_objects(
            ResourceKind.LAYER,
            "v1",
            [],
            concurrency=0,
            config=mapwize_config,
            client_factory=make_client_factory(server.handle),
        )

    assert server.requests == []
