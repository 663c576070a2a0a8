"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from mapwize_api.adapters.http_resilience import ResilienceConfig, ResilientClient
from mapwize_api.adapters.mapwize import MapwizeClient
from mapwize_api.config import get_mapwize_config, get_sync_config
from mapwize_api.domain.sync import SyncOptions, SyncResult, sync_venue_resources

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mapwize_api.config import MapwizeConfig
    from mapwize_api.domain.types import Record, RecordFilter, ResourceKind

ClientFactory = Callable[[ResilienceConfig], ResilientClient]


log = getLogger(__name__)


async def _sign_in_if_configured(client: MapwizeClient, config: MapwizeConfig) -> None:
    if config.email is None or config.password is None:
        return
    user = await client.sign_in(config.email, config.password)
    log.info("Signed in to %s as %s", config.server_url, user.email or user.id)


def sync_venue_objects(
    kind: ResourceKind,
    venue_id: str,
    objects: Sequence[Record],
    *,
    record_filter: RecordFilter | None = None,
    dry_run: bool = False,
    concurrency: int | None = None,
    config: MapwizeConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> SyncResult:
    """Create, update or delete venue objects so the server matches ``objects``."""

    effective_config = config or get_mapwize_config()
    options = SyncOptions(
        filter=record_filter,
        dry_run=dry_run,
        concurrency=concurrency if concurrency is not None else get_sync_config().concurrency,
    )
    log.info(
        "Starting %s sync: venue=%s, objects=%s, dry_run=%s, concurrency=%s",
        kind,
        venue_id,
        len(objects),
        dry_run,
        options.concurrency,
    )

    async def run() -> SyncResult:
        async with MapwizeClient(config=effective_config, client_factory=client_factory) as client:
            await _sign_in_if_configured(client, effective_config)
            return await sync_venue_resources(client, kind, venue_id, objects, options)

    result = asyncio.run(run())

    log.info(
        f"Finished {kind} sync: created={result.created_count}, "
        f"updated={result.updated_count}, deleted={result.deleted_count}, "
        f"unchanged={len(result.plan.unchanged)}, dry_run={result.dry_run}"
    )
    return result


def list_venues(
    *,
    config: MapwizeConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> list[Record]:
    """Return all venues of the configured organization."""

    effective_config = config or get_mapwize_config()

    async def run() -> list[Record]:
        async with MapwizeClient(config=effective_config, client_factory=client_factory) as client:
            await _sign_in_if_configured(client, effective_config)
            return await client.get_venues()

    return asyncio.run(run())
