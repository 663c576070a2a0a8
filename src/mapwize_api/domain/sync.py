"""Reconciliation of a server-side venue collection against a desired list.

One sync run:
1) fetch the server objects of the venue and keep those accepted by the filter
2) match desired and server objects by ``name``
3) classify into create / update / delete, skipping unchanged objects
4) report the plan counts (also in dry-run)
5) unless dry-run: delete, then update, then create, each phase with bounded
   concurrency; the first failure aborts the run

There is no atomicity across or within phases. A failed run may leave part of
the plan applied; running the sync again resumes it because matching is by
name and unchanged objects are skipped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mapwize_api.config.sync import DEFAULT_SYNC_CONCURRENCY

from .comparison import equality_for
from .types import ID_FIELD, SYNCABLE_KINDS, record_id, record_name

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from .comparison import EqualityPredicate
    from .ports import RemoteObjectStore, StoreProvider
    from .types import Record, RecordFilter, ResourceKind

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncOptions:
    """Options of one sync run.

    ``filter`` only applies to server objects: objects it rejects are neither
    compared nor deleted, which bounds what a sync may remove.
    """

    filter: RecordFilter | None = None
    dry_run: bool = False
    concurrency: int = DEFAULT_SYNC_CONCURRENCY

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("Sync concurrency must be at least 1")


@dataclass(frozen=True, slots=True)
class SyncPlan:
    """Create/update/delete plan for one run.

    Records in ``to_update`` and ``unchanged`` are copies of the desired
    records carrying the ``_id`` of their server counterpart.
    """

    server_objects: tuple[Record, ...]
    to_create: tuple[Record, ...] = ()
    to_update: tuple[Record, ...] = ()
    to_delete: tuple[Record, ...] = ()
    unchanged: tuple[Record, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)


@dataclass(slots=True)
class SyncResult:
    """Outcome of a successful sync run."""

    plan: SyncPlan
    dry_run: bool
    created: list[Record] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return 0 if self.dry_run else len(self.plan.to_create)

    @property
    def updated_count(self) -> int:
        return 0 if self.dry_run else len(self.plan.to_update)

    @property
    def deleted_count(self) -> int:
        return 0 if self.dry_run else len(self.plan.to_delete)


def _index_by_name(records: Sequence[Record], *, label: str) -> dict[str, Record]:
    indexed: dict[str, Record] = {}
    for record in records:
        name = record_name(record)
        if name is None:
            log.warning("Ignoring %s object without a name: %r", label, record)
            continue
        if name in indexed:
            log.warning("Duplicate %s object name %r, keeping the last one", label, name)
        indexed[name] = record
    return indexed


def _with_id(record: Record, object_id: object) -> Record:
    return {**record, ID_FIELD: object_id}


def build_sync_plan(
    objects: Sequence[Record],
    server_objects: Sequence[Record],
    *,
    is_equal: EqualityPredicate,
    record_filter: RecordFilter | None = None,
) -> SyncPlan:
    """Compute which objects to create, update and delete.

    Pure: neither ``objects`` nor ``server_objects`` are modified.
    """

    scoped = tuple(
        record for record in server_objects if record_filter is None or record_filter(record)
    )
    desired_by_name = _index_by_name(objects, label="desired")
    server_by_name = _index_by_name(scoped, label="server")

    to_create: list[Record] = []
    to_update: list[Record] = []
    unchanged: list[Record] = []
    for name, desired in desired_by_name.items():
        server = server_by_name.get(name)
        if server is None:
            to_create.append(desired)
            continue
        annotated = _with_id(desired, server.get(ID_FIELD))
        if is_equal(annotated, server):
            unchanged.append(annotated)
        else:
            to_update.append(annotated)

    to_delete = [
        server for name, server in server_by_name.items() if name not in desired_by_name
    ]

    return SyncPlan(
        server_objects=scoped,
        to_create=tuple(to_create),
        to_update=tuple(to_update),
        to_delete=tuple(to_delete),
        unchanged=tuple(unchanged),
    )


def report_sync_plan(plan: SyncPlan) -> None:
    log.info("Server objects: %d", len(plan.server_objects))
    log.info("Objects to create: %d", len(plan.to_create))
    log.info("Objects to delete: %d", len(plan.to_delete))
    log.info("Objects to update: %d", len(plan.to_update))


async def run_bounded[T, R](
    items: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    *,
    limit: int = DEFAULT_SYNC_CONCURRENCY,
) -> list[R]:
    """Run ``operation`` over ``items`` with at most ``limit`` calls in flight.

    After the first failure no new call is started. Calls already in flight
    are not cancelled; they are awaited, then the first failure is raised.
    Results are returned in input order.
    """

    if limit < 1:
        raise ValueError("Concurrency limit must be at least 1")

    results: dict[int, R] = {}
    failures: list[Exception] = []

    async def run_one(index: int, item: T) -> None:
        try:
            results[index] = await operation(item)
        except Exception as exc:  # noqa: BLE001
            failures.append(exc)

    pending: set[asyncio.Task[None]] = set()
    for index, item in enumerate(items):
        if len(pending) >= limit:
            _done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
        if failures:
            break
        pending.add(asyncio.create_task(run_one(index, item)))

    if pending:
        await asyncio.wait(pending)

    if failures:
        for extra in failures[1:]:
            log.debug("Additional failure in the same phase: %r", extra)
        raise failures[0]

    return [results[index] for index in range(len(items))]


async def _delete_record(store: RemoteObjectStore, record: Record) -> None:
    object_id = record_id(record)
    if object_id is None:
        raise ValueError(f"Cannot delete server object without {ID_FIELD}: {record!r}")
    await store.delete(object_id)


async def execute_sync_plan(
    store: RemoteObjectStore,
    plan: SyncPlan,
    *,
    concurrency: int = DEFAULT_SYNC_CONCURRENCY,
) -> list[Record]:
    """Apply ``plan`` in the order delete, update, create.

    Returns the records of ``plan.to_create`` annotated with their new ``_id``.
    """

    async def delete(record: Record) -> None:
        await _delete_record(store, record)

    await run_bounded(plan.to_delete, delete, limit=concurrency)
    await run_bounded(plan.to_update, store.update, limit=concurrency)
    created = await run_bounded(plan.to_create, store.create, limit=concurrency)

    return [
        _with_id(desired, server.get(ID_FIELD))
        for desired, server in zip(plan.to_create, created, strict=True)
    ]


async def sync_venue_objects(
    store: RemoteObjectStore,
    venue_id: str,
    objects: Sequence[Record],
    options: SyncOptions | None = None,
    *,
    is_equal: EqualityPredicate,
) -> SyncResult:
    """Create, update or delete server objects so they match ``objects``.

    ``name`` is the matching key. Every object must carry ``venueId`` and
    ``owner``; this is not validated.
    """

    effective = options or SyncOptions()
    log.info("Syncing %s objects of venue %s", store.kind, venue_id)

    server_objects = await store.list_for_venue(venue_id)
    plan = build_sync_plan(
        objects,
        server_objects,
        is_equal=is_equal,
        record_filter=effective.filter,
    )
    report_sync_plan(plan)

    if effective.dry_run:
        log.info("Dry run, no changes sent to the server")
        return SyncResult(plan=plan, dry_run=True)

    created = await execute_sync_plan(store, plan, concurrency=effective.concurrency)
    return SyncResult(plan=plan, dry_run=False, created=created)


async def sync_venue_resources(
    stores: StoreProvider,
    kind: ResourceKind,
    venue_id: str,
    objects: Sequence[Record],
    options: SyncOptions | None = None,
) -> SyncResult:
    """Dispatch a sync for ``kind`` using its store and equality predicate."""

    if kind not in SYNCABLE_KINDS:
        raise ValueError(f"Resource kind {kind!r} cannot be synced")
    return await sync_venue_objects(
        stores.store(kind),
        venue_id,
        objects,
        options,
        is_equal=equality_for(kind),
    )
