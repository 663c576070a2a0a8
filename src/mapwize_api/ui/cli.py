# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from mapwize_api.app import list_venues, sync_venue_objects
from mapwize_api.config import configure_logging
from mapwize_api.domain.types import SYNCABLE_KINDS, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from mapwize_api.domain.types import Record, RecordFilter

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise Mapwize venue objects")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every API request",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("venues", help="List the venues of the organization")

    sync = subparsers.add_parser("sync", help="Make the server objects of a venue match a file")
    sync.add_argument(
        "kind",
        choices=sorted(str(kind) for kind in SYNCABLE_KINDS),
        help="Kind of venue objects to synchronise",
    )
    sync.add_argument(
        "--venue-id",
        type=str,
        required=True,
        help="Venue whose objects are synchronised",
    )
    sync.add_argument(
        "--file",
        type=Path,
        required=True,
        help="JSON file holding the list of desired objects",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report the number of creates, updates and deletes",
    )
    sync.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Only consider server objects where FIELD equals the JSON VALUE (repeatable)",
    )
    sync.add_argument(
        "--concurrency",
        type=int,
        help="Maximum number of concurrent requests per phase (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _parse_filter_value(raw: str) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _build_filter(expressions: Sequence[str]) -> RecordFilter | None:
    conditions: list[tuple[str, object]] = []
    for expression in expressions:
        field, separator, raw_value = expression.partition("=")
        if not separator or not field.strip():
            raise ValueError(f"Invalid filter (expected FIELD=VALUE): {expression}")
        conditions.append((field.strip(), _parse_filter_value(raw_value)))
    if not conditions:
        return None

    def record_filter(record: Record) -> bool:
        return all(record.get(field) == value for field, value in conditions)

    return record_filter


def _load_objects(path: Path) -> list[Record]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read objects from {path}: {exc}") from exc
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise ValueError(f"{path} must contain a JSON list of objects")
    return payload


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        record_filter = None
        objects: list[Record] = []
        if parsed_args.command == "sync":
            record_filter = _build_filter(parsed_args.filters)
            objects = _load_objects(parsed_args.file)
            if parsed_args.concurrency is not None and parsed_args.concurrency < 1:
                raise ValueError("Concurrency must be at least 1")
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "venues":
            for venue in list_venues():
                print(f"{venue.get('_id')}\t{venue.get('name')}")
        elif parsed_args.command == "sync":
            sync_venue_objects(
                ResourceKind(parsed_args.kind),
                parsed_args.venue_id,
                objects,
                record_filter=record_filter,
                dry_run=parsed_args.dry_run,
                concurrency=parsed_args.concurrency,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
