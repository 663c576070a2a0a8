"""Synchronization defaults for venue object reconciliation."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env_var
from .errors import ConfigurationError

DEFAULT_SYNC_CONCURRENCY = 10


@dataclass(frozen=True, slots=True)
class SyncConfig:
    concurrency: int = DEFAULT_SYNC_CONCURRENCY

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ConfigurationError("Sync concurrency must be at least 1")


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        concurrency=optional_int_env_var("MAPWIZE_SYNC_CONCURRENCY", DEFAULT_SYNC_CONCURRENCY)
    )
