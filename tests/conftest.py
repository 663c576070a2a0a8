from __future__ import annotations

import pytest

from mapwize_api.config import MapwizeConfig, ResilienceConfig

_MAPWIZE_ENV_VARS = (
    "MAPWIZE_API_KEY",
    "MAPWIZE_ORGANIZATION_ID",
    "MAPWIZE_SERVER_URL",
    "MAPWIZE_EMAIL",
    "MAPWIZE_PASSWORD",
    "MAPWIZE_MAX_RETRIES",
    "MAPWIZE_SYNC_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _MAPWIZE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mapwize_config() -> MapwizeConfig:
    return MapwizeConfig(
        api_key="demo-key",
        organization_id="org-1",
        server_url="https://mapwize.test",
        resilience=ResilienceConfig(base_url="https://mapwize.test"),
    )
