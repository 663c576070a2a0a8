"""Mapwize API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .env import optional_env_var, optional_int_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_MAPWIZE_SERVER_URL = "https://www.mapwize.io"
MAPWIZE_TIMEOUT_SECONDS = 30.0


def _default_resilience(server_url: str, *, retries: int = 0) -> ResilienceConfig:
    return ResilienceConfig(
        base_url=server_url,
        timeout_seconds=MAPWIZE_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=retries),
        ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        default_headers={"Accept": "application/json"},
    )


@dataclass(frozen=True)
class MapwizeConfig:
    """Holds Mapwize API credentials and transport settings.

    The API is limited to one organization per key, so both values are
    required up front. ``server_url`` is the only source of the base URL:
    a ``resilience`` without ``base_url`` receives it, one with a different
    ``base_url`` is rejected.
    """

    api_key: str
    organization_id: str
    server_url: str = DEFAULT_MAPWIZE_SERVER_URL
    resilience: ResilienceConfig = field(default=None)  # type: ignore[assignment]
    email: str | None = None
    password: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise MissingConfigurationError("Please provide an API key.")
        if not self.organization_id or not self.organization_id.strip():
            raise MissingConfigurationError("Please provide an organization ID.")

        resilience = self.resilience
        if resilience is None:
            resilience = _default_resilience(self.server_url)
        elif resilience.base_url is None:
            resilience = replace(resilience, base_url=self.server_url)
        elif resilience.base_url.rstrip("/") != self.server_url.rstrip("/"):
            raise ConfigurationError(
                f"Resilience base_url {resilience.base_url!r} does not match "
                f"server_url {self.server_url!r}"
            )
        object.__setattr__(self, "resilience", resilience)

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.password)

    @property
    def auth_params(self) -> dict[str, str]:
        return {"api_key": self.api_key, "organizationId": self.organization_id}


def get_mapwize_config(*, resilience: ResilienceConfig | None = None) -> MapwizeConfig:
    values = require_env_vars(("MAPWIZE_API_KEY", "MAPWIZE_ORGANIZATION_ID"))
    server_url = optional_env_var("MAPWIZE_SERVER_URL") or DEFAULT_MAPWIZE_SERVER_URL
    retries = optional_int_env_var("MAPWIZE_MAX_RETRIES", 0)
    return MapwizeConfig(
        api_key=values["MAPWIZE_API_KEY"],
        organization_id=values["MAPWIZE_ORGANIZATION_ID"],
        server_url=server_url,
        resilience=resilience or _default_resilience(server_url, retries=retries),
        email=optional_env_var("MAPWIZE_EMAIL"),
        password=optional_env_var("MAPWIZE_PASSWORD"),
    )
