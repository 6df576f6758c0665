"""Remote master-data API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

API_TIMEOUT_SECONDS = 30.0
# Push delivery fans out server-side and can be slow to acknowledge.
PUSH_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Holds remote API connection values."""

    base_url: str
    token: str | None
    resilience: ResilienceConfig
    push_resilience: ResilienceConfig


def _headers(token: str | None) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def build_api_config(base_url: str, *, token: str | None = None) -> ApiConfig:
    normalized = base_url if base_url.endswith("/") else f"{base_url}/"
    headers = _headers(token)
    return ApiConfig(
        base_url=normalized,
        token=token,
        resilience=ResilienceConfig(
            name="master-data-api",
            base_url=normalized,
            timeout_seconds=API_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers=headers,
        ),
        push_resilience=ResilienceConfig(
            name="push-notifications",
            base_url=normalized,
            timeout_seconds=PUSH_TIMEOUT_SECONDS,
            default_headers=headers,
        ),
    )


def get_api_config() -> ApiConfig:
    values = require_env_vars(("MASTERSYNC_API_BASE_URL",))
    token = os.getenv("MASTERSYNC_API_TOKEN") or None
    return build_api_config(values["MASTERSYNC_API_BASE_URL"], token=token)
