"""Remote control-plane API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_KONNECT_BASE_URL = "https://us.api.konghq.com"
KONNECT_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class KonnectConfig:
    """Holds the remote API endpoint and client resilience settings."""

    resilience: ResilienceConfig

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or DEFAULT_KONNECT_BASE_URL


def get_konnect_config(*, resilience: ResilienceConfig | None = None) -> KonnectConfig:
    if resilience is not None:
        return KonnectConfig(resilience=resilience)

    values = require_env_vars(("KONNECT_TOKEN",))
    base_url = os.getenv("KONNECT_BASE_URL") or DEFAULT_KONNECT_BASE_URL
    return KonnectConfig(
        resilience=ResilienceConfig(
            name="konnect",
            base_url=base_url.rstrip("/"),
            timeout_seconds=KONNECT_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers={
                "Authorization": f"Bearer {values['KONNECT_TOKEN']}",
                "Accept": "application/json",
            },
        )
    )
