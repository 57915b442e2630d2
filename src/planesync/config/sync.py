"""Synchronization defaults for the reconciliation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from .env import env_float
from .errors import ConfigurationError

DEFAULT_SYNC_PERIOD_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class SyncConfig:
    sync_period: timedelta = field(
        default_factory=lambda: timedelta(seconds=DEFAULT_SYNC_PERIOD_SECONDS)
    )


def get_sync_config() -> SyncConfig:
    seconds = env_float("PLANESYNC_SYNC_PERIOD_SECONDS", DEFAULT_SYNC_PERIOD_SECONDS)
    if seconds < 0:
        raise ConfigurationError("PLANESYNC_SYNC_PERIOD_SECONDS must be non-negative")
    return SyncConfig(sync_period=timedelta(seconds=seconds))
