"""Staleness gate: decide whether an update call can be skipped.

The ``Programmed`` condition doubles as a cache entry. An entity is fresh when
that condition says the last operation succeeded, was recorded for the current
generation and is no older than the sync period. A generation bump therefore
invalidates freshness immediately, and a ``True`` condition carrying any other
reason never suppresses a sync.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from planesync.domain.clock import ensure_aware
from planesync.domain.model import (
    PROGRAMMED_CONDITION_TYPE,
    PROGRAMMED_REASON_PROGRAMMED,
    ConditionStatus,
)

if TYPE_CHECKING:
    from datetime import datetime

    from planesync.domain.model import SyncedEntity

_ZERO = timedelta(0)


@dataclass(frozen=True, slots=True)
class Freshness:
    fresh: bool
    requeue_after: timedelta = _ZERO
    elapsed: timedelta | None = None


STALE = Freshness(fresh=False)


def check_freshness(
    entity: SyncedEntity,
    sync_period: timedelta,
    *,
    now: datetime,
) -> Freshness:
    """Return whether ``entity`` is known-good and how long it stays that way."""

    condition = entity.conditions.get(PROGRAMMED_CONDITION_TYPE)
    if condition is None:
        return STALE
    if condition.status is not ConditionStatus.TRUE:
        return STALE
    if condition.reason != PROGRAMMED_REASON_PROGRAMMED:
        return STALE
    if condition.observed_generation != entity.generation:
        return STALE

    # a transition stamped in the future counts as "just now"
    elapsed = max(ensure_aware(now) - ensure_aware(condition.last_transition_time), _ZERO)
    if elapsed > sync_period:
        return Freshness(fresh=False, elapsed=elapsed)
    return Freshness(fresh=True, requeue_after=sync_period - elapsed, elapsed=elapsed)


__all__ = ["STALE", "Freshness", "check_freshness"]
