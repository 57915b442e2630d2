"""Operation telemetry: one timed, structured log record per dispatched operation."""

from __future__ import annotations

import time
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

    from planesync.domain.clock import Clock
    from planesync.domain.model import Operation, SyncedEntity

log = getLogger(__name__)


class Outcome(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(slots=True, kw_only=True)
class OperationRecord:
    op: Operation
    entity_kind: str
    entity_key: str
    remote_id: str
    started_at: datetime
    duration: timedelta | None = None
    outcome: Outcome | None = None


type OperationHook = Callable[[OperationRecord], None]


@contextmanager
def track_operation(
    op: Operation,
    entity: SyncedEntity,
    *,
    clock: Clock,
    hooks: tuple[OperationHook, ...] = (),
    timer: Callable[[], float] = time.perf_counter,
) -> Iterator[OperationRecord]:
    """Time the enclosed block and emit its record on every exit path.

    The block may set ``record.outcome`` (e.g. ``SKIPPED``); otherwise the outcome
    follows from whether the block raised. Exceptions pass through untouched.
    ``started_at`` comes from ``clock``; the duration is measured with ``timer``.
    """

    record = OperationRecord(
        op=op,
        entity_kind=str(entity.kind),
        entity_key=str(entity.key),
        remote_id=entity.remote_id,
        started_at=clock(),
    )
    started = timer()
    try:
        yield record
    except BaseException:
        record.outcome = Outcome.FAILED
        raise
    else:
        if record.outcome is None:
            record.outcome = Outcome.SUCCEEDED
    finally:
        record.duration = timedelta(seconds=timer() - started)
        # read after the operation so a freshly created id is reported
        record.remote_id = entity.remote_id
        _emit(record, hooks)


def _emit(record: OperationRecord, hooks: tuple[OperationHook, ...]) -> None:
    duration_seconds = record.duration.total_seconds() if record.duration is not None else 0.0
    log.info(
        "operation in remote API complete: op=%s kind=%s key=%s remote_id=%s "
        "duration=%.3fs outcome=%s",
        record.op,
        record.entity_kind,
        record.entity_key,
        record.remote_id or "-",
        duration_seconds,
        record.outcome,
        extra={
            "sync_op": str(record.op),
            "entity_kind": record.entity_kind,
            "entity_key": record.entity_key,
            "remote_id": record.remote_id,
            "duration_seconds": duration_seconds,
            "outcome": str(record.outcome),
        },
    )
    for hook in hooks:
        try:
            hook(record)
        except Exception:
            log.exception("operation hook %r failed", hook)


__all__ = ["OperationHook", "OperationRecord", "Outcome", "track_operation"]
