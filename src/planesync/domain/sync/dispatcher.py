"""Generic create/update/delete entry points over the remote adapter set.

Checks run in a fixed order: the entity kind must have an adapter, update and
delete need a remote identity, update consults the staleness gate, and only then
is the adapter called. Precondition failures raise before any telemetry is
emitted; everything past them is tracked exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any

from planesync.domain.clock import utcnow
from planesync.domain.model import Operation

from .errors import MissingRemoteIdentityError, RemoteOperationFailedError, UnsupportedKindError
from .staleness import check_freshness
from .telemetry import Outcome, track_operation

if TYPE_CHECKING:
    from collections.abc import Callable

    from planesync.domain.clock import Clock
    from planesync.domain.model import RemoteEntity
    from planesync.domain.ports.remote import AdapterSet, RemoteAdapter

    from .telemetry import OperationHook

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateResult:
    """Outcome of an update call.

    ``requeue_after`` is a scheduling hint for the caller; it is only non-zero when
    the update was skipped because the entity is still fresh.
    """

    requeue_after: timedelta = timedelta(0)
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class Dispatcher:
    """Route typed entities to their adapters with uniform bookkeeping."""

    adapters: AdapterSet
    clock: Clock = utcnow
    hooks: tuple[OperationHook, ...] = ()

    def create[TEntity: RemoteEntity](
        self,
        entity: TEntity,
        *,
        timeout: float | None = None,
    ) -> TEntity:
        adapter = self._adapter_for(entity)
        with track_operation(Operation.CREATE, entity, clock=self.clock, hooks=self.hooks):
            _invoke(adapter.create, Operation.CREATE, entity, timeout)
        return entity

    def update(
        self,
        entity: RemoteEntity,
        sync_period: timedelta,
        *,
        timeout: float | None = None,
    ) -> UpdateResult:
        adapter = self._adapter_for(entity)
        _require_remote_id(Operation.UPDATE, entity)
        with track_operation(
            Operation.UPDATE, entity, clock=self.clock, hooks=self.hooks
        ) as record:
            freshness = check_freshness(entity, sync_period, now=record.started_at)
            if freshness.fresh:
                record.outcome = Outcome.SKIPPED
                log.debug(
                    "no need for update of %s %s, requeueing after %s (last update %s ago)",
                    entity.kind,
                    entity.key,
                    freshness.requeue_after,
                    freshness.elapsed,
                )
                return UpdateResult(requeue_after=freshness.requeue_after, skipped=True)
            _invoke(adapter.update, Operation.UPDATE, entity, timeout)
        return UpdateResult()

    def delete(self, entity: RemoteEntity, *, timeout: float | None = None) -> None:
        adapter = self._adapter_for(entity)
        _require_remote_id(Operation.DELETE, entity)
        with track_operation(Operation.DELETE, entity, clock=self.clock, hooks=self.hooks):
            _invoke(adapter.delete, Operation.DELETE, entity, timeout)

    def _adapter_for(self, entity: RemoteEntity) -> RemoteAdapter[Any]:
        adapter = self.adapters.get(getattr(entity, "kind", None))  # type: ignore[arg-type]
        if adapter is None:
            raise UnsupportedKindError(entity)
        return adapter


def _require_remote_id(op: Operation, entity: RemoteEntity) -> None:
    if not entity.remote_id:
        raise MissingRemoteIdentityError(op, entity)


def _invoke(
    call: Callable[..., None],
    op: Operation,
    entity: RemoteEntity,
    timeout: float | None,
) -> None:
    try:
        call(entity, timeout=timeout)
    except Exception as exc:
        raise RemoteOperationFailedError.from_failure(op, entity, exc) from exc


__all__ = ["Dispatcher", "UpdateResult"]
