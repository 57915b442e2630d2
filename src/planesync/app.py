"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from contextlib import ExitStack
from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from pydantic import TypeAdapter, ValidationError

from planesync.adapters.konnect import KonnectClient, build_konnect_adapters
from planesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyEntityUnitOfWork,
    is_started,
    startup,
)
from planesync.config import get_sync_config
from planesync.domain.clock import utcnow
from planesync.domain.model import (
    CONTROL_PLANE_REF_REASON_INVALID,
    CONTROL_PLANE_REF_REASON_VALID,
    CONTROL_PLANE_REF_VALID_CONDITION_TYPE,
    ENTITY_CLASS_BY_KIND,
    PROGRAMMED_CONDITION_TYPE,
    SERVICE_REF_REASON_INVALID,
    SERVICE_REF_REASON_VALID,
    SERVICE_REF_VALID_CONDITION_TYPE,
    SPEC_CLASS_BY_KIND,
    ConditionStatus,
    EntityKind,
    ObjectKey,
    ObjectMeta,
    Operation,
    Route,
    ensure_finalizer,
    mark_operation_failed,
    mark_programmed,
    remove_finalizer,
)
from planesync.domain.ports.unit_of_work import EntityUnitOfWork
from planesync.domain.sync import Dispatcher, RemoteOperationFailedError

if TYPE_CHECKING:
    from planesync.domain.clock import Clock
    from planesync.domain.model import AnyEntity
    from planesync.domain.ports.persistence import EntityRepository

UnitOfWorkFactory = Callable[[], EntityUnitOfWork]

log = getLogger(__name__)

FINALIZER: Final[str] = "planesync.dev/remote-cleanup"


class EntityNotFoundError(LookupError):
    """Raised when a requested entity is not in the local store."""


class UnresolvedReferenceError(RuntimeError):
    """Raised when an entity's parent is missing or not yet programmed remotely."""


class InvalidDocumentError(ValueError):
    """Raised when an entity document cannot be turned into an entity."""


@dataclass(frozen=True, slots=True)
class SyncEntityResult:
    kind: EntityKind
    key: ObjectKey
    operation: Operation
    remote_id: str
    requeue_after: timedelta = timedelta(0)
    skipped: bool = False
    removed: bool = False


def _ensure_started(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyEntityUnitOfWork


def sync_entity(
    kind: EntityKind,
    key: ObjectKey,
    *,
    dispatcher: Dispatcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    sync_period: timedelta | None = None,
    clock: Clock = utcnow,
    timeout: float | None = None,
) -> SyncEntityResult:
    """Perform exactly one remote operation for one stored entity and persist its status.

    The operation follows from the stored state: delete when deletion was requested,
    create when no remote identity is recorded, update otherwise. A failed remote
    operation is recorded on the ``Programmed`` condition and committed before the
    error is raised again.
    """

    effective_uow = _ensure_started(unit_of_work_factory)
    period = sync_period if sync_period is not None else get_sync_config().sync_period

    with ExitStack() as stack:
        if dispatcher is None:
            client = stack.enter_context(KonnectClient())
            dispatcher = Dispatcher(build_konnect_adapters(client=client), clock=clock)
        result = _sync_stored_entity(
            kind,
            key,
            dispatcher=dispatcher,
            unit_of_work_factory=effective_uow,
            sync_period=period,
            clock=clock,
            timeout=timeout,
        )

    log.info(
        f"Synced {kind} {key}: operation={result.operation}, remote_id={result.remote_id}, "
        f"skipped={result.skipped}, requeue_after={result.requeue_after}"
    )
    return result


def _sync_stored_entity(
    kind: EntityKind,
    key: ObjectKey,
    *,
    dispatcher: Dispatcher,
    unit_of_work_factory: UnitOfWorkFactory,
    sync_period: timedelta,
    clock: Clock,
    timeout: float | None,
) -> SyncEntityResult:
    with unit_of_work_factory() as uow:
        repository = uow.repositories.entities
        entity = repository.get(kind, key)
        if entity is None:
            raise EntityNotFoundError(f"{kind} {key} is not stored")

        if entity.metadata.deletion_requested:
            try:
                result = _delete(entity, repository, dispatcher, timeout=timeout)
            except RemoteOperationFailedError as exc:
                mark_operation_failed(entity, exc, clock=clock)
                repository.save(entity)
                uow.commit()
                raise
            uow.commit()
            return result

        try:
            _resolve_references(entity, repository, clock=clock)
        except UnresolvedReferenceError:
            repository.save(entity)
            uow.commit()
            raise

        try:
            result = _create_or_update(
                entity,
                dispatcher,
                sync_period=sync_period,
                clock=clock,
                timeout=timeout,
            )
        except RemoteOperationFailedError as exc:
            mark_operation_failed(entity, exc, clock=clock)
            repository.save(entity)
            uow.commit()
            raise

        repository.save(entity)
        uow.commit()
        return result


def _create_or_update(
    entity: AnyEntity,
    dispatcher: Dispatcher,
    *,
    sync_period: timedelta,
    clock: Clock,
    timeout: float | None,
) -> SyncEntityResult:
    if not entity.remote_id:
        ensure_finalizer(entity.metadata, FINALIZER)
        dispatcher.create(entity, timeout=timeout)
        mark_programmed(entity, clock=clock)
        return SyncEntityResult(
            kind=entity.kind,
            key=entity.key,
            operation=Operation.CREATE,
            remote_id=entity.remote_id,
        )

    outcome = dispatcher.update(entity, sync_period, timeout=timeout)
    if not outcome.skipped:
        mark_programmed(entity, clock=clock)
    return SyncEntityResult(
        kind=entity.kind,
        key=entity.key,
        operation=Operation.UPDATE,
        remote_id=entity.remote_id,
        requeue_after=outcome.requeue_after,
        skipped=outcome.skipped,
    )


def _delete(
    entity: AnyEntity,
    repository: EntityRepository,
    dispatcher: Dispatcher,
    *,
    timeout: float | None,
) -> SyncEntityResult:
    remote_id = entity.remote_id
    if remote_id:
        dispatcher.delete(entity, timeout=timeout)
    else:
        log.info(f"{entity.kind} {entity.key} was never created remotely; dropping it locally")

    remove_finalizer(entity.metadata, FINALIZER)
    repository.remove(entity.kind, entity.key)
    return SyncEntityResult(
        kind=entity.kind,
        key=entity.key,
        operation=Operation.DELETE,
        remote_id=remote_id,
        removed=True,
    )


def _is_programmed(entity: AnyEntity | None) -> bool:
    if entity is None or not entity.remote_id:
        return False
    condition = entity.conditions.get(PROGRAMMED_CONDITION_TYPE)
    return condition is not None and condition.is_true


def _resolve_references(entity: AnyEntity, repository: EntityRepository, *, clock: Clock) -> None:
    """Copy parent remote ids onto ``entity`` and record whether the reference is valid."""

    if entity.kind is EntityKind.CONTROL_PLANE:
        return

    namespace = entity.metadata.namespace
    if isinstance(entity, Route):
        service_key = ObjectKey(namespace=namespace, name=entity.spec.service_ref)
        service = repository.get(EntityKind.SERVICE, service_key)
        if service is None or not _is_programmed(service):
            message = f"{EntityKind.SERVICE} {service_key} is not programmed"
            entity.conditions.set(
                SERVICE_REF_VALID_CONDITION_TYPE,
                ConditionStatus.FALSE,
                SERVICE_REF_REASON_INVALID,
                message,
                observed_generation=entity.generation,
                now=clock(),
            )
            raise UnresolvedReferenceError(f"{entity.kind} {entity.key}: {message}")
        entity.status.service_id = service.remote_id
        entity.status.control_plane_id = service.status.control_plane_id
        entity.conditions.set(
            SERVICE_REF_VALID_CONDITION_TYPE,
            ConditionStatus.TRUE,
            SERVICE_REF_REASON_VALID,
            observed_generation=entity.generation,
            now=clock(),
        )
        return

    control_plane_key = ObjectKey(namespace=namespace, name=entity.spec.control_plane_ref)
    control_plane = repository.get(EntityKind.CONTROL_PLANE, control_plane_key)
    if control_plane is None or not _is_programmed(control_plane):
        message = f"{EntityKind.CONTROL_PLANE} {control_plane_key} is not programmed"
        entity.conditions.set(
            CONTROL_PLANE_REF_VALID_CONDITION_TYPE,
            ConditionStatus.FALSE,
            CONTROL_PLANE_REF_REASON_INVALID,
            message,
            observed_generation=entity.generation,
            now=clock(),
        )
        raise UnresolvedReferenceError(f"{entity.kind} {entity.key}: {message}")
    entity.status.control_plane_id = control_plane.remote_id
    entity.conditions.set(
        CONTROL_PLANE_REF_VALID_CONDITION_TYPE,
        ConditionStatus.TRUE,
        CONTROL_PLANE_REF_REASON_VALID,
        observed_generation=entity.generation,
        now=clock(),
    )


def entity_from_document(document: Mapping[str, Any]) -> AnyEntity:
    """Build an entity from a ``{"kind", "metadata", "spec"}`` mapping."""

    try:
        kind = EntityKind(document["kind"])
        raw_metadata = dict(document.get("metadata") or {})
        raw_spec = document["spec"]
    except (KeyError, ValueError, TypeError) as exc:
        raise InvalidDocumentError(f"Invalid entity document: {exc}") from exc

    try:
        metadata = TypeAdapter(ObjectMeta).validate_python(raw_metadata)
        spec = TypeAdapter(SPEC_CLASS_BY_KIND[kind]).validate_python(raw_spec)
    except ValidationError as exc:
        raise InvalidDocumentError(f"Invalid {kind} document: {exc}") from exc

    return ENTITY_CLASS_BY_KIND[kind](metadata=metadata, spec=spec)


def declare_entity(
    document: Mapping[str, Any],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> AnyEntity:
    """Store the desired state from ``document``, keeping any recorded remote status.

    A changed spec bumps the generation so the next sync is not skipped.
    """

    declared = entity_from_document(document)
    effective_uow = _ensure_started(unit_of_work_factory)
    with effective_uow() as uow:
        repository = uow.repositories.entities
        existing = repository.get(declared.kind, declared.key)
        if existing is None:
            repository.add(declared)
            uow.commit()
            log.info(f"Declared {declared.kind} {declared.key}")
            return declared

        spec_changed = existing.spec != declared.spec
        existing.spec = declared.spec  # type: ignore[assignment]
        existing.metadata.labels = dict(declared.metadata.labels)
        existing.metadata.owner_references = list(declared.metadata.owner_references)
        existing.metadata.deletion_requested = declared.metadata.deletion_requested
        if spec_changed:
            existing.bump_generation()
        repository.save(existing)
        uow.commit()
        log.info(
            f"Updated {existing.kind} {existing.key}: generation={existing.generation}, "
            f"spec_changed={spec_changed}"
        )
        return existing


def request_deletion(
    kind: EntityKind,
    key: ObjectKey,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> AnyEntity:
    """Mark a stored entity for deletion; the next sync removes it remotely."""

    effective_uow = _ensure_started(unit_of_work_factory)
    with effective_uow() as uow:
        repository = uow.repositories.entities
        entity = repository.get(kind, key)
        if entity is None:
            raise EntityNotFoundError(f"{kind} {key} is not stored")
        entity.metadata.deletion_requested = True
        repository.save(entity)
        uow.commit()
        return entity


def list_entities(
    kind: EntityKind | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[AnyEntity]:
    effective_uow = _ensure_started(unit_of_work_factory)
    with effective_uow() as uow:
        return uow.repositories.entities.list(kind)
