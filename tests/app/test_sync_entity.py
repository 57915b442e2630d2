from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from planesync.app import (
    FINALIZER,
    EntityNotFoundError,
    InvalidDocumentError,
    SyncEntityResult,
    UnresolvedReferenceError,
    declare_entity,
    list_entities,
    request_deletion,
    sync_entity,
)
from planesync.domain.model import (
    CONTROL_PLANE_REF_VALID_CONDITION_TYPE,
    PROGRAMMED_CONDITION_TYPE,
    PROGRAMMED_REASON_API_OP_FAILED,
    ConditionStatus,
    EntityKind,
    ObjectKey,
    Operation,
)
from planesync.domain.sync import Dispatcher, RemoteOperationFailedError
from tests.support.entities import (
    FakeClock,
    RecordingAdapter,
    adapters_for,
    make_control_plane,
    make_service,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from planesync.adapters.sqlalchemy.unit_of_work import SqlAlchemyEntityUnitOfWork
    from planesync.domain.model import AnyEntity

    UowFactory = Callable[[], SqlAlchemyEntityUnitOfWork]

PERIOD = timedelta(minutes=1)
CP_KEY = ObjectKey("default", "cp")
SVC_KEY = ObjectKey("default", "svc")


def _store(factory: UowFactory, *entities: AnyEntity) -> None:
    with factory() as uow:
        for entity in entities:
            uow.repositories.entities.add(entity)
        uow.commit()


def _load(factory: UowFactory, kind: EntityKind, key: ObjectKey) -> AnyEntity | None:
    with factory() as uow:
        return uow.repositories.entities.get(kind, key)


def _sync(
    factory: UowFactory,
    adapter: RecordingAdapter,
    clock: FakeClock,
    kind: EntityKind,
    key: ObjectKey,
) -> SyncEntityResult:
    return sync_entity(
        kind,
        key,
        dispatcher=Dispatcher(adapters_for(adapter), clock=clock),
        unit_of_work_factory=factory,
        sync_period=PERIOD,
        clock=clock,
    )


def test_first_sync_creates_and_marks_programmed(sqlite_unit_of_work: UowFactory) -> None:
    _store(sqlite_unit_of_work, make_control_plane())
    adapter = RecordingAdapter(create_id="cp-1")
    clock = FakeClock()

    result = _sync(sqlite_unit_of_work, adapter, clock, EntityKind.CONTROL_PLANE, CP_KEY)

    assert result.operation is Operation.CREATE
    assert result.remote_id == "cp-1"
    stored = _load(sqlite_unit_of_work, EntityKind.CONTROL_PLANE, CP_KEY)
    assert stored is not None
    assert stored.remote_id == "cp-1"
    assert FINALIZER in stored.metadata.finalizers
    condition = stored.conditions.get(PROGRAMMED_CONDITION_TYPE)
    assert condition is not None
    assert condition.is_true
    assert condition.last_transition_time == clock.now


def test_sync_within_period_is_skipped(sqlite_unit_of_work: UowFactory) -> None:
    _store(sqlite_unit_of_work, make_control_plane())
    adapter = RecordingAdapter(create_id="cp-1")
    clock = FakeClock()
    _sync(sqlite_unit_of_work, adapter, clock, EntityKind.CONTROL_PLANE, CP_KEY)

    clock.advance(timedelta(seconds=20))
    result = _sync(sqlite_unit_of_work, adapter, clock, EntityKind.CONTROL_PLANE, CP_KEY)

    assert result.operation is Operation.UPDATE
    assert result.skipped
    assert result.requeue_after == timedelta(seconds=40)
    assert adapter.ops == ["create"]


def test_sync_after_period_updates(sqlite_unit_of_work: UowFactory) -> None:
    _store(sqlite_unit_of_work, make_control_plane())
    adapter = RecordingAdapter(create_id="cp-1")
    clock = FakeClock()
    _sync(sqlite_unit_of_work, adapter, clock, EntityKind.CONTROL_PLANE, CP_KEY)

    clock.advance(PERIOD * 2)
    result = _sync(sqlite_unit_of_work, adapter, clock, EntityKind.CONTROL_PLANE, CP_KEY)

    assert not result.skipped
    assert adapter.ops == ["create", "update"]


def test_child_with_unprogrammed_parent_is_not_dispatched(
    sqlite_unit_of_work: UowFactory,
) -> None:
    _store(sqlite_unit_of_work, make_control_plane(), make_service())
    adapter = RecordingAdapter()

    with pytest.raises(UnresolvedReferenceError):
        _sync(sqlite_unit_of_work, adapter, FakeClock(), EntityKind.SERVICE, SVC_KEY)

    assert adapter.calls == []
    stored = _load(sqlite_unit_of_work, EntityKind.SERVICE, SVC_KEY)
    assert stored is not None
    condition = stored.conditions.get(CONTROL_PLANE_REF_VALID_CONDITION_TYPE)
    assert condition is not None
    assert condition.status is ConditionStatus.FALSE


def test_child_inherits_parent_identity(sqlite_unit_of_work: UowFactory) -> None:
    _store(sqlite_unit_of_work, make_control_plane(), make_service())
    clock = FakeClock()
    cp_adapter = RecordingAdapter(create_id="cp-1")
    svc_adapter = RecordingAdapter(create_id="svc-1")
    _sync(sqlite_unit_of_work, cp_adapter, clock, EntityKind.CONTROL_PLANE, CP_KEY)

    _sync(sqlite_unit_of_work, svc_adapter, clock, EntityKind.SERVICE, SVC_KEY)

    stored = _load(sqlite_unit_of_work, EntityKind.SERVICE, SVC_KEY)
    assert stored is not None
    assert stored.remote_id == "svc-1"
    assert stored.status.control_plane_id == "cp-1"
    ref = stored.conditions.get(CONTROL_PLANE_REF_VALID_CONDITION_TYPE)
    assert ref is not None
    assert ref.is_true


def test_remote_failure_is_persisted_then_raised(sqlite_unit_of_work: UowFactory) -> None:
    _store(sqlite_unit_of_work, make_control_plane(remote_id="cp-1"))
    adapter = RecordingAdapter(error=RuntimeError("503 from upstream"))

    with pytest.raises(RemoteOperationFailedError):
        _sync(sqlite_unit_of_work, adapter, FakeClock(), EntityKind.CONTROL_PLANE, CP_KEY)

    stored = _load(sqlite_unit_of_work, EntityKind.CONTROL_PLANE, CP_KEY)
    assert stored is not None
    condition = stored.conditions.get(PROGRAMMED_CONDITION_TYPE)
    assert condition is not None
    assert condition.status is ConditionStatus.FALSE
    assert condition.reason == PROGRAMMED_REASON_API_OP_FAILED
    assert "503 from upstream" in condition.message


def test_deletion_request_removes_remote_and_local_copy(sqlite_unit_of_work: UowFactory) -> None:
    _store(sqlite_unit_of_work, make_control_plane(remote_id="cp-1"))
    request_deletion(EntityKind.CONTROL_PLANE, CP_KEY, unit_of_work_factory=sqlite_unit_of_work)
    adapter = RecordingAdapter()

    result = _sync(sqlite_unit_of_work, adapter, FakeClock(), EntityKind.CONTROL_PLANE, CP_KEY)

    assert result.removed
    assert adapter.calls == [("delete", "default/cp", "cp-1", None)]
    assert _load(sqlite_unit_of_work, EntityKind.CONTROL_PLANE, CP_KEY) is None


def test_deletion_of_never_created_entity_skips_remote(sqlite_unit_of_work: UowFactory) -> None:
    entity = make_control_plane()
    entity.metadata.deletion_requested = True
    _store(sqlite_unit_of_work, entity)
    adapter = RecordingAdapter()

    result = _sync(sqlite_unit_of_work, adapter, FakeClock(), EntityKind.CONTROL_PLANE, CP_KEY)

    assert result.removed
    assert adapter.calls == []


def test_unknown_entity_raises(sqlite_unit_of_work: UowFactory) -> None:
    with pytest.raises(EntityNotFoundError):
        _sync(sqlite_unit_of_work, RecordingAdapter(), FakeClock(), EntityKind.ROUTE, SVC_KEY)


def test_declare_entity_bumps_generation_on_spec_change(sqlite_unit_of_work: UowFactory) -> None:
    document = {
        "kind": "Service",
        "metadata": {"name": "svc", "namespace": "default"},
        "spec": {"control_plane_ref": "cp", "host": "a.example.com"},
    }

    first = declare_entity(document, unit_of_work_factory=sqlite_unit_of_work)
    again = declare_entity(document, unit_of_work_factory=sqlite_unit_of_work)
    changed = declare_entity(
        {**document, "spec": {"control_plane_ref": "cp", "host": "b.example.com"}},
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert first.generation == 1
    assert again.generation == 1
    assert changed.generation == 2
    listed = list_entities(EntityKind.SERVICE, unit_of_work_factory=sqlite_unit_of_work)
    assert [entity.generation for entity in listed] == [2]


@pytest.mark.parametrize(
    "document",
    [
        {"kind": "Nope", "spec": {}},
        {"kind": "Service", "metadata": {"name": "svc"}, "spec": {"port": "not-a-port"}},
        {"kind": "Route", "metadata": {"name": "r"}},
    ],
)
def test_declare_entity_rejects_invalid_documents(
    sqlite_unit_of_work: UowFactory,
    document: dict[str, object],
) -> None:
    with pytest.raises(InvalidDocumentError):
        declare_entity(document, unit_of_work_factory=sqlite_unit_of_work)
