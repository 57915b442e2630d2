from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from planesync.domain.model import Operation
from planesync.domain.sync import OperationRecord, Outcome, track_operation
from tests.support.entities import FakeClock, make_service


class _StepTimer:
    def __init__(self, *readings: float) -> None:
        self._readings = list(readings)

    def __call__(self) -> float:
        return self._readings.pop(0)


def test_successful_block_emits_one_info_record(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="planesync.domain.sync.telemetry")
    entity = make_service(remote_id="svc-1")

    clock = FakeClock()
    timer = _StepTimer(10.0, 10.25)

    with track_operation(Operation.UPDATE, entity, clock=clock, timer=timer) as record:
        pass

    assert record.outcome is Outcome.SUCCEEDED
    assert record.started_at == clock.now
    assert record.duration == timedelta(milliseconds=250)
    messages = [r for r in caplog.records if r.name == "planesync.domain.sync.telemetry"]
    assert len(messages) == 1
    log_record = messages[0]
    assert log_record.levelno == logging.INFO
    assert "op=update" in log_record.getMessage()
    assert "key=default/svc" in log_record.getMessage()
    assert log_record.__dict__["sync_op"] == "update"
    assert log_record.__dict__["entity_kind"] == "Service"
    assert log_record.__dict__["remote_id"] == "svc-1"
    assert log_record.__dict__["outcome"] == "succeeded"
    assert log_record.__dict__["duration_seconds"] == pytest.approx(0.25)


def test_duration_ignores_wall_clock_steps() -> None:
    entity = make_service(remote_id="svc-1")
    clock = FakeClock()

    with track_operation(
        Operation.UPDATE, entity, clock=clock, timer=_StepTimer(5.0, 5.5)
    ) as record:
        clock.advance(timedelta(hours=-1))

    assert record.duration == timedelta(milliseconds=500)


def test_failing_block_emits_failed_record_and_reraises() -> None:
    records: list[OperationRecord] = []
    entity = make_service()

    with (
        pytest.raises(RuntimeError, match="nope"),
        track_operation(Operation.CREATE, entity, clock=FakeClock(), hooks=(records.append,)),
    ):
        raise RuntimeError("nope")

    assert len(records) == 1
    assert records[0].outcome is Outcome.FAILED


def test_record_reports_identity_assigned_inside_block() -> None:
    records: list[OperationRecord] = []
    entity = make_service()

    with track_operation(Operation.CREATE, entity, clock=FakeClock(), hooks=(records.append,)):
        entity.set_remote_id("new-id")

    assert records[0].remote_id == "new-id"


def test_block_can_mark_outcome_skipped() -> None:
    records: list[OperationRecord] = []

    with track_operation(
        Operation.UPDATE,
        make_service(remote_id="x"),
        clock=FakeClock(),
        hooks=(records.append,),
    ) as record:
        record.outcome = Outcome.SKIPPED

    assert records[0].outcome is Outcome.SKIPPED


def test_failing_hook_is_logged_and_later_hooks_still_run(
    caplog: pytest.LogCaptureFixture,
) -> None:
    seen: list[OperationRecord] = []

    def broken(_record: OperationRecord) -> None:
        raise ValueError("hook broke")

    with track_operation(
        Operation.DELETE,
        make_service(remote_id="x"),
        clock=FakeClock(),
        hooks=(broken, seen.append),
    ):
        pass

    assert len(seen) == 1
    assert any("operation hook" in r.getMessage() for r in caplog.records)
