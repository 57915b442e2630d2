from __future__ import annotations

from datetime import timedelta

import pytest

from planesync.domain.model import (
    PROGRAMMED_CONDITION_TYPE,
    PROGRAMMED_REASON_API_OP_FAILED,
    ConditionStatus,
)
from planesync.domain.sync import check_freshness
from tests.support.entities import T0, make_service, mark_fresh

PERIOD = timedelta(minutes=1)


def test_entity_without_programmed_condition_is_stale() -> None:
    freshness = check_freshness(make_service(remote_id="s"), PERIOD, now=T0)

    assert not freshness.fresh
    assert freshness.requeue_after == timedelta(0)
    assert freshness.elapsed is None


def test_fresh_entity_reports_remaining_period() -> None:
    entity = make_service(remote_id="s")
    mark_fresh(entity, at=T0)

    freshness = check_freshness(entity, PERIOD, now=T0 + timedelta(seconds=20))

    assert freshness.fresh
    assert freshness.elapsed == timedelta(seconds=20)
    assert freshness.requeue_after == timedelta(seconds=40)


def test_requeue_reaches_zero_exactly_at_sync_period() -> None:
    entity = make_service(remote_id="s")
    mark_fresh(entity, at=T0)

    at_period = check_freshness(entity, PERIOD, now=T0 + PERIOD)
    past_period = check_freshness(entity, PERIOD, now=T0 + PERIOD + timedelta(microseconds=1))

    assert at_period.fresh
    assert at_period.requeue_after == timedelta(0)
    assert not past_period.fresh


def test_condition_from_older_generation_is_stale() -> None:
    entity = make_service(remote_id="s")
    mark_fresh(entity, at=T0, generation=entity.generation - 1)

    assert not check_freshness(entity, PERIOD, now=T0).fresh


@pytest.mark.parametrize(
    ("status", "reason"),
    [
        (ConditionStatus.FALSE, PROGRAMMED_REASON_API_OP_FAILED),
        (ConditionStatus.UNKNOWN, "Pending"),
        (ConditionStatus.TRUE, "SomethingElse"),
    ],
)
def test_condition_must_be_true_with_programmed_reason(
    status: ConditionStatus,
    reason: str,
) -> None:
    entity = make_service(remote_id="s")
    entity.conditions.set(
        PROGRAMMED_CONDITION_TYPE,
        status,
        reason,
        observed_generation=entity.generation,
        now=T0,
    )

    assert not check_freshness(entity, PERIOD, now=T0).fresh


def test_transition_in_the_future_counts_as_just_now() -> None:
    entity = make_service(remote_id="s")
    mark_fresh(entity, at=T0 + timedelta(hours=1))

    freshness = check_freshness(entity, PERIOD, now=T0)

    assert freshness.fresh
    assert freshness.elapsed == timedelta(0)
    assert freshness.requeue_after == PERIOD


def test_zero_sync_period_is_fresh_only_at_transition_instant() -> None:
    entity = make_service(remote_id="s")
    mark_fresh(entity, at=T0)

    assert check_freshness(entity, timedelta(0), now=T0).fresh
    assert not check_freshness(entity, timedelta(0), now=T0 + timedelta(seconds=1)).fresh


def test_naive_now_is_treated_as_utc() -> None:
    entity = make_service(remote_id="s")
    mark_fresh(entity, at=T0)

    freshness = check_freshness(entity, PERIOD, now=T0.replace(tzinfo=None) + timedelta(seconds=5))

    assert freshness.fresh
    assert freshness.requeue_after == timedelta(seconds=55)
