"""Reusable fakes and builders for synchronization tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from planesync.domain.model import (
    PROGRAMMED_CONDITION_TYPE,
    PROGRAMMED_REASON_PROGRAMMED,
    ConditionStatus,
    Consumer,
    ConsumerGroup,
    ConsumerGroupSpec,
    ConsumerSpec,
    ControlPlane,
    ControlPlaneSpec,
    EntityKind,
    EntityStatus,
    ObjectMeta,
    Route,
    RouteSpec,
    Service,
    ServiceSpec,
)
from planesync.domain.ports.remote import AdapterSet

if TYPE_CHECKING:
    from planesync.domain.model import RemoteEntity

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class RecordingAdapter:
    """Adapter double that records calls and optionally fails every operation."""

    def __init__(self, *, create_id: str = "remote-1", error: Exception | None = None) -> None:
        self.create_id = create_id
        self.error = error
        self.calls: list[tuple[str, str, str, float | None]] = []

    def create(self, entity: RemoteEntity, *, timeout: float | None = None) -> None:
        self._record("create", entity, timeout)
        entity.set_remote_id(self.create_id)

    def update(self, entity: RemoteEntity, *, timeout: float | None = None) -> None:
        self._record("update", entity, timeout)

    def delete(self, entity: RemoteEntity, *, timeout: float | None = None) -> None:
        self._record("delete", entity, timeout)

    def _record(self, op: str, entity: RemoteEntity, timeout: float | None) -> None:
        self.calls.append((op, str(entity.key), entity.remote_id, timeout))
        if self.error is not None:
            raise self.error

    @property
    def ops(self) -> list[str]:
        return [call[0] for call in self.calls]


def adapters_for(adapter: RecordingAdapter, *kinds: EntityKind) -> AdapterSet:
    bound = kinds or tuple(EntityKind)
    return AdapterSet({kind: adapter for kind in bound})


def make_control_plane(
    name: str = "cp",
    *,
    namespace: str = "default",
    remote_id: str = "",
) -> ControlPlane:
    return ControlPlane(
        metadata=ObjectMeta(name=name, namespace=namespace),
        status=EntityStatus(remote_id=remote_id),
        spec=ControlPlaneSpec(name=name, labels={"team": "edge"}),
    )


def make_service(
    name: str = "svc",
    *,
    namespace: str = "default",
    control_plane_ref: str = "cp",
    remote_id: str = "",
    control_plane_id: str = "",
) -> Service:
    return Service(
        metadata=ObjectMeta(name=name, namespace=namespace),
        status=EntityStatus(remote_id=remote_id, control_plane_id=control_plane_id),
        spec=ServiceSpec(control_plane_ref=control_plane_ref, host="example.com", port=8080),
    )


def make_route(
    name: str = "route",
    *,
    namespace: str = "default",
    service_ref: str = "svc",
    remote_id: str = "",
    control_plane_id: str = "",
    service_id: str = "",
) -> Route:
    return Route(
        metadata=ObjectMeta(name=name, namespace=namespace),
        status=EntityStatus(
            remote_id=remote_id,
            control_plane_id=control_plane_id,
            service_id=service_id,
        ),
        spec=RouteSpec(service_ref=service_ref, paths=["/api"]),
    )


def make_consumer(
    name: str = "alice",
    *,
    namespace: str = "default",
    control_plane_ref: str = "cp",
    remote_id: str = "",
    control_plane_id: str = "",
) -> Consumer:
    return Consumer(
        metadata=ObjectMeta(name=name, namespace=namespace),
        status=EntityStatus(remote_id=remote_id, control_plane_id=control_plane_id),
        spec=ConsumerSpec(control_plane_ref=control_plane_ref, username=name),
    )


def make_consumer_group(
    name: str = "gold",
    *,
    namespace: str = "default",
    control_plane_ref: str = "cp",
    remote_id: str = "",
    control_plane_id: str = "",
) -> ConsumerGroup:
    return ConsumerGroup(
        metadata=ObjectMeta(name=name, namespace=namespace),
        status=EntityStatus(remote_id=remote_id, control_plane_id=control_plane_id),
        spec=ConsumerGroupSpec(control_plane_ref=control_plane_ref, name=name, tags=["tier"]),
    )


def mark_fresh(entity: RemoteEntity, *, at: datetime = T0, generation: int | None = None) -> None:
    """Stamp a successful ``Programmed`` condition on ``entity``."""

    entity.conditions.set(
        PROGRAMMED_CONDITION_TYPE,
        ConditionStatus.TRUE,
        PROGRAMMED_REASON_PROGRAMMED,
        observed_generation=entity.generation if generation is None else generation,
        now=at,
    )
