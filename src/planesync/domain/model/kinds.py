"""Concrete entity kinds and their desired-state specs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Final

from planesync.domain.model.entity import RemoteEntity
from planesync.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(kw_only=True)
class ControlPlaneSpec:
    name: str
    description: str | None = None
    cluster_type: str = "CLUSTER_TYPE_CONTROL_PLANE"
    auth_type: str = "pinned_client_certs"
    labels: dict[str, str] = field(default_factory=dict[str, str])


@dataclass(kw_only=True)
class ServiceSpec:
    control_plane_ref: str
    host: str
    name: str | None = None
    port: int = 80
    protocol: str = "http"
    path: str | None = None
    retries: int | None = None
    connect_timeout: int | None = None
    read_timeout: int | None = None
    write_timeout: int | None = None
    enabled: bool = True
    tags: list[str] = field(default_factory=list[str])


@dataclass(kw_only=True)
class RouteSpec:
    service_ref: str
    name: str | None = None
    paths: list[str] = field(default_factory=list[str])
    methods: list[str] = field(default_factory=list[str])
    hosts: list[str] = field(default_factory=list[str])
    protocols: list[str] = field(default_factory=lambda: ["http", "https"])
    strip_path: bool = True
    preserve_host: bool = False
    tags: list[str] = field(default_factory=list[str])


@dataclass(kw_only=True)
class ConsumerSpec:
    control_plane_ref: str
    username: str | None = None
    custom_id: str | None = None
    tags: list[str] = field(default_factory=list[str])


@dataclass(kw_only=True)
class ConsumerGroupSpec:
    control_plane_ref: str
    name: str
    tags: list[str] = field(default_factory=list[str])


@dataclass(eq=False, kw_only=True)
class ControlPlane(RemoteEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CONTROL_PLANE

    spec: ControlPlaneSpec


@dataclass(eq=False, kw_only=True)
class Service(RemoteEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.SERVICE

    spec: ServiceSpec


@dataclass(eq=False, kw_only=True)
class Route(RemoteEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.ROUTE

    spec: RouteSpec


@dataclass(eq=False, kw_only=True)
class Consumer(RemoteEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CONSUMER

    spec: ConsumerSpec


@dataclass(eq=False, kw_only=True)
class ConsumerGroup(RemoteEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CONSUMER_GROUP

    spec: ConsumerGroupSpec


type AnyEntity = ControlPlane | Service | Route | Consumer | ConsumerGroup

ENTITY_CLASS_BY_KIND: Final[Mapping[EntityKind, type[AnyEntity]]] = {
    EntityKind.CONTROL_PLANE: ControlPlane,
    EntityKind.SERVICE: Service,
    EntityKind.ROUTE: Route,
    EntityKind.CONSUMER: Consumer,
    EntityKind.CONSUMER_GROUP: ConsumerGroup,
}

SPEC_CLASS_BY_KIND: Final[Mapping[EntityKind, type]] = {
    EntityKind.CONTROL_PLANE: ControlPlaneSpec,
    EntityKind.SERVICE: ServiceSpec,
    EntityKind.ROUTE: RouteSpec,
    EntityKind.CONSUMER: ConsumerSpec,
    EntityKind.CONSUMER_GROUP: ConsumerGroupSpec,
}
