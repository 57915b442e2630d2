"""Translate domain entities into remote API request payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .schema import (
    ConsumerGroupRequest,
    ConsumerRequest,
    ControlPlaneRequest,
    EntityRef,
    RouteRequest,
    ServiceRequest,
)

if TYPE_CHECKING:
    from planesync.domain.model import ConsumerGroup, ControlPlane, Route, Service
    from planesync.domain.model.kinds import Consumer


def control_plane_request(entity: ControlPlane) -> ControlPlaneRequest:
    spec = entity.spec
    return ControlPlaneRequest(
        name=spec.name,
        description=spec.description,
        cluster_type=spec.cluster_type,
        auth_type=spec.auth_type,
        labels=dict(spec.labels),
    )


def service_request(entity: Service) -> ServiceRequest:
    spec = entity.spec
    return ServiceRequest(
        name=spec.name or entity.metadata.name,
        host=spec.host,
        port=spec.port,
        protocol=spec.protocol,
        path=spec.path,
        retries=spec.retries,
        connect_timeout=spec.connect_timeout,
        read_timeout=spec.read_timeout,
        write_timeout=spec.write_timeout,
        enabled=spec.enabled,
        tags=list(spec.tags),
    )


def route_request(entity: Route, *, service_id: str) -> RouteRequest:
    spec = entity.spec
    return RouteRequest(
        name=spec.name or entity.metadata.name,
        paths=list(spec.paths) or None,
        methods=list(spec.methods) or None,
        hosts=list(spec.hosts) or None,
        protocols=list(spec.protocols),
        strip_path=spec.strip_path,
        preserve_host=spec.preserve_host,
        tags=list(spec.tags),
        service=EntityRef(id=service_id),
    )


def consumer_request(entity: Consumer) -> ConsumerRequest:
    spec = entity.spec
    return ConsumerRequest(
        username=spec.username,
        custom_id=spec.custom_id,
        tags=list(spec.tags),
    )


def consumer_group_request(entity: ConsumerGroup) -> ConsumerGroupRequest:
    spec = entity.spec
    return ConsumerGroupRequest(name=spec.name, tags=list(spec.tags))
