"""Public domain model surface."""

from __future__ import annotations

from planesync.domain.model.conditions import (
    API_AUTH_REASON_INVALID,
    API_AUTH_REASON_VALID,
    API_AUTH_RESOLVED_REF_CONDITION_TYPE,
    API_AUTH_RESOLVED_REF_REASON_INVALID,
    API_AUTH_RESOLVED_REF_REASON_NOT_FOUND,
    API_AUTH_RESOLVED_REF_REASON_RESOLVED,
    API_AUTH_VALID_CONDITION_TYPE,
    CONTROL_PLANE_REF_REASON_INVALID,
    CONTROL_PLANE_REF_REASON_VALID,
    CONTROL_PLANE_REF_VALID_CONDITION_TYPE,
    PROGRAMMED_CONDITION_TYPE,
    PROGRAMMED_REASON_API_OP_FAILED,
    PROGRAMMED_REASON_PROGRAMMED,
    SERVICE_REF_REASON_INVALID,
    SERVICE_REF_REASON_VALID,
    SERVICE_REF_VALID_CONDITION_TYPE,
    Condition,
    ConditionSet,
    mark_operation_failed,
    mark_programmed,
)
from planesync.domain.model.entity import EntityStatus, RemoteEntity, SyncedEntity
from planesync.domain.model.enums import ConditionStatus, EntityKind, Operation
from planesync.domain.model.kinds import (
    ENTITY_CLASS_BY_KIND,
    SPEC_CLASS_BY_KIND,
    AnyEntity,
    Consumer,
    ConsumerGroup,
    ConsumerGroupSpec,
    ConsumerSpec,
    ControlPlane,
    ControlPlaneSpec,
    Route,
    RouteSpec,
    Service,
    ServiceSpec,
)
from planesync.domain.model.metadata import (
    ObjectKey,
    ObjectMeta,
    OwnerReference,
    ensure_finalizer,
    ensure_metadata_updated,
    remove_finalizer,
)

__all__ = [  # noqa: RUF022
    # conditions
    "API_AUTH_REASON_INVALID",
    "API_AUTH_REASON_VALID",
    "API_AUTH_RESOLVED_REF_CONDITION_TYPE",
    "API_AUTH_RESOLVED_REF_REASON_INVALID",
    "API_AUTH_RESOLVED_REF_REASON_NOT_FOUND",
    "API_AUTH_RESOLVED_REF_REASON_RESOLVED",
    "API_AUTH_VALID_CONDITION_TYPE",
    "CONTROL_PLANE_REF_REASON_INVALID",
    "CONTROL_PLANE_REF_REASON_VALID",
    "CONTROL_PLANE_REF_VALID_CONDITION_TYPE",
    "PROGRAMMED_CONDITION_TYPE",
    "PROGRAMMED_REASON_API_OP_FAILED",
    "PROGRAMMED_REASON_PROGRAMMED",
    "SERVICE_REF_REASON_INVALID",
    "SERVICE_REF_REASON_VALID",
    "SERVICE_REF_VALID_CONDITION_TYPE",
    "Condition",
    "ConditionSet",
    "mark_operation_failed",
    "mark_programmed",
    # entities
    "AnyEntity",
    "ENTITY_CLASS_BY_KIND",
    "SPEC_CLASS_BY_KIND",
    "EntityStatus",
    "RemoteEntity",
    "SyncedEntity",
    "Consumer",
    "ConsumerGroup",
    "ConsumerGroupSpec",
    "ConsumerSpec",
    "ControlPlane",
    "ControlPlaneSpec",
    "Route",
    "RouteSpec",
    "Service",
    "ServiceSpec",
    # enums
    "ConditionStatus",
    "EntityKind",
    "Operation",
    # metadata
    "ObjectKey",
    "ObjectMeta",
    "OwnerReference",
    "ensure_finalizer",
    "ensure_metadata_updated",
    "remove_finalizer",
]
