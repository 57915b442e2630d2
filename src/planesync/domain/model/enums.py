"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Closed set of entity kinds mirrored to the remote control plane."""

    CONTROL_PLANE = "ControlPlane"
    SERVICE = "Service"
    ROUTE = "Route"
    CONSUMER = "Consumer"
    CONSUMER_GROUP = "ConsumerGroup"


class ConditionStatus(StrEnum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class Operation(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
