"""Status conditions and the per-entity condition store.

A condition is a typed, timestamped assertion about an entity. Each entity holds
at most one condition per type; ``last_transition_time`` only moves when the
status flips, so reason or message edits keep the original timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from planesync.domain.clock import ensure_aware, utcnow
from planesync.domain.model.enums import ConditionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import datetime

    from planesync.domain.clock import Clock
    from planesync.domain.model.entity import SyncedEntity

# Programmed: whether the entity has been programmed in the remote control plane.
PROGRAMMED_CONDITION_TYPE: Final[str] = "Programmed"
PROGRAMMED_REASON_PROGRAMMED: Final[str] = "Programmed"
PROGRAMMED_REASON_API_OP_FAILED: Final[str] = "KonnectAPIOpFailed"

# APIAuthResolvedRef: whether the API auth configuration reference resolves.
API_AUTH_RESOLVED_REF_CONDITION_TYPE: Final[str] = "APIAuthResolvedRef"
API_AUTH_RESOLVED_REF_REASON_RESOLVED: Final[str] = "ResolvedRef"
API_AUTH_RESOLVED_REF_REASON_NOT_FOUND: Final[str] = "RefNotFound"
API_AUTH_RESOLVED_REF_REASON_INVALID: Final[str] = "RefInvalid"

# APIAuthValid: whether the referenced API auth configuration is valid.
API_AUTH_VALID_CONDITION_TYPE: Final[str] = "APIAuthValid"
API_AUTH_REASON_VALID: Final[str] = "Valid"
API_AUTH_REASON_INVALID: Final[str] = "Invalid"

# ControlPlaneRefValid: whether the control plane reference points to a programmed
# control plane.
CONTROL_PLANE_REF_VALID_CONDITION_TYPE: Final[str] = "ControlPlaneRefValid"
CONTROL_PLANE_REF_REASON_VALID: Final[str] = "Valid"
CONTROL_PLANE_REF_REASON_INVALID: Final[str] = "Invalid"

# KongServiceRefValid: whether the service reference points to a programmed service.
SERVICE_REF_VALID_CONDITION_TYPE: Final[str] = "KongServiceRefValid"
SERVICE_REF_REASON_VALID: Final[str] = "Valid"
SERVICE_REF_REASON_INVALID: Final[str] = "Invalid"


@dataclass(frozen=True, slots=True, kw_only=True)
class Condition:
    type: str
    status: ConditionStatus
    reason: str
    message: str = ""
    observed_generation: int = 0
    last_transition_time: datetime

    @property
    def is_true(self) -> bool:
        return self.status is ConditionStatus.TRUE


class ConditionSet:
    """Conditions keyed by type, kept in insertion order."""

    def __init__(self, conditions: Iterable[Condition] = ()) -> None:
        self._by_type: dict[str, Condition] = {}
        for condition in conditions:
            self._by_type[condition.type] = condition

    def __iter__(self) -> Iterator[Condition]:
        return iter(tuple(self._by_type.values()))

    def __len__(self) -> int:
        return len(self._by_type)

    def __contains__(self, condition_type: object) -> bool:
        return condition_type in self._by_type

    def __repr__(self) -> str:
        return f"ConditionSet({list(self._by_type.values())!r})"

    def get(self, condition_type: str) -> Condition | None:
        return self._by_type.get(condition_type)

    def set(
        self,
        condition_type: str,
        status: ConditionStatus,
        reason: str,
        message: str = "",
        *,
        observed_generation: int,
        now: datetime,
    ) -> Condition:
        """Insert or replace the condition of ``condition_type``."""

        existing = self._by_type.get(condition_type)
        if existing is not None and existing.status == status:
            transition = existing.last_transition_time
        else:
            transition = ensure_aware(now)
        condition = Condition(
            type=condition_type,
            status=status,
            reason=reason,
            message=message,
            observed_generation=observed_generation,
            last_transition_time=transition,
        )
        self._by_type[condition_type] = condition
        return condition

    def remove(self, condition_type: str) -> bool:
        return self._by_type.pop(condition_type, None) is not None


def mark_programmed(entity: SyncedEntity, *, clock: Clock = utcnow) -> Condition:
    """Record a successful remote operation on ``entity``."""

    return entity.conditions.set(
        PROGRAMMED_CONDITION_TYPE,
        ConditionStatus.TRUE,
        PROGRAMMED_REASON_PROGRAMMED,
        observed_generation=entity.generation,
        now=clock(),
    )


def mark_operation_failed(
    entity: SyncedEntity,
    error: BaseException,
    *,
    clock: Clock = utcnow,
) -> Condition:
    """Record a failed remote operation on ``entity``."""

    return entity.conditions.set(
        PROGRAMMED_CONDITION_TYPE,
        ConditionStatus.FALSE,
        PROGRAMMED_REASON_API_OP_FAILED,
        str(error),
        observed_generation=entity.generation,
        now=clock(),
    )
