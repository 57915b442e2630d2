"""Errors raised by the synchronization core.

Adapter failures never leave the core raw: they are rewrapped into
``RemoteOperationFailedError`` with the original exception chained as
``__cause__`` so callers can still classify it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from planesync.domain.model import Operation, SyncedEntity


class SyncError(RuntimeError):
    """Base class for synchronization core failures."""


class UnsupportedKindError(SyncError, TypeError):
    """Raised when no adapter is bound to an entity's kind. Always a defect."""

    def __init__(self, entity: object) -> None:
        kind = getattr(entity, "kind", None)
        self.kind = kind
        label = kind if kind is not None else type(entity).__name__
        super().__init__(f"unsupported entity kind {label}")


class MissingRemoteIdentityError(SyncError, ValueError):
    """Raised when update/delete is requested for an entity that was never created."""

    def __init__(self, op: Operation, entity: SyncedEntity) -> None:
        self.op = op
        self.entity_kind = str(entity.kind)
        self.entity_key = str(entity.key)
        super().__init__(
            f"can't {op} {self.entity_kind} {self.entity_key} "
            "when it does not have a remote id"
        )


class RemoteOperationFailedError(SyncError):
    """Uniform wrapper around any adapter-reported failure."""

    def __init__(
        self,
        *,
        op: Operation,
        entity_kind: str,
        entity_key: str,
        remote_id: str | None,
        cause: BaseException,
    ) -> None:
        self.op = op
        self.entity_kind = entity_kind
        self.entity_key = entity_key
        self.remote_id = remote_id
        self.cause = cause
        super().__init__(self._format())

    @classmethod
    def from_failure(
        cls,
        op: Operation,
        entity: SyncedEntity,
        cause: BaseException,
    ) -> RemoteOperationFailedError:
        return cls(
            op=op,
            entity_kind=str(entity.kind),
            entity_key=str(entity.key),
            remote_id=entity.remote_id or None,
            cause=cause,
        )

    def _format(self) -> str:
        if self.remote_id is None:
            return f"failed to {self.op} {self.entity_kind} {self.entity_key}: {self.cause}"
        return (
            f"failed to {self.op} {self.entity_kind} {self.entity_key} "
            f"(remote id {self.remote_id!r}): {self.cause}"
        )


__all__ = [
    "MissingRemoteIdentityError",
    "RemoteOperationFailedError",
    "SyncError",
    "UnsupportedKindError",
]
