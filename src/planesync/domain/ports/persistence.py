"""Ports for persisting entities and their status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from planesync.domain.model import AnyEntity, EntityKind, ObjectKey


@runtime_checkable
class EntityRepository(Protocol):
    """Persistence contract for declared entities and their status."""

    def add(self, entity: AnyEntity) -> None:
        """Insert ``entity`` or overwrite the stored copy with the same kind and key."""
        ...

    def save(self, entity: AnyEntity) -> None:
        """Write back metadata and status of an entity that is already stored."""
        ...

    def get(self, kind: EntityKind, key: ObjectKey) -> AnyEntity | None: ...

    def list(self, kind: EntityKind | None = None) -> list[AnyEntity]: ...

    def remove(self, kind: EntityKind, key: ObjectKey) -> bool: ...


__all__ = ["EntityRepository"]
