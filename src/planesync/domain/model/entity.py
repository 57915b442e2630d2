"""
Base building blocks:
local identity, remote identity and status shared by every entity kind.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from planesync.domain.model.conditions import ConditionSet

if TYPE_CHECKING:
    from planesync.domain.model.enums import EntityKind
    from planesync.domain.model.metadata import ObjectKey, ObjectMeta


@runtime_checkable
class SyncedEntity(Protocol):
    """Capabilities the synchronization core needs from an entity."""

    @property
    def kind(self) -> EntityKind: ...

    @property
    def key(self) -> ObjectKey: ...

    @property
    def generation(self) -> int: ...

    @property
    def remote_id(self) -> str: ...

    def set_remote_id(self, remote_id: str) -> None: ...

    @property
    def conditions(self) -> ConditionSet: ...


@dataclass(eq=False, kw_only=True)
class EntityStatus:
    """Remote bookkeeping persisted alongside an entity."""

    remote_id: str = ""
    server_url: str = ""
    # remote ids of the parents this entity lives under
    control_plane_id: str = ""
    service_id: str = ""
    conditions: ConditionSet = field(default_factory=ConditionSet)


@dataclass(eq=False, kw_only=True)
class RemoteEntity(ABC):
    """Locally declared configuration object mirrored to the remote control plane."""

    metadata: ObjectMeta
    status: EntityStatus = field(default_factory=EntityStatus)

    # class-level discriminator; subclasses must override
    ENTITY_KIND: ClassVar[EntityKind]

    @property
    def kind(self) -> EntityKind:
        return self.ENTITY_KIND

    @property
    def key(self) -> ObjectKey:
        return self.metadata.key

    @property
    def generation(self) -> int:
        return self.metadata.generation

    @property
    def remote_id(self) -> str:
        return self.status.remote_id

    def set_remote_id(self, remote_id: str) -> None:
        self.status.remote_id = remote_id

    @property
    def conditions(self) -> ConditionSet:
        return self.status.conditions

    def bump_generation(self) -> int:
        """Record a spec change."""
        self.metadata.generation += 1
        return self.metadata.generation
