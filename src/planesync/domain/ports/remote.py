"""Ports for mirroring entities to the remote control-plane API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from planesync.domain.model import EntityKind, RemoteEntity


@runtime_checkable
class RemoteAdapter[TEntity: RemoteEntity](Protocol):
    """Kind-specific create/update/delete against the remote API.

    ``create`` records the new remote identity on the entity. ``delete`` must treat
    an object that is already absent remotely as success. Failures are raised.
    """

    def create(self, entity: TEntity, *, timeout: float | None = None) -> None: ...

    def update(self, entity: TEntity, *, timeout: float | None = None) -> None: ...

    def delete(self, entity: TEntity, *, timeout: float | None = None) -> None: ...


@dataclass(frozen=True, slots=True)
class AdapterSet:
    """Static kind-to-adapter binding, built once and shared read-only."""

    adapters: Mapping[EntityKind, RemoteAdapter[Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "adapters", MappingProxyType(dict(self.adapters)))

    def __contains__(self, kind: object) -> bool:
        return kind in self.adapters

    def get(self, kind: EntityKind) -> RemoteAdapter[Any] | None:
        return self.adapters.get(kind)

    @property
    def supported_kinds(self) -> frozenset[EntityKind]:
        return frozenset(self.adapters)


__all__ = ["AdapterSet", "RemoteAdapter"]
