"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import EntityRepository
from .remote import AdapterSet, RemoteAdapter
from .unit_of_work import (
    EntityRepositories,
    EntityUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AdapterSet",
    "EntityRepositories",
    "EntityRepository",
    "EntityUnitOfWork",
    "RemoteAdapter",
    "RepositoryCollection",
    "UnitOfWork",
]
