"""SQLAlchemy adapter package for planesync."""

from __future__ import annotations

from .mappings import condition_table, create_all_tables, entity_table, metadata
from .repositories import SqlAlchemyEntityRepository
from .unit_of_work import (
    SqlAlchemyEntityUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEntityRepository",
    "SqlAlchemyEntityUnitOfWork",
    "StartupError",
    "condition_table",
    "create_all_tables",
    "entity_table",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
