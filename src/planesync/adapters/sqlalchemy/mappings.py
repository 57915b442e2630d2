"""SQLAlchemy table metadata for stored entities and their conditions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

from planesync.domain.model import ConditionStatus, EntityKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData()


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


entity_table = Table(
    "entity",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", Enum(EntityKind, native_enum=False, length=32), nullable=False),
    Column("namespace", String, nullable=False),
    Column("name", String, nullable=False),
    Column("generation", Integer, nullable=False, default=1),
    Column("labels", JSON, nullable=False, default=dict),
    Column("finalizers", JSON, nullable=False, default=list),
    Column("owner_references", JSON, nullable=False, default=list),
    Column("deletion_requested", Boolean, nullable=False, default=False),
    Column("spec", JSON, nullable=False),
    Column("remote_id", String, nullable=False, default=""),
    Column("server_url", String, nullable=False, default=""),
    Column("control_plane_id", String, nullable=False, default=""),
    Column("service_id", String, nullable=False, default=""),
    UniqueConstraint("kind", "namespace", "name"),
    Index("ix_entity_kind", "kind"),
)

condition_table = Table(
    "entity_condition",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "entity_id",
        Integer,
        ForeignKey("entity.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("type", String, nullable=False),
    Column("status", Enum(ConditionStatus, native_enum=False, length=16), nullable=False),
    Column("reason", String, nullable=False),
    Column("message", Text, nullable=False, default=""),
    Column("observed_generation", Integer, nullable=False, default=0),
    Column("last_transition_time", UTCDateTime(), nullable=False),
    UniqueConstraint("entity_id", "type"),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
