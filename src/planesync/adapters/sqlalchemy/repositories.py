"""Repository implementation backed by SQLAlchemy sessions."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, select, update

from planesync.adapters.sqlalchemy.mappings import condition_table, entity_table
from planesync.domain.model import (
    ENTITY_CLASS_BY_KIND,
    SPEC_CLASS_BY_KIND,
    Condition,
    ConditionSet,
    EntityStatus,
    ObjectMeta,
    OwnerReference,
)

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from planesync.domain.model import AnyEntity, EntityKind, ObjectKey


class SqlAlchemyEntityRepository:
    """Store entities as one row each, with their conditions in a child table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AnyEntity) -> None:
        entity_id = self._find_id(entity.kind, entity.key)
        if entity_id is None:
            result = self.session.execute(entity_table.insert().values(**self._entity_values(entity)))
            entity_id = cast(int, result.inserted_primary_key[0])
        else:
            self._update(entity_id, entity)
        self._replace_conditions(entity_id, entity)

    def save(self, entity: AnyEntity) -> None:
        entity_id = self._find_id(entity.kind, entity.key)
        if entity_id is None:
            raise LookupError(f"{entity.kind} {entity.key} is not stored")
        self._update(entity_id, entity)
        self._replace_conditions(entity_id, entity)

    def get(self, kind: EntityKind, key: ObjectKey) -> AnyEntity | None:
        stmt = (
            select(entity_table)
            .where(entity_table.c.kind == kind)
            .where(entity_table.c.namespace == key.namespace)
            .where(entity_table.c.name == key.name)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        conditions = self._load_conditions([row.id])
        return self._to_entity(row, conditions.get(row.id, []))

    def list(self, kind: EntityKind | None = None) -> list[AnyEntity]:
        stmt = select(entity_table).order_by(
            entity_table.c.kind, entity_table.c.namespace, entity_table.c.name
        )
        if kind is not None:
            stmt = stmt.where(entity_table.c.kind == kind)
        rows = self.session.execute(stmt).all()
        conditions = self._load_conditions([row.id for row in rows])
        return [self._to_entity(row, conditions.get(row.id, [])) for row in rows]

    def remove(self, kind: EntityKind, key: ObjectKey) -> bool:
        entity_id = self._find_id(kind, key)
        if entity_id is None:
            return False
        self.session.execute(delete(condition_table).where(condition_table.c.entity_id == entity_id))
        self.session.execute(delete(entity_table).where(entity_table.c.id == entity_id))
        return True

    def _find_id(self, kind: EntityKind, key: ObjectKey) -> int | None:
        stmt = (
            select(entity_table.c.id)
            .where(entity_table.c.kind == kind)
            .where(entity_table.c.namespace == key.namespace)
            .where(entity_table.c.name == key.name)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def _update(self, entity_id: int, entity: AnyEntity) -> None:
        stmt = (
            update(entity_table)
            .where(entity_table.c.id == entity_id)
            .values(**self._entity_values(entity))
        )
        self.session.execute(stmt)

    def _replace_conditions(self, entity_id: int, entity: AnyEntity) -> None:
        self.session.execute(delete(condition_table).where(condition_table.c.entity_id == entity_id))
        rows = [
            {
                "entity_id": entity_id,
                "type": condition.type,
                "status": condition.status,
                "reason": condition.reason,
                "message": condition.message,
                "observed_generation": condition.observed_generation,
                "last_transition_time": condition.last_transition_time,
            }
            for condition in entity.conditions
        ]
        if rows:
            self.session.execute(condition_table.insert(), rows)

    def _load_conditions(self, entity_ids: list[int]) -> dict[int, list[Condition]]:
        if not entity_ids:
            return {}
        stmt = (
            select(condition_table)
            .where(condition_table.c.entity_id.in_(entity_ids))
            .order_by(condition_table.c.id)
        )
        grouped: dict[int, list[Condition]] = defaultdict(list)
        for row in self.session.execute(stmt):
            grouped[row.entity_id].append(
                Condition(
                    type=row.type,
                    status=row.status,
                    reason=row.reason,
                    message=row.message,
                    observed_generation=row.observed_generation,
                    last_transition_time=row.last_transition_time,
                )
            )
        return grouped

    @staticmethod
    def _entity_values(entity: AnyEntity) -> dict[str, Any]:
        meta = entity.metadata
        status = entity.status
        return {
            "kind": entity.kind,
            "namespace": meta.namespace,
            "name": meta.name,
            "generation": meta.generation,
            "labels": dict(meta.labels),
            "finalizers": list(meta.finalizers),
            "owner_references": [asdict(ref) for ref in meta.owner_references],
            "deletion_requested": meta.deletion_requested,
            "spec": asdict(entity.spec),
            "remote_id": status.remote_id,
            "server_url": status.server_url,
            "control_plane_id": status.control_plane_id,
            "service_id": status.service_id,
        }

    @staticmethod
    def _to_entity(row: Row[Any], conditions: list[Condition]) -> AnyEntity:
        entity_cls = ENTITY_CLASS_BY_KIND[row.kind]
        spec_cls = SPEC_CLASS_BY_KIND[row.kind]
        metadata = ObjectMeta(
            name=row.name,
            namespace=row.namespace,
            generation=row.generation,
            labels=dict(row.labels),
            finalizers=list(row.finalizers),
            owner_references=[OwnerReference(**ref) for ref in row.owner_references],
            deletion_requested=row.deletion_requested,
        )
        status = EntityStatus(
            remote_id=row.remote_id,
            server_url=row.server_url,
            control_plane_id=row.control_plane_id,
            service_id=row.service_id,
            conditions=ConditionSet(conditions),
        )
        return entity_cls(metadata=metadata, status=status, spec=spec_cls(**row.spec))  # type: ignore[arg-type]


if TYPE_CHECKING:
    from planesync.domain.ports.persistence import EntityRepository

    _session_stub = cast("Session", object())
    _repo_check: EntityRepository = SqlAlchemyEntityRepository(_session_stub)
