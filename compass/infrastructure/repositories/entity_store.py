"""
Generic CRUD entity store.

Every persisted record (users, assessment catalog, results, goals,
portfolio items, career fields) is an ``Entity``: an id, a type, a JSON
payload and bookkeeping columns. Services talk to the ``EntityStore``
protocol only; ``SqlEntityStore`` is the SQLAlchemy-backed implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

import structlog
from compass.infrastructure.db.models import EntityRecord, EntityType
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

METADATA_FIELDS = ("created_date", "updated_date")


class EntityStoreError(Exception):
    """Raised when the store rejects a read or write."""


class EntityNotFoundError(EntityStoreError):
    """Raised when an entity id does not exist for the given type."""


class VersionConflictError(EntityStoreError):
    """Raised when an update's expected version is no longer current."""

    def __init__(self, message: str, current_version: int | None = None):
        super().__init__(message)
        self.current_version = current_version


@dataclass(slots=True)
class Entity:
    id: str
    entity_type: str
    data: dict[str, Any]
    version: int
    created_date: datetime
    updated_date: datetime

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def as_dict(self) -> dict[str, Any]:
        """Flatten into the wire shape: payload fields plus id and metadata."""
        return {
            **self.data,
            "id": self.id,
            "created_date": self.created_date.isoformat(),
            "updated_date": self.updated_date.isoformat(),
        }


class EntityStore(Protocol):
    async def list(
        self, entity_type: EntityType, sort: str | None = None, limit: int | None = None
    ) -> list[Entity]: ...

    async def filter(
        self,
        entity_type: EntityType,
        criteria: dict[str, Any],
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[Entity]: ...

    async def get(self, entity_type: EntityType, entity_id: str) -> Entity | None: ...

    async def create(self, entity_type: EntityType, data: dict[str, Any]) -> Entity: ...

    async def update(
        self,
        entity_type: EntityType,
        entity_id: str,
        patch: dict[str, Any],
        expected_version: int | None = None,
    ) -> Entity: ...

    async def delete(self, entity_type: EntityType, entity_id: str) -> None: ...


class SqlEntityStore:
    """Entity store on the ``entities`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list(
        self, entity_type: EntityType, sort: str | None = None, limit: int | None = None
    ) -> list[Entity]:
        return await self.filter(entity_type, {}, sort=sort, limit=limit)

    async def filter(
        self,
        entity_type: EntityType,
        criteria: dict[str, Any],
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[Entity]:
        stmt = select(EntityRecord).where(EntityRecord.entity_type == entity_type.value)
        owner = criteria.get("user_email")
        if entity_type is EntityType.USER:
            owner = criteria.get("email", owner)
        if owner is not None:
            stmt = stmt.where(EntityRecord.owner_email == owner)
        stmt = stmt.execution_options(populate_existing=True)

        try:
            rows = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            raise EntityStoreError(f"Failed to query {entity_type.value}: {exc}") from exc

        entities = [_to_entity(row) for row in rows]
        matched = [entity for entity in entities if _matches(entity, criteria)]
        ordered = sort_entities(matched, sort)
        return ordered[:limit] if limit is not None else ordered

    async def get(self, entity_type: EntityType, entity_id: str) -> Entity | None:
        row = await self._get_row(entity_type, entity_id)
        return _to_entity(row) if row else None

    async def create(self, entity_type: EntityType, data: dict[str, Any]) -> Entity:
        record = EntityRecord(
            entity_type=entity_type.value,
            owner_email=_owner_of(entity_type, data),
            data=dict(data),
            version=1,
        )
        self.session.add(record)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise EntityStoreError(f"Failed to create {entity_type.value}: {exc}") from exc
        await self.session.refresh(record)

        await logger.adebug("entity_created", entity_type=entity_type.value, entity_id=record.id)
        return _to_entity(record)

    async def update(
        self,
        entity_type: EntityType,
        entity_id: str,
        patch: dict[str, Any],
        expected_version: int | None = None,
    ) -> Entity:
        """Shallow-merge ``patch`` into the stored payload.

        With ``expected_version`` the write only lands if nobody else has
        updated the record since it was read; otherwise ``VersionConflictError``.
        """
        current = await self._get_row(entity_type, entity_id)
        if current is None:
            raise EntityNotFoundError(f"{entity_type.value} {entity_id} not found")

        stored_version = current.version
        read_version = stored_version if expected_version is None else expected_version
        merged = {**(current.data or {}), **patch}

        stmt = (
            update(EntityRecord)
            .where(
                EntityRecord.id == entity_id,
                EntityRecord.entity_type == entity_type.value,
                EntityRecord.version == read_version,
            )
            .values(
                data=merged,
                owner_email=_owner_of(entity_type, merged),
                version=read_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                await self.session.rollback()
                raise VersionConflictError(
                    f"{entity_type.value} {entity_id} changed since version {read_version}",
                    current_version=stored_version,
                )
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise EntityStoreError(f"Failed to update {entity_type.value}: {exc}") from exc

        refreshed = await self._get_row(entity_type, entity_id)
        if refreshed is None:
            raise EntityNotFoundError(f"{entity_type.value} {entity_id} not found")
        return _to_entity(refreshed)

    async def delete(self, entity_type: EntityType, entity_id: str) -> None:
        row = await self._get_row(entity_type, entity_id)
        if row is None:
            raise EntityNotFoundError(f"{entity_type.value} {entity_id} not found")
        try:
            await self.session.delete(row)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise EntityStoreError(f"Failed to delete {entity_type.value}: {exc}") from exc

        await logger.adebug("entity_deleted", entity_type=entity_type.value, entity_id=entity_id)

    async def _get_row(self, entity_type: EntityType, entity_id: str) -> EntityRecord | None:
        stmt = select(EntityRecord).where(
            EntityRecord.id == entity_id,
            EntityRecord.entity_type == entity_type.value,
        )
        # Other sessions may have written since this one last looked
        stmt = stmt.execution_options(populate_existing=True)
        try:
            return await self.session.scalar(stmt)
        except SQLAlchemyError as exc:
            raise EntityStoreError(f"Failed to load {entity_type.value}: {exc}") from exc


def sort_entities(entities: list[Entity], sort: str | None) -> list[Entity]:
    """Order by ``field`` or ``-field``; records missing the field go last."""
    if not sort:
        return list(entities)

    descending = sort.startswith("-")
    key = sort.lstrip("-")

    def value_of(entity: Entity) -> Any:
        if key in METADATA_FIELDS:
            return getattr(entity, key)
        return entity.data.get(key)

    present = [entity for entity in entities if value_of(entity) not in (None, "")]
    missing = [entity for entity in entities if value_of(entity) in (None, "")]
    present.sort(key=value_of, reverse=descending)
    return present + missing


def _matches(entity: Entity, criteria: dict[str, Any]) -> bool:
    for key, expected in criteria.items():
        if key == "id":
            if entity.id != expected:
                return False
        elif entity.data.get(key) != expected:
            return False
    return True


def _owner_of(entity_type: EntityType, data: dict[str, Any]) -> str | None:
    if entity_type is EntityType.USER:
        return data.get("email")
    return data.get("user_email")


def _to_entity(row: EntityRecord) -> Entity:
    return Entity(
        id=row.id,
        entity_type=row.entity_type,
        data=dict(row.data or {}),
        version=row.version,
        created_date=row.created_date,
        updated_date=row.updated_date,
    )
