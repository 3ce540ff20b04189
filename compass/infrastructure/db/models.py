from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EntityType(str, enum.Enum):
    """Entity kinds kept in the generic entity store."""

    USER = "User"
    ASSESSMENT = "Assessment"
    USER_ASSESSMENT_RESULT = "UserAssessmentResult"
    CAREER_FIELD = "CareerField"
    GOAL = "Goal"
    PORTFOLIO_ITEM = "PortfolioItem"


class EntityRecord(Base):
    """One schemaless record of any entity type.

    ``owner_email`` is denormalised from ``data.user_email`` (or
    ``data.email`` for users) so per-user lookups do not scan every row.
    ``version`` increases on every update and backs optimistic concurrency.
    """

    __tablename__ = "entities"
    __table_args__ = (Index("ix_entities_type_owner", "entity_type", "owner_email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    owner_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<EntityRecord(id={self.id}, type={self.entity_type}, version={self.version})>"


__all__ = ["EntityRecord", "EntityType"]
