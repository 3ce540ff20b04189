from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from compass.domain.llm_schemas import PortfolioChecklist
from compass.domain.services.discovery import SearchOutcome, invoke_or_degrade
from compass.domain.services.profile import PersistenceFailure, ProfileService
from compass.domain.services.prompts import build_portfolio_checklist_prompt
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import (
    Entity,
    EntityNotFoundError,
    EntityStore,
    EntityStoreError,
)
from compass.libs.file_storage import FileStorageProtocol
from compass.libs.llm import LLMProtocol

logger = structlog.get_logger()


class PortfolioItemNotFoundError(Exception):
    """Raised when a portfolio item does not exist or belongs to someone else."""


@dataclass(slots=True)
class Upload:
    filename: str
    content: bytes


class PortfolioService:
    def __init__(
        self,
        store: EntityStore,
        llm: LLMProtocol,
        storage: FileStorageProtocol,
        *,
        profiles: ProfileService | None = None,
    ) -> None:
        self.store = store
        self.llm = llm
        self.storage = storage
        self.profiles = profiles or ProfileService(store)

    async def list_items(self, email: str) -> list[Entity]:
        return await self.store.filter(
            EntityType.PORTFOLIO_ITEM, {"user_email": email}, sort="-date"
        )

    async def save(
        self,
        email: str,
        data: dict[str, Any],
        *,
        item_id: str | None = None,
        upload: Upload | None = None,
    ) -> Entity:
        """Create a new item, or update ``item_id``; an upload replaces ``file_url``.

        Raises ``FileStorageError`` when the upload is rejected and
        ``PersistenceFailure`` when the store write does not land.
        """
        existing = await self._owned(email, item_id) if item_id else None

        file_url = existing.get("file_url") if existing else None
        if upload is not None and upload.content:
            file_url = await self.storage.save(upload.filename, upload.content)

        payload = {**data, "user_email": email, "file_url": file_url}
        try:
            if existing is None:
                item = await self.store.create(EntityType.PORTFOLIO_ITEM, payload)
                await logger.ainfo(
                    "portfolio_item_created", item_id=item.id, has_file=bool(file_url)
                )
                return item
            return await self.store.update(EntityType.PORTFOLIO_ITEM, existing.id, payload)
        except EntityNotFoundError as exc:
            raise PortfolioItemNotFoundError(f"Portfolio item '{item_id}' not found") from exc
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not save portfolio item: {exc}") from exc

    async def delete(self, email: str, item_id: str) -> None:
        await self._owned(email, item_id)
        try:
            await self.store.delete(EntityType.PORTFOLIO_ITEM, item_id)
        except EntityNotFoundError as exc:
            raise PortfolioItemNotFoundError(f"Portfolio item '{item_id}' not found") from exc
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not delete portfolio item: {exc}") from exc
        await logger.ainfo("portfolio_item_deleted", item_id=item_id)

    async def checklist(self, email: str) -> SearchOutcome:
        """Essential portfolio components for the selected career path (empty without one)."""
        profile = await self.profiles.me(email)
        if not profile.career_path:
            return SearchOutcome()

        result = await invoke_or_degrade(
            self.llm,
            build_portfolio_checklist_prompt(profile.career_path),
            PortfolioChecklist,
            feature="portfolio_checklist",
        )
        if result is None:
            return SearchOutcome(degraded=True)
        return SearchOutcome(items=[entry.model_dump() for entry in result.checklist])

    async def _owned(self, email: str, item_id: str) -> Entity:
        item = await self.store.get(EntityType.PORTFOLIO_ITEM, item_id)
        if item is None or item.get("user_email") != email:
            raise PortfolioItemNotFoundError(f"Portfolio item '{item_id}' not found")
        return item
