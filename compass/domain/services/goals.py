from __future__ import annotations

from typing import Any

import structlog
from compass.domain.llm_schemas import GoalSuggestions
from compass.domain.models import GoalStatus
from compass.domain.services.discovery import SearchOutcome, invoke_or_degrade
from compass.domain.services.profile import PersistenceFailure, ProfileService
from compass.domain.services.prompts import build_goal_suggestion_prompt
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import (
    Entity,
    EntityNotFoundError,
    EntityStore,
    EntityStoreError,
)
from compass.libs.llm import LLMProtocol

logger = structlog.get_logger()


class GoalNotFoundError(Exception):
    """Raised when a goal does not exist or belongs to someone else."""


class GoalService:
    def __init__(
        self, store: EntityStore, llm: LLMProtocol, *, profiles: ProfileService | None = None
    ) -> None:
        self.store = store
        self.llm = llm
        self.profiles = profiles or ProfileService(store)

    async def list_goals(self, email: str) -> list[Entity]:
        return await self.store.filter(EntityType.GOAL, {"user_email": email}, sort="-created_date")

    async def create(self, email: str, data: dict[str, Any]) -> Entity:
        payload = {"status": GoalStatus.NOT_STARTED.value, **data, "user_email": email}
        try:
            goal = await self.store.create(EntityType.GOAL, payload)
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not save goal: {exc}") from exc
        await logger.ainfo("goal_created", goal_id=goal.id, category=payload.get("category"))
        return goal

    async def update(self, email: str, goal_id: str, patch: dict[str, Any]) -> Entity:
        await self._owned(email, goal_id)
        return await self._write(goal_id, {**patch, "user_email": email})

    async def delete(self, email: str, goal_id: str) -> None:
        await self._owned(email, goal_id)
        try:
            await self.store.delete(EntityType.GOAL, goal_id)
        except EntityNotFoundError as exc:
            raise GoalNotFoundError(f"Goal '{goal_id}' not found") from exc
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not delete goal '{goal_id}': {exc}") from exc
        await logger.ainfo("goal_deleted", goal_id=goal_id)

    async def toggle(self, email: str, goal_id: str) -> Entity:
        """Flip a goal between ``completed`` and ``in_progress``."""
        goal = await self._owned(email, goal_id)
        if goal.get("status") == GoalStatus.COMPLETED.value:
            status = GoalStatus.IN_PROGRESS
        else:
            status = GoalStatus.COMPLETED
        return await self._write(goal_id, {"status": status.value})

    async def suggestions(self, email: str) -> SearchOutcome:
        profile = await self.profiles.me(email)
        result = await invoke_or_degrade(
            self.llm,
            build_goal_suggestion_prompt(profile),
            GoalSuggestions,
            feature="goal_suggestions",
            add_context_from_internet=False,
        )
        if result is None:
            return SearchOutcome(degraded=True)
        goals = [goal.model_dump(mode="json") for goal in result.suggested_goals]
        return SearchOutcome(items=goals)

    async def _owned(self, email: str, goal_id: str) -> Entity:
        goal = await self.store.get(EntityType.GOAL, goal_id)
        if goal is None or goal.get("user_email") != email:
            raise GoalNotFoundError(f"Goal '{goal_id}' not found")
        return goal

    async def _write(self, goal_id: str, patch: dict[str, Any]) -> Entity:
        try:
            return await self.store.update(EntityType.GOAL, goal_id, patch)
        except EntityNotFoundError as exc:
            raise GoalNotFoundError(f"Goal '{goal_id}' not found") from exc
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not update goal '{goal_id}': {exc}") from exc
