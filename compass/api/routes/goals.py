from __future__ import annotations

from compass.api.deps import ANY_ROLE, get_entity_store, get_llm_service, require_roles
from compass.api.schemas.goals import (
    GoalCreate,
    GoalItem,
    GoalsResponse,
    GoalSuggestionsResponse,
    GoalUpdate,
)
from compass.domain import User
from compass.domain.services.goals import GoalNotFoundError, GoalService
from compass.domain.services.profile import PersistenceFailure
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import LLMProtocol
from fastapi import APIRouter, Depends, HTTPException, status

router = APIRouter(prefix="/goals", tags=["Goals"])


def _goal_service(
    store: EntityStore = Depends(get_entity_store),  # noqa: B008
    llm: LLMProtocol = Depends(get_llm_service),  # noqa: B008
) -> GoalService:
    return GoalService(store, llm)


@router.get("", response_model=GoalsResponse)
async def list_goals(
    service: GoalService = Depends(_goal_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> GoalsResponse:
    """Return the caller's goals, newest first."""
    goals = await service.list_goals(user.email)
    return GoalsResponse(goals=[GoalItem(**goal.as_dict()) for goal in goals])


@router.post("", response_model=GoalItem, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    service: GoalService = Depends(_goal_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> GoalItem:
    try:
        goal = await service.create(user.email, payload.model_dump(mode="json"))
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return GoalItem(**goal.as_dict())


@router.patch("/{goal_id}", response_model=GoalItem)
async def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    service: GoalService = Depends(_goal_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> GoalItem:
    try:
        goal = await service.update(
            user.email, goal_id, payload.model_dump(mode="json", exclude_unset=True)
        )
    except GoalNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return GoalItem(**goal.as_dict())


@router.post("/{goal_id}/toggle", response_model=GoalItem)
async def toggle_goal(
    goal_id: str,
    service: GoalService = Depends(_goal_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> GoalItem:
    """Mark a goal completed, or reopen a completed one as in progress."""
    try:
        goal = await service.toggle(user.email, goal_id)
    except GoalNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return GoalItem(**goal.as_dict())


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: str,
    service: GoalService = Depends(_goal_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> None:
    try:
        await service.delete(user.email, goal_id)
    except GoalNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


@router.post("/suggestions", response_model=GoalSuggestionsResponse)
async def suggest_goals(
    service: GoalService = Depends(_goal_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> GoalSuggestionsResponse:
    """3-4 goals for the caller's selected career path, education status and age."""
    outcome = await service.suggestions(user.email)
    return GoalSuggestionsResponse(suggested_goals=outcome.items, degraded=outcome.degraded)
