from __future__ import annotations

from compass.domain.models import GoalCategory, GoalStatus
from pydantic import BaseModel, Field


class GoalItem(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: GoalCategory | None = None
    status: GoalStatus = GoalStatus.NOT_STARTED
    due_date: str | None = None
    created_date: str
    updated_date: str


class GoalsResponse(BaseModel):
    goals: list[GoalItem]


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    category: GoalCategory
    status: GoalStatus = GoalStatus.NOT_STARTED
    due_date: str | None = Field(None, description="ISO date (YYYY-MM-DD)")


class GoalUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    category: GoalCategory | None = None
    status: GoalStatus | None = None
    due_date: str | None = None


class SuggestedGoalItem(BaseModel):
    title: str
    description: str
    category: GoalCategory


class GoalSuggestionsResponse(BaseModel):
    suggested_goals: list[SuggestedGoalItem]
    degraded: bool = False
