"""Read-only summaries over a user's assessment results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from compass.domain.models import AssessmentDefinition, UserProfile, completion_percentage
from compass.domain.services.profile import ProfileLoadFailure, ProfileService, assessment_total
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import Entity, EntityStore

RECENT_INSIGHT_LIMIT = 3


@dataclass(slots=True)
class ResultsOverview:
    profile: UserProfile
    assessments: list[AssessmentDefinition]
    results: list[Entity]

    @property
    def completed_ids(self) -> set[str]:
        return {result.get("assessment_id") for result in self.results}

    @property
    def total_count(self) -> int:
        return assessment_total(len(self.assessments))

    @property
    def completion_percentage(self) -> int:
        return completion_percentage(len(self.results), self.total_count)

    def next_assessment(self) -> AssessmentDefinition | None:
        completed = self.completed_ids
        return next((item for item in self.assessments if item.id not in completed), None)


@dataclass(slots=True)
class Dashboard:
    overview: ResultsOverview
    recent_insights: list[dict[str, Any]] = field(default_factory=list)


class DashboardService:
    def __init__(self, store: EntityStore, *, profiles: ProfileService | None = None) -> None:
        self.store = store
        self.profiles = profiles or ProfileService(store)

    async def overview(self, email: str) -> ResultsOverview:
        profile = await self.profiles.me(email)
        catalog = await self.store.list(EntityType.ASSESSMENT, sort="created_date")
        results = await self.store.filter(
            EntityType.USER_ASSESSMENT_RESULT, {"user_email": email}, sort="-created_date"
        )
        return ResultsOverview(
            profile=profile,
            assessments=[AssessmentDefinition.from_entity(entity) for entity in catalog],
            results=results,
        )

    async def dashboard(self, email: str) -> Dashboard:
        """Raises ``ProfileLoadFailure`` for users who have not onboarded yet."""
        overview = await self.overview(email)
        if not overview.profile.is_onboarded:
            raise ProfileLoadFailure(f"Profile for {email} has no education status")

        titles = {assessment.id: assessment.title for assessment in overview.assessments}
        recent = [
            {
                "result_id": result.id,
                "assessment_id": result.get("assessment_id"),
                "assessment_title": titles.get(result.get("assessment_id"), ""),
                "primary_traits": list((result.get("insights") or {}).get("primary_traits") or []),
                "created_date": result.created_date.isoformat(),
            }
            for result in overview.results
            if (result.get("insights") or {}).get("primary_traits")
        ]
        return Dashboard(overview=overview, recent_insights=recent[:RECENT_INSIGHT_LIMIT])

    async def profile_summary(self, email: str) -> dict[str, Any]:
        overview = await self.overview(email)
        categories = {assessment.id: assessment.category for assessment in overview.assessments}

        by_category: dict[str, list[dict[str, Any]]] = {}
        # Oldest first so first-seen order follows completion order
        ordered = list(reversed(overview.results))
        for result in ordered:
            insights = result.get("insights")
            category = categories.get(result.get("assessment_id"))
            if insights and category:
                by_category.setdefault(category, []).append(insights)

        insights_list = [result.get("insights") or {} for result in ordered]
        recent = overview.results[:RECENT_INSIGHT_LIMIT]
        return {
            "profile": overview.profile.as_dict(),
            "completed_count": len(overview.results),
            "total_count": overview.total_count,
            "completion_percentage": overview.completion_percentage,
            "insights_by_category": by_category,
            "traits": _collect(insights_list, "primary_traits"),
            "strengths": _collect(insights_list, "strengths"),
            "recent_results": [result.as_dict() for result in recent],
        }

    async def catalog(self, email: str) -> dict[str, Any]:
        overview = await self.overview(email)
        completed = overview.completed_ids
        return {
            "assessments": [
                {
                    "id": assessment.id,
                    "title": assessment.title,
                    "category": assessment.category,
                    "description": assessment.description,
                    "duration_minutes": assessment.duration_minutes,
                    "completed": assessment.id in completed,
                }
                for assessment in overview.assessments
            ],
            "completed_count": len(overview.results),
            "total_count": overview.total_count,
            "completion_percentage": overview.completion_percentage,
        }


def _collect(insights_list: Iterable[dict[str, Any]], key: str) -> list[str]:
    """Flatten ``key`` across insights, dropping blanks and repeats (first seen wins)."""
    seen: dict[str, None] = {}
    for insights in insights_list:
        for value in insights.get(key) or []:
            if value:
                seen.setdefault(value, None)
    return list(seen)
