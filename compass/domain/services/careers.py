from __future__ import annotations

from typing import Any

import structlog
from compass.domain.llm_schemas import CareerRecommendations, SkillRoadmap
from compass.domain.models import UserProfile
from compass.domain.services.discovery import invoke_or_degrade
from compass.domain.services.profile import ProfileService
from compass.domain.services.prompts import (
    build_career_recommendation_prompt,
    build_skill_roadmap_prompt,
)
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import LLMProtocol

logger = structlog.get_logger()


class CareerService:
    """Career recommendations, path selection and skill roadmaps."""

    def __init__(
        self, store: EntityStore, llm: LLMProtocol, *, profiles: ProfileService | None = None
    ) -> None:
        self.store = store
        self.llm = llm
        self.profiles = profiles or ProfileService(store)

    async def recommendations(self, email: str) -> list[dict[str, Any]]:
        profile = await self.profiles.me(email)
        return profile.career_recommendations

    async def generate_recommendations(self, email: str) -> list[dict[str, Any]]:
        """Ask the LLM for ranked career fields and store them on the profile.

        Raises ``GenerationFailure`` when the LLM answer is unusable; stored
        recommendations are left untouched in that case.
        """
        profile = await self.profiles.me(email)
        insights = await self._compile_insights(profile)

        fields = await self.store.list(EntityType.CAREER_FIELD, sort="title")
        prompt = build_career_recommendation_prompt(
            profile, insights, [field.as_dict() for field in fields]
        )
        result = await self.llm.invoke(prompt, CareerRecommendations)

        ranked = sorted(
            result.recommendations, key=lambda item: item.match_percentage, reverse=True
        )
        recommendations = [item.model_dump() for item in ranked]
        await self.profiles.set_career_recommendations(email, recommendations)

        await logger.ainfo(
            "career_recommendations_generated",
            user_email=email,
            count=len(recommendations),
            top_field=recommendations[0]["field"] if recommendations else None,
        )
        return recommendations

    async def select_path(self, email: str, field: str) -> UserProfile:
        profile = await self.profiles.select_career_path(email, field)
        await logger.ainfo("career_path_selected", user_email=email, field=field)
        return profile

    async def skill_roadmap(self, career_field: str) -> SkillRoadmap | None:
        """Skills and experiences for ``career_field``; ``None`` when the lookup fails."""
        return await invoke_or_degrade(
            self.llm,
            build_skill_roadmap_prompt(career_field),
            SkillRoadmap,
            feature="skill_roadmap",
        )

    async def _compile_insights(self, profile: UserProfile) -> list[dict[str, Any]]:
        results = await self.store.filter(
            EntityType.USER_ASSESSMENT_RESULT, {"user_email": profile.email}, sort="created_date"
        )
        catalog = await self.store.list(EntityType.ASSESSMENT)
        categories = {assessment.id: assessment.get("category") for assessment in catalog}

        compiled = []
        for result in results:
            insights = result.get("insights") or {}
            compiled.append(
                {
                    "category": categories.get(result.get("assessment_id")),
                    "traits": insights.get("primary_traits") or [],
                    "strengths": insights.get("strengths") or [],
                    "summary": insights.get("summary") or "",
                }
            )
        return compiled
