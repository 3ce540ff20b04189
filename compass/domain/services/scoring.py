from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog
from compass.domain.llm_schemas import ScoringResponse
from compass.domain.models import (
    AssessmentDefinition,
    GeneratedQuestion,
    Insights,
    QuestionResponse,
    UserProfile,
)
from compass.domain.services.prompts import build_scoring_prompt
from compass.libs.llm import LLMProtocol

logger = structlog.get_logger()

MIN_SCORE = 0.0
MAX_SCORE = 100.0


@dataclass(slots=True)
class ScoringOutcome:
    scores: dict[str, float]
    insights: Insights


class ScoringService:
    """Turns a finished quiz transcript into dimension scores and insights."""

    def __init__(self, llm: LLMProtocol) -> None:
        self.llm = llm

    async def score(
        self,
        assessment: AssessmentDefinition,
        questions: Sequence[GeneratedQuestion],
        responses: Sequence[QuestionResponse | None],
        profile: UserProfile,
    ) -> ScoringOutcome:
        """Raises ``GenerationFailure`` when the LLM answer is unusable."""
        prompt = build_scoring_prompt(assessment, questions, responses, profile)
        response = await self.llm.invoke(prompt, ScoringResponse)

        scores = {
            dimension: min(MAX_SCORE, max(MIN_SCORE, float(value)))
            for dimension, value in response.scores.items()
        }
        insights = Insights(
            primary_traits=list(response.insights.primary_traits),
            strengths=list(response.insights.strengths),
            development_areas=list(response.insights.development_areas),
            summary=response.insights.summary,
        )

        await logger.ainfo(
            "assessment_scored",
            assessment_id=assessment.id,
            dimensions=len(scores),
            primary_traits=len(insights.primary_traits),
        )
        return ScoringOutcome(scores=scores, insights=insights)
