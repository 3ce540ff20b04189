from __future__ import annotations

import pytest
from compass.domain.llm_schemas import ScoringResponse
from compass.domain.models import QuestionResponse
from compass.domain.services.scoring import ScoringService
from compass.libs.llm import GenerationFailure

from tests.utils import FakeLLM, make_assessment, make_profile, make_questions


@pytest.mark.asyncio
async def test_scores_are_clamped_to_percent_range() -> None:
    llm = FakeLLM()
    llm.script(
        ScoringResponse,
        {
            "scores": {"achievement": 120, "security": -5, "creativity": 64.5},
            "insights": {
                "primary_traits": ["Ambitious", "Curious", "Steady"],
                "strengths": ["Planning"],
                "development_areas": ["Delegation"],
                "summary": "Motivated by growth.",
            },
        },
    )

    outcome = await ScoringService(llm).score(
        make_assessment(), make_questions(2), [QuestionResponse(0, "A"), None], make_profile()
    )

    assert outcome.scores == {"achievement": 100.0, "security": 0.0, "creativity": 64.5}
    assert outcome.insights.primary_traits == ["Ambitious", "Curious", "Steady"]
    assert outcome.insights.summary == "Motivated by growth."
    assert "Answer: Not answered" in llm.prompts_for(ScoringResponse)[0]


@pytest.mark.asyncio
async def test_missing_sections_become_empty() -> None:
    llm = FakeLLM()
    llm.script(ScoringResponse, {})

    outcome = await ScoringService(llm).score(
        make_assessment(), make_questions(1), [QuestionResponse(0, "A")], make_profile()
    )

    assert outcome.scores == {}
    assert outcome.insights.as_dict() == {
        "primary_traits": [],
        "strengths": [],
        "development_areas": [],
        "summary": "",
    }


@pytest.mark.asyncio
async def test_generation_failure_propagates() -> None:
    llm = FakeLLM()
    llm.script(ScoringResponse, GenerationFailure("timeout"))

    with pytest.raises(GenerationFailure):
        await ScoringService(llm).score(
            make_assessment(), make_questions(1), [QuestionResponse(0, "A")], make_profile()
        )


@pytest.mark.asyncio
async def test_null_sections_become_empty() -> None:
    llm = FakeLLM()
    llm.script(ScoringResponse, {"scores": None, "insights": None})

    outcome = await ScoringService(llm).score(
        make_assessment(), make_questions(1), [QuestionResponse(0, "A")], make_profile()
    )

    assert outcome.scores == {}
    assert outcome.insights.primary_traits == []
    assert outcome.insights.summary == ""
