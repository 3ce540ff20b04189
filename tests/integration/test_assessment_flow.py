"""Integration tests for onboarding, quiz attempts and progress."""

from __future__ import annotations

from typing import Any

import pytest
from compass.domain.llm_schemas import QuestionSet, ScoringResponse
from compass.domain.services.prompts import CATEGORY_BLUEPRINTS
from compass.domain.services.quiz import SCORING_FAILED_MESSAGE
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import Entity
from fastapi import status
from httpx import AsyncClient

from tests.utils import DEFAULT_EMAIL, FakeLLM, auth_headers, question_set

VALUES_DIMENSIONS = list(CATEGORY_BLUEPRINTS["values"].dimensions[:6])

ONBOARDING = {
    "full_name": "Sam Student",
    "academic_info": {"education_status": "college_student"},
    "personal_background": {"age": 20, "hobbies": ["Music", "Volunteering"]},
}

SCORING = {
    "scores": {"achievement": 80},
    "insights": {
        "primary_traits": ["Driven", "Principled", "Supportive"],
        "strengths": ["Goal setting", "Empathy", "Consistency"],
        "development_areas": ["Risk taking", "Delegation"],
        "summary": "Values steady progress and helping others.",
    },
}


def by_category(catalog: list[Entity], category: str) -> Entity:
    return next(entity for entity in catalog if entity.get("category") == category)


async def start_session(
    client: AsyncClient, assessment_id: str, headers: dict[str, str]
) -> dict[str, Any]:
    """Start an attempt and poll it once its questions have been generated."""
    started = await client.post(f"/assessments/{assessment_id}/sessions", headers=headers)
    assert started.status_code == status.HTTP_201_CREATED
    assert started.json()["phase"] == "loading"
    assert started.json()["current_question"] is None

    polled = await client.get(f"/sessions/{started.json()['session_id']}", headers=headers)
    assert polled.status_code == status.HTTP_200_OK
    return polled.json()


async def answer_every_question(
    client: AsyncClient, session: dict[str, Any], headers: dict[str, str]
) -> dict[str, Any]:
    session_id = session["session_id"]
    for index in range(session["question_count"]):
        option = session["current_question"]["options"][index % 4]
        response = await client.post(
            f"/sessions/{session_id}/answer", json={"answer": option}, headers=headers
        )
        assert response.status_code == status.HTTP_200_OK
        session = response.json()
        if not session["is_last_question"]:
            session = (await client.post(f"/sessions/{session_id}/next", headers=headers)).json()
    return session


class TestOnboarding:
    @pytest.mark.asyncio
    async def test_dashboard_redirects_until_onboarded(
        self, async_client: AsyncClient, catalog: list[Entity]
    ) -> None:
        headers = auth_headers()

        response = await async_client.get("/dashboard", headers=headers)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/welcome"

        saved = await async_client.post("/welcome", json=ONBOARDING, headers=headers)
        assert saved.status_code == status.HTTP_200_OK
        assert saved.json()["personal_background"]["age"] == 20

        response = await async_client.get("/dashboard", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        payload = response.json()
        assert payload["completion_percentage"] == 0
        assert payload["total_count"] == len(catalog)
        assert payload["next_assessment"]["id"] == catalog[0].id

    @pytest.mark.asyncio
    async def test_missing_token_is_unauthorized(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/dashboard")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_invalid_age_is_rejected(self, async_client: AsyncClient) -> None:
        payload = {**ONBOARDING, "personal_background": {"age": 2}}

        response = await async_client.post("/welcome", json=payload, headers=auth_headers())

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestQuizAttempt:
    @pytest.mark.asyncio
    async def test_values_assessment_end_to_end(
        self,
        async_client: AsyncClient,
        catalog: list[Entity],
        fake_llm: FakeLLM,
        read_entities,
    ) -> None:
        headers = auth_headers()
        await async_client.post("/welcome", json=ONBOARDING, headers=headers)
        values = by_category(catalog, "values")
        fake_llm.script(QuestionSet, question_set(VALUES_DIMENSIONS))
        fake_llm.script(ScoringResponse, SCORING)

        session = await start_session(async_client, values.id, headers)

        assert session["phase"] == "active"
        assert session["question_count"] == 6
        assert session["progress_percentage"] == 17
        assert session["can_go_next"] is False
        question_prompt = fake_llm.prompts_for(QuestionSet)[0]
        assert "20-year-old college-age young adult" in question_prompt
        assert "Music, Volunteering" in question_prompt

        session = await answer_every_question(async_client, session, headers)
        assert session["is_last_question"] is True
        assert session["can_submit"] is True

        submitted = await async_client.post(
            f"/sessions/{session['session_id']}/submit", headers=headers
        )

        assert submitted.status_code == status.HTTP_200_OK
        completed = submitted.json()
        assert completed["phase"] == "complete"
        assert completed["result_id"]
        finished = await async_client.get(f"/sessions/{completed['session_id']}", headers=headers)
        assert finished.status_code == status.HTTP_404_NOT_FOUND
        assert "Question 6:" in fake_llm.prompts_for(ScoringResponse)[0]

        results = await read_entities(EntityType.USER_ASSESSMENT_RESULT)
        assert len(results) == 1
        assert results[0].id == completed["result_id"]
        assert results[0].get("scores") == {"achievement": 80.0}
        assert len(results[0].get("responses")) == 6

        users = await read_entities(EntityType.USER, {"email": DEFAULT_EMAIL})
        progress = users[0].get("assessment_progress")
        assert progress["completed_assessments"] == [values.id]
        assert progress["completion_percentage"] == 17
        assert progress["next_recommended"] == catalog[0].id

        dashboard = (await async_client.get("/dashboard", headers=headers)).json()
        assert dashboard["completed_count"] == 1
        assert dashboard["recent_insights"][0]["primary_traits"] == SCORING["insights"][
            "primary_traits"
        ]

        retake = await async_client.post(f"/assessments/{values.id}/sessions", headers=headers)
        assert retake.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_scoring_failure_returns_session_with_error(
        self,
        async_client: AsyncClient,
        catalog: list[Entity],
        fake_llm: FakeLLM,
        read_entities,
    ) -> None:
        headers = auth_headers()
        await async_client.post("/welcome", json=ONBOARDING, headers=headers)
        strengths = by_category(catalog, "strengths")
        fake_llm.script(QuestionSet, question_set(["leadership", "empathy"]))

        session = await start_session(async_client, strengths.id, headers)
        session = await answer_every_question(async_client, session, headers)

        response = await async_client.post(
            f"/sessions/{session['session_id']}/submit", headers=headers
        )

        assert response.status_code == status.HTTP_200_OK
        payload = response.json()
        assert payload["phase"] == "active"
        assert payload["error"] == SCORING_FAILED_MESSAGE
        assert payload["current_index"] == 1
        assert payload["current_answer"] is not None
        assert await read_entities(EntityType.USER_ASSESSMENT_RESULT) == []

    @pytest.mark.asyncio
    async def test_generation_failure_serves_fallback_question(
        self, async_client: AsyncClient, catalog: list[Entity]
    ) -> None:
        headers = auth_headers()
        await async_client.post("/welcome", json=ONBOARDING, headers=headers)

        session = await start_session(async_client, catalog[0].id, headers)

        assert session["phase"] == "active"
        assert session["question_count"] == 1
        assert session["current_question"]["options"] == ["Ok"]

    @pytest.mark.asyncio
    async def test_illegal_navigation_and_foreign_sessions(
        self, async_client: AsyncClient, catalog: list[Entity], fake_llm: FakeLLM
    ) -> None:
        headers = auth_headers()
        await async_client.post("/welcome", json=ONBOARDING, headers=headers)
        fake_llm.script(QuestionSet, question_set(["openness", "leadership"]))
        session = await start_session(async_client, catalog[0].id, headers)
        session_id = session["session_id"]

        skipped = await async_client.post(f"/sessions/{session_id}/next", headers=headers)
        early = await async_client.post(f"/sessions/{session_id}/submit", headers=headers)
        foreign = await async_client.get(
            f"/sessions/{session_id}", headers=auth_headers("intruder@example.com")
        )

        assert skipped.status_code == status.HTTP_409_CONFLICT
        assert early.status_code == status.HTTP_409_CONFLICT
        assert foreign.status_code == status.HTTP_404_NOT_FOUND

        cancelled = await async_client.post(f"/sessions/{session_id}/cancel", headers=headers)
        assert cancelled.json()["phase"] == "cancelled"
        gone = await async_client.get(f"/sessions/{session_id}", headers=headers)
        assert gone.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_assessment(self, async_client: AsyncClient) -> None:
        headers = auth_headers()
        await async_client.post("/welcome", json=ONBOARDING, headers=headers)

        response = await async_client.post("/assessments/missing/sessions", headers=headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
