from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest
from compass.domain.models import AssessmentDefinition, Insights
from compass.domain.services.profile import PersistenceFailure, ProfileService
from compass.domain.services.quiz_session import (
    QuestionsLoaded,
    QuizSession,
    QuizSessionRegistry,
    SelectAnswer,
)
from compass.domain.services.results import ResultPersister
from compass.domain.services.scoring import ScoringOutcome
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import SqlEntityStore

from tests.utils import DEFAULT_EMAIL, FailingStore, make_questions

OUTCOME = ScoringOutcome(
    scores={"achievement": 80.0},
    insights=Insights(primary_traits=["Driven"], strengths=["Focus"], summary="Goal oriented."),
)


async def answered_session(store: SqlEntityStore, *, minutes: int = 0) -> QuizSession:
    profiles = ProfileService(store)
    profile = await profiles.save_onboarding(
        DEFAULT_EMAIL,
        academic_info={"education_status": "college_student"},
        personal_background={"age": 20},
    )
    catalog = [
        await store.create(EntityType.ASSESSMENT, {"title": title, "category": category})
        for title, category in (("Personality", "personality"), ("Values", "values"))
    ]
    values = catalog[1]

    registry = QuizSessionRegistry()
    session = registry.open(
        user_email=DEFAULT_EMAIL,
        assessment=AssessmentDefinition.from_entity(values),
        profile=profile,
    )
    session = registry.apply(session.id, DEFAULT_EMAIL, QuestionsLoaded(make_questions(1)))
    session = registry.apply(session.id, DEFAULT_EMAIL, SelectAnswer("B"))
    return replace(session, started_at=session.started_at - timedelta(minutes=minutes))


@pytest.mark.asyncio
async def test_persist_saves_result_and_progress(store: SqlEntityStore) -> None:
    session = await answered_session(store, minutes=7)
    persister = ResultPersister(store, ProfileService(store))

    result_id = await persister.persist(session, OUTCOME)

    result = await store.get(EntityType.USER_ASSESSMENT_RESULT, result_id)
    assert result is not None
    assert result.get("scores") == {"achievement": 80.0}
    assert result.get("responses") == [{"question_index": 0, "answer": "B"}]
    assert result.get("insights")["primary_traits"] == ["Driven"]
    assert result.get("completion_time_minutes") == 7

    profile = await ProfileService(store).me(DEFAULT_EMAIL)
    assert profile.completed_assessments == [session.assessment.id]
    assert profile.assessment_progress["completion_percentage"] == 50
    assert profile.assessment_progress["next_recommended"] != session.assessment.id


@pytest.mark.asyncio
async def test_second_result_for_same_assessment_is_refused(store: SqlEntityStore) -> None:
    session = await answered_session(store)
    persister = ResultPersister(store, ProfileService(store))
    await persister.persist(session, OUTCOME)

    with pytest.raises(PersistenceFailure):
        await persister.persist(session, OUTCOME)

    results = await store.filter(EntityType.USER_ASSESSMENT_RESULT, {"user_email": DEFAULT_EMAIL})
    assert len(results) == 1


@pytest.mark.asyncio
async def test_failed_progress_update_removes_result(store: SqlEntityStore) -> None:
    session = await answered_session(store)
    failing = FailingStore(store, update_fails_for=frozenset({EntityType.USER}))
    persister = ResultPersister(failing, ProfileService(failing))  # type: ignore[arg-type]

    with pytest.raises(PersistenceFailure):
        await persister.persist(session, OUTCOME)

    assert await store.list(EntityType.USER_ASSESSMENT_RESULT) == []
    profile = await ProfileService(store).me(DEFAULT_EMAIL)
    assert profile.completed_assessments == []
