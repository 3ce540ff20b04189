from __future__ import annotations

from datetime import UTC, datetime

import pytest
from compass.domain.services.quiz_session import (
    FALLBACK_QUESTION,
    Cancel,
    IllegalTransitionError,
    Next,
    Previous,
    QuestionsLoaded,
    QuizPhase,
    QuizSession,
    QuizSessionNotFoundError,
    QuizSessionRegistry,
    SelectAnswer,
    Submit,
    SubmitFailed,
    SubmitSucceeded,
    transition,
)

from tests.utils import DEFAULT_EMAIL, make_assessment, make_profile, make_questions


def new_session() -> QuizSession:
    return QuizSession(
        id="session-1",
        user_email=DEFAULT_EMAIL,
        assessment=make_assessment(),
        profile=make_profile(),
        started_at=datetime.now(UTC),
    )


def loaded(count: int) -> QuizSession:
    return transition(new_session(), QuestionsLoaded(make_questions(count)))


def answer_all(session: QuizSession) -> QuizSession:
    for index in range(session.question_count):
        session = transition(session, SelectAnswer("A"))
        if index < session.question_count - 1:
            session = transition(session, Next())
    return session


def test_loading_questions_activates_session() -> None:
    session = loaded(8)

    assert session.phase is QuizPhase.ACTIVE
    assert session.current_index == 0
    assert session.responses == (None,) * 8
    assert session.progress_percentage == 13
    assert not session.can_go_next
    assert not session.can_go_previous


def test_progress_rounds_half_up() -> None:
    session = loaded(8)
    for _ in range(2):
        session = transition(transition(session, SelectAnswer("B")), Next())

    assert session.current_index == 2
    assert session.progress_percentage == 38


def test_empty_question_list_becomes_fallback() -> None:
    session = transition(new_session(), QuestionsLoaded(()))

    assert session.questions == (FALLBACK_QUESTION,)
    assert session.is_last_question


def test_next_requires_an_answer() -> None:
    session = loaded(3)

    with pytest.raises(IllegalTransitionError):
        transition(session, Next())


def test_answer_must_be_an_option() -> None:
    with pytest.raises(IllegalTransitionError):
        transition(loaded(3), SelectAnswer("Z"))


def test_navigation_keeps_answers() -> None:
    session = transition(loaded(3), SelectAnswer("C"))
    session = transition(session, Next())
    session = transition(session, SelectAnswer("D"))
    session = transition(session, Previous())

    assert session.current_index == 0
    assert session.current_response is not None
    assert session.current_response.answer == "C"
    assert session.responses[1] is not None

    session = transition(session, SelectAnswer("A"))
    assert session.current_response.answer == "A"


def test_previous_not_allowed_on_first_question() -> None:
    with pytest.raises(IllegalTransitionError):
        transition(loaded(3), Previous())


def test_submit_only_on_answered_last_question() -> None:
    session = transition(loaded(2), SelectAnswer("A"))
    with pytest.raises(IllegalTransitionError):
        transition(session, Submit())

    session = transition(session, Next())
    assert session.is_last_question
    with pytest.raises(IllegalTransitionError):
        transition(session, Submit())

    session = transition(session, SelectAnswer("B"))
    assert session.can_submit
    assert transition(session, Submit()).phase is QuizPhase.SUBMITTING


def test_no_navigation_while_submitting() -> None:
    submitting = transition(answer_all(loaded(2)), Submit())

    for event in (SelectAnswer("A"), Previous(), Submit(), Cancel()):
        with pytest.raises(IllegalTransitionError):
            transition(submitting, event)


def test_submit_failure_returns_to_last_question_with_answers() -> None:
    submitting = transition(answer_all(loaded(4)), Submit())

    session = transition(submitting, SubmitFailed("Scoring failed"))

    assert session.phase is QuizPhase.ACTIVE
    assert session.current_index == 3
    assert session.error == "Scoring failed"
    assert [response.answer for response in session.answered_responses()] == ["A"] * 4
    assert session.can_submit


def test_submit_success_completes() -> None:
    submitting = transition(answer_all(loaded(1)), Submit())

    session = transition(submitting, SubmitSucceeded("result-1"))

    assert session.phase is QuizPhase.COMPLETE
    assert session.result_id == "result-1"
    with pytest.raises(IllegalTransitionError):
        transition(session, Submit())


def test_questions_arriving_after_cancel_are_ignored() -> None:
    cancelled = transition(new_session(), Cancel())

    session = transition(cancelled, QuestionsLoaded(make_questions(5)))

    assert session.phase is QuizPhase.CANCELLED
    assert session.questions == ()


def test_registry_hides_sessions_of_other_users() -> None:
    registry = QuizSessionRegistry()
    session = registry.open(
        user_email=DEFAULT_EMAIL, assessment=make_assessment(), profile=make_profile()
    )

    with pytest.raises(QuizSessionNotFoundError):
        registry.get(session.id, "someone-else@example.com")

    updated = registry.apply(session.id, DEFAULT_EMAIL, QuestionsLoaded(make_questions(2)))
    assert registry.get(session.id, DEFAULT_EMAIL) is updated

    registry.discard(session.id)
    with pytest.raises(QuizSessionNotFoundError):
        registry.get(session.id, DEFAULT_EMAIL)


def test_registry_keeps_loading_cancel_until_questions_arrive() -> None:
    registry = QuizSessionRegistry()
    loading = registry.open(
        user_email=DEFAULT_EMAIL, assessment=make_assessment(), profile=make_profile()
    )
    active = registry.open(
        user_email=DEFAULT_EMAIL, assessment=make_assessment(), profile=make_profile()
    )
    registry.apply(active.id, DEFAULT_EMAIL, QuestionsLoaded(make_questions(2)))

    registry.apply(loading.id, DEFAULT_EMAIL, Cancel())
    registry.apply(active.id, DEFAULT_EMAIL, Cancel())

    assert set(registry.sessions) == {loading.id}

    late = registry.apply(loading.id, DEFAULT_EMAIL, QuestionsLoaded(make_questions(2)))

    assert late.phase is QuizPhase.CANCELLED
    assert registry.sessions == {}
