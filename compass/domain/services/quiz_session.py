"""
Quiz session state machine.

A quiz attempt moves through ``loading -> active -> submitting -> complete``
and may be ``cancelled`` while loading or active. ``transition`` is the only
place phases change; everything else reads the session or asks the
registry to apply an event.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
from compass.domain.models import (
    AssessmentDefinition,
    GeneratedQuestion,
    QuestionResponse,
    UserProfile,
    round_half_up,
)

logger = structlog.get_logger()

FALLBACK_QUESTION = GeneratedQuestion(
    question=(
        "We encountered an issue generating your personalized assessment. "
        "Please try again later."
    ),
    options=("Ok",),
    dimension="fallback",
)


class QuizPhase(str, enum.Enum):
    LOADING = "loading"
    ACTIVE = "active"
    SUBMITTING = "submitting"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


class IllegalTransitionError(Exception):
    """Raised when an event is not allowed in the session's current phase."""


class QuizSessionNotFoundError(Exception):
    """Raised when a session id is unknown or owned by another user."""


@dataclass(slots=True, frozen=True)
class QuestionsLoaded:
    questions: tuple[GeneratedQuestion, ...]


@dataclass(slots=True, frozen=True)
class SelectAnswer:
    answer: str


@dataclass(slots=True, frozen=True)
class Next:
    pass


@dataclass(slots=True, frozen=True)
class Previous:
    pass


@dataclass(slots=True, frozen=True)
class Submit:
    pass


@dataclass(slots=True, frozen=True)
class SubmitSucceeded:
    result_id: str


@dataclass(slots=True, frozen=True)
class SubmitFailed:
    reason: str


@dataclass(slots=True, frozen=True)
class Cancel:
    pass


QuizEvent = (
    QuestionsLoaded
    | SelectAnswer
    | Next
    | Previous
    | Submit
    | SubmitSucceeded
    | SubmitFailed
    | Cancel
)


@dataclass(slots=True, frozen=True)
class QuizSession:
    id: str
    user_email: str
    assessment: AssessmentDefinition
    profile: UserProfile
    started_at: datetime
    phase: QuizPhase = QuizPhase.LOADING
    questions: tuple[GeneratedQuestion, ...] = ()
    responses: tuple[QuestionResponse | None, ...] = ()
    current_index: int = 0
    result_id: str | None = None
    error: str | None = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> GeneratedQuestion | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def current_response(self) -> QuestionResponse | None:
        if not self.responses:
            return None
        return self.responses[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return bool(self.questions) and self.current_index == len(self.questions) - 1

    @property
    def progress_percentage(self) -> int:
        if not self.questions:
            return 0
        return round_half_up((self.current_index + 1) / len(self.questions) * 100)

    @property
    def can_go_next(self) -> bool:
        return (
            self.phase is QuizPhase.ACTIVE
            and self.current_response is not None
            and not self.is_last_question
        )

    @property
    def can_go_previous(self) -> bool:
        return self.phase is QuizPhase.ACTIVE and self.current_index > 0

    @property
    def can_submit(self) -> bool:
        return (
            self.phase is QuizPhase.ACTIVE
            and self.is_last_question
            and self.current_response is not None
        )

    def answered_responses(self) -> list[QuestionResponse]:
        return [response for response in self.responses if response is not None]

    def as_dict(self) -> dict[str, Any]:
        question = self.current_question
        response = self.current_response
        return {
            "session_id": self.id,
            "assessment_id": self.assessment.id,
            "assessment_title": self.assessment.title,
            "phase": self.phase.value,
            "question_count": self.question_count,
            "current_index": self.current_index,
            "current_question": question.as_dict() if question else None,
            "current_answer": response.answer if response else None,
            "progress_percentage": self.progress_percentage,
            "can_go_next": self.can_go_next,
            "can_go_previous": self.can_go_previous,
            "can_submit": self.can_submit,
            "is_last_question": self.is_last_question,
            "result_id": self.result_id,
            "error": self.error,
        }


def transition(session: QuizSession, event: QuizEvent) -> QuizSession:
    """Apply ``event`` and return the next session state.

    Raises ``IllegalTransitionError`` for any event the current phase does not
    accept. A ``QuestionsLoaded`` that arrives after cancellation is ignored.
    """
    phase = session.phase

    if isinstance(event, QuestionsLoaded):
        if phase is QuizPhase.CANCELLED:
            return session
        if phase is not QuizPhase.LOADING:
            raise _illegal(session, event)
        questions = tuple(event.questions) or (FALLBACK_QUESTION,)
        return replace(
            session,
            phase=QuizPhase.ACTIVE,
            questions=questions,
            responses=(None,) * len(questions),
            current_index=0,
        )

    if isinstance(event, Cancel):
        if phase not in (QuizPhase.LOADING, QuizPhase.ACTIVE):
            raise _illegal(session, event)
        return replace(session, phase=QuizPhase.CANCELLED)

    if isinstance(event, SelectAnswer):
        question = session.current_question
        if phase is not QuizPhase.ACTIVE or question is None:
            raise _illegal(session, event)
        if event.answer not in question.options:
            raise IllegalTransitionError(
                f"'{event.answer}' is not an option of question {session.current_index + 1}"
            )
        responses = list(session.responses)
        responses[session.current_index] = QuestionResponse(
            question_index=session.current_index, answer=event.answer
        )
        return replace(session, responses=tuple(responses), error=None)

    if isinstance(event, Next):
        if not session.can_go_next:
            raise _illegal(session, event)
        return replace(session, current_index=session.current_index + 1)

    if isinstance(event, Previous):
        if not session.can_go_previous:
            raise _illegal(session, event)
        return replace(session, current_index=session.current_index - 1)

    if isinstance(event, Submit):
        if not session.can_submit:
            raise _illegal(session, event)
        return replace(session, phase=QuizPhase.SUBMITTING, error=None)

    if isinstance(event, SubmitSucceeded):
        if phase is not QuizPhase.SUBMITTING:
            raise _illegal(session, event)
        return replace(session, phase=QuizPhase.COMPLETE, result_id=event.result_id)

    if isinstance(event, SubmitFailed):
        if phase is not QuizPhase.SUBMITTING:
            raise _illegal(session, event)
        # Back to the editable last question with every answer kept
        return replace(
            session,
            phase=QuizPhase.ACTIVE,
            current_index=len(session.questions) - 1,
            error=event.reason,
        )

    raise _illegal(session, event)


def _illegal(session: QuizSession, event: QuizEvent) -> IllegalTransitionError:
    return IllegalTransitionError(
        f"{type(event).__name__} is not allowed while the quiz is {session.phase.value} "
        f"(question {session.current_index + 1} of {session.question_count})"
    )


@dataclass(slots=True)
class QuizSessionRegistry:
    """In-memory quiz sessions of this process, keyed by session id.

    Sessions leave the registry once they are complete or cancelled.
    """

    sessions: dict[str, QuizSession] = field(default_factory=dict)

    def open(
        self, *, user_email: str, assessment: AssessmentDefinition, profile: UserProfile
    ) -> QuizSession:
        session = QuizSession(
            id=str(uuid4()),
            user_email=user_email,
            assessment=assessment,
            profile=profile,
            started_at=datetime.now(UTC),
        )
        self.sessions[session.id] = session
        return session

    def get(self, session_id: str, user_email: str) -> QuizSession:
        session = self.sessions.get(session_id)
        if session is None or session.user_email != user_email:
            raise QuizSessionNotFoundError(f"Quiz session '{session_id}' not found")
        return session

    def apply(self, session_id: str, user_email: str, event: QuizEvent) -> QuizSession:
        current = self.get(session_id, user_email)
        updated = transition(current, event)
        if updated.phase is not current.phase:
            logger.debug(
                "quiz_phase_changed",
                session_id=session_id,
                quiz_event=type(event).__name__,
                from_phase=current.phase.value,
                to_phase=updated.phase.value,
            )
        if _is_closed(current, updated):
            self.discard(session_id)
        else:
            self.sessions[session_id] = updated
        return updated

    def discard(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


def _is_closed(current: QuizSession, updated: QuizSession) -> bool:
    if updated.phase is QuizPhase.COMPLETE:
        return True
    # A cancel during loading stays registered until the pending questions arrive
    return updated.phase is QuizPhase.CANCELLED and current.phase is not QuizPhase.LOADING
