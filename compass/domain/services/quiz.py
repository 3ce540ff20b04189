from __future__ import annotations

import structlog
from compass.domain.llm_schemas import QuestionSet
from compass.domain.models import AssessmentDefinition, GeneratedQuestion, User, UserProfile
from compass.domain.services.profile import PersistenceFailure, ProfileService
from compass.domain.services.prompts import build_question_prompt
from compass.domain.services.quiz_session import (
    FALLBACK_QUESTION,
    Cancel,
    Next,
    Previous,
    QuestionsLoaded,
    QuizSession,
    QuizSessionNotFoundError,
    QuizSessionRegistry,
    SelectAnswer,
    Submit,
    SubmitFailed,
    SubmitSucceeded,
)
from compass.domain.services.results import ResultPersister
from compass.domain.services.scoring import ScoringService
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import GenerationFailure, LLMProtocol

logger = structlog.get_logger()

SCORING_FAILED_MESSAGE = "We could not analyse your answers right now. Please submit again."
SAVING_FAILED_MESSAGE = "We could not save your results right now. Please submit again."


class AssessmentNotFoundError(Exception):
    """Raised when the requested catalog assessment does not exist."""


class AssessmentAlreadyCompletedError(Exception):
    """Raised when the user already has a result for the assessment."""


class QuizService:
    """Runs quiz attempts: question generation, navigation and submission."""

    def __init__(
        self,
        store: EntityStore,
        llm: LLMProtocol,
        registry: QuizSessionRegistry,
        *,
        profiles: ProfileService | None = None,
    ) -> None:
        self.store = store
        self.llm = llm
        self.registry = registry
        self.profiles = profiles or ProfileService(store)
        self.scoring = ScoringService(llm)
        self.persister = ResultPersister(store, self.profiles)

    async def open(self, *, user: User, assessment_id: str) -> QuizSession:
        """Register a new attempt in ``loading``; questions arrive via ``load_questions``."""
        assessment = await self.get_assessment(assessment_id)
        profile = await self.profiles.me(user.email)

        if await self.persister.has_result(user.email, assessment.id):
            raise AssessmentAlreadyCompletedError(
                f"Assessment '{assessment.title}' has already been completed"
            )

        session = self.registry.open(user_email=user.email, assessment=assessment, profile=profile)
        await logger.ainfo(
            "quiz_session_started",
            session_id=session.id,
            assessment_id=assessment.id,
            category=assessment.category,
        )
        return session

    async def load_questions(self, session: QuizSession) -> QuizSession | None:
        """Generate questions for ``session`` and move it to ``active``.

        A session cancelled while generating stays cancelled and leaves the
        registry. Returns ``None`` when the session is already gone.
        """
        questions = await self.generate_questions(session.assessment, session.profile)
        try:
            return self.registry.apply(session.id, session.user_email, QuestionsLoaded(questions))
        except QuizSessionNotFoundError:
            await logger.ainfo("quiz_session_closed_before_load", session_id=session.id)
            return None

    async def generate_questions(
        self, assessment: AssessmentDefinition, profile: UserProfile
    ) -> tuple[GeneratedQuestion, ...]:
        prompt = build_question_prompt(assessment, profile)
        try:
            result = await self.llm.invoke(prompt.text, QuestionSet)
        except GenerationFailure as exc:
            await logger.awarning(
                "question_generation_failed",
                assessment_id=assessment.id,
                category=assessment.category,
                error=str(exc),
            )
            return (FALLBACK_QUESTION,)

        questions = tuple(
            GeneratedQuestion(
                question=item.question,
                options=tuple(item.options),
                dimension=item.dimension,
            )
            for item in result.questions
        )
        if len(questions) != prompt.question_count:
            await logger.ainfo(
                "question_count_mismatch",
                assessment_id=assessment.id,
                requested=prompt.question_count,
                received=len(questions),
            )
        return questions

    async def get_assessment(self, assessment_id: str) -> AssessmentDefinition:
        entity = await self.store.get(EntityType.ASSESSMENT, assessment_id)
        if entity is None:
            raise AssessmentNotFoundError(f"Assessment '{assessment_id}' not found")
        return AssessmentDefinition.from_entity(entity)

    def get(self, *, user: User, session_id: str) -> QuizSession:
        return self.registry.get(session_id, user.email)

    def answer(self, *, user: User, session_id: str, answer: str) -> QuizSession:
        return self.registry.apply(session_id, user.email, SelectAnswer(answer))

    def next(self, *, user: User, session_id: str) -> QuizSession:
        return self.registry.apply(session_id, user.email, Next())

    def previous(self, *, user: User, session_id: str) -> QuizSession:
        return self.registry.apply(session_id, user.email, Previous())

    def cancel(self, *, user: User, session_id: str) -> QuizSession:
        return self.registry.apply(session_id, user.email, Cancel())

    async def submit(self, *, user: User, session_id: str) -> QuizSession:
        """Score and persist the attempt.

        Scoring or persistence failures put the session back on its last
        question with the answers intact and the reason in ``error``.
        """
        session = self.registry.apply(session_id, user.email, Submit())

        try:
            outcome = await self.scoring.score(
                session.assessment, session.questions, session.responses, session.profile
            )
        except GenerationFailure as exc:
            await logger.awarning(
                "assessment_scoring_failed", session_id=session_id, error=str(exc)
            )
            return self.registry.apply(session_id, user.email, SubmitFailed(SCORING_FAILED_MESSAGE))

        try:
            result_id = await self.persister.persist(session, outcome)
        except PersistenceFailure as exc:
            await logger.awarning(
                "assessment_persist_failed", session_id=session_id, error=str(exc)
            )
            return self.registry.apply(session_id, user.email, SubmitFailed(SAVING_FAILED_MESSAGE))

        await logger.ainfo("quiz_session_completed", session_id=session_id, result_id=result_id)
        return self.registry.apply(session_id, user.email, SubmitSucceeded(result_id))
