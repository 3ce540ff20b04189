"""
Assessment result persistence.

Saving a finished quiz is two writes: the ``UserAssessmentResult`` record
and the owner's ``assessment_progress``. When the second write fails the
first is deleted again so a result never exists without the matching
progress entry.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from compass.domain.models import AssessmentResult, round_half_up
from compass.domain.services.profile import (
    PersistenceFailure,
    ProfileLoadFailure,
    ProfileService,
)
from compass.domain.services.quiz_session import QuizSession
from compass.domain.services.scoring import ScoringOutcome
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import EntityStore, EntityStoreError

logger = structlog.get_logger()


class ResultPersister:
    """Writes a scored quiz and advances the owner's progress."""

    def __init__(self, store: EntityStore, profiles: ProfileService) -> None:
        self.store = store
        self.profiles = profiles

    async def has_result(self, user_email: str, assessment_id: str) -> bool:
        try:
            existing = await self.store.filter(
                EntityType.USER_ASSESSMENT_RESULT,
                {"user_email": user_email, "assessment_id": assessment_id},
                limit=1,
            )
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not check existing results: {exc}") from exc
        return bool(existing)

    async def persist(
        self,
        session: QuizSession,
        outcome: ScoringOutcome,
        *,
        finished_at: datetime | None = None,
    ) -> str:
        """Store the result of ``session`` and return the new result id."""
        user_email = session.user_email
        assessment_id = session.assessment.id

        if await self.has_result(user_email, assessment_id):
            raise PersistenceFailure(
                f"A result for assessment {assessment_id} already exists for {user_email}"
            )

        finished = finished_at or datetime.now(UTC)
        elapsed_minutes = (finished - session.started_at).total_seconds() / 60
        result = AssessmentResult(
            assessment_id=assessment_id,
            user_email=user_email,
            responses=session.answered_responses(),
            scores=outcome.scores,
            insights=outcome.insights,
            completion_time_minutes=max(0, round_half_up(elapsed_minutes)),
        )

        try:
            entity = await self.store.create(EntityType.USER_ASSESSMENT_RESULT, result.as_record())
        except EntityStoreError as exc:
            raise PersistenceFailure(f"Could not save assessment result: {exc}") from exc

        try:
            catalog = await self.store.list(EntityType.ASSESSMENT, sort="created_date")
            profile = await self.profiles.record_assessment_completion(
                user_email,
                assessment_id,
                catalog_ids=[assessment.id for assessment in catalog],
            )
        except (PersistenceFailure, ProfileLoadFailure, EntityStoreError) as exc:
            await self._compensate(entity.id)
            await logger.aerror(
                "assessment_progress_update_failed",
                result_id=entity.id,
                assessment_id=assessment_id,
                error=str(exc),
            )
            raise PersistenceFailure(f"Could not update assessment progress: {exc}") from exc

        await logger.ainfo(
            "assessment_result_saved",
            result_id=entity.id,
            assessment_id=assessment_id,
            completion_time_minutes=result.completion_time_minutes,
            completion_percentage=profile.assessment_progress.get("completion_percentage"),
        )
        return entity.id

    async def _compensate(self, result_id: str) -> None:
        try:
            await self.store.delete(EntityType.USER_ASSESSMENT_RESULT, result_id)
        except EntityStoreError as exc:
            await logger.aerror(
                "assessment_result_rollback_failed", result_id=result_id, error=str(exc)
            )
