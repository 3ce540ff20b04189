"""
User profile aggregate.

All writes to a ``User`` entity go through ``ProfileService._apply`` which
reads the current version, applies a pure mutation and writes it back with
``expected_version``. A concurrent writer makes the store raise
``VersionConflictError``; the mutation is then re-applied on a fresh read.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import structlog
from compass.core.config import get_settings
from compass.domain.models import UserProfile, completion_percentage
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import (
    EntityStore,
    EntityStoreError,
    VersionConflictError,
)

logger = structlog.get_logger()

ProfileMutation = Callable[[UserProfile], dict[str, Any]]


def assessment_total(catalog_size: int) -> int:
    """Denominator for completion progress: the configured total or the catalog size."""
    return get_settings().assessment_total_count or catalog_size


class ProfileLoadFailure(Exception):
    """Raised when the current user's profile cannot be loaded."""


class PersistenceFailure(Exception):
    """Raised when a write to the entity store does not land."""


class ProfileService:
    """Reads and serialised writes for the current user's profile."""

    def __init__(self, store: EntityStore, *, max_attempts: int | None = None) -> None:
        self.store = store
        self.max_attempts = max_attempts or get_settings().profile_update_max_attempts

    async def me(self, email: str) -> UserProfile:
        profile = await self.find(email)
        if profile is None:
            raise ProfileLoadFailure(f"No profile for {email}")
        return profile

    async def find(self, email: str) -> UserProfile | None:
        try:
            entities = await self.store.filter(EntityType.USER, {"email": email}, limit=1)
        except EntityStoreError as exc:
            raise ProfileLoadFailure(f"Could not load profile for {email}: {exc}") from exc
        return UserProfile.from_entity(entities[0]) if entities else None

    async def save_onboarding(
        self,
        email: str,
        *,
        academic_info: dict[str, Any],
        personal_background: dict[str, Any],
        full_name: str | None = None,
    ) -> UserProfile:
        """Store the welcome form, creating the profile on first save."""
        patch: dict[str, Any] = {
            "academic_info": academic_info,
            "personal_background": personal_background,
        }
        if full_name:
            patch["full_name"] = full_name

        existing = await self.find(email)
        if existing is None:
            try:
                entity = await self.store.create(EntityType.USER, {"email": email, **patch})
            except EntityStoreError as exc:
                raise PersistenceFailure(f"Could not create profile for {email}") from exc
            await logger.ainfo("profile_created", user_email=email)
            return UserProfile.from_entity(entity)

        return await self._apply(email, lambda _profile: patch)

    async def update(self, email: str, patch: dict[str, Any]) -> UserProfile:
        return await self._apply(email, lambda _profile: dict(patch))

    async def record_assessment_completion(
        self,
        email: str,
        assessment_id: str,
        *,
        catalog_ids: Sequence[str],
        total: int | None = None,
    ) -> UserProfile:
        """Add ``assessment_id`` to the completed list and recompute progress."""
        total_count = total or assessment_total(len(catalog_ids))

        def mutate(profile: UserProfile) -> dict[str, Any]:
            completed = profile.completed_assessments
            if assessment_id not in completed:
                completed.append(assessment_id)
            percentage = completion_percentage(len(completed), total_count)
            next_recommended = next(
                (catalog_id for catalog_id in catalog_ids if catalog_id not in completed), None
            )
            return {
                "assessment_progress": {
                    "completed_assessments": completed,
                    "completion_percentage": percentage,
                    "next_recommended": next_recommended,
                }
            }

        return await self._apply(email, mutate)

    async def set_career_recommendations(
        self, email: str, recommendations: list[dict[str, Any]]
    ) -> UserProfile:
        return await self._apply(
            email, lambda _profile: {"career_recommendations": recommendations}
        )

    async def select_career_path(self, email: str, field: str) -> UserProfile:
        return await self._apply(email, lambda _profile: {"selected_career_path": {"field": field}})

    async def opt_in_as_mentor(self, email: str) -> UserProfile:
        return await self._apply(email, lambda _profile: {"is_mentor": True})

    async def _apply(self, email: str, mutate: ProfileMutation) -> UserProfile:
        for attempt in range(1, self.max_attempts + 1):
            profile = await self.me(email)
            patch = mutate(profile)
            try:
                entity = await self.store.update(
                    EntityType.USER, profile.id, patch, expected_version=profile.version
                )
            except VersionConflictError as exc:
                await logger.awarning(
                    "profile_update_conflict",
                    user_email=email,
                    attempt=attempt,
                    expected_version=profile.version,
                    current_version=exc.current_version,
                )
                continue
            except EntityStoreError as exc:
                raise PersistenceFailure(f"Could not update profile for {email}: {exc}") from exc
            return UserProfile.from_entity(entity)

        raise PersistenceFailure(
            f"Profile for {email} kept changing; gave up after {self.max_attempts} attempts"
        )
