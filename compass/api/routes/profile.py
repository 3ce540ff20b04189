from __future__ import annotations

import structlog
from compass.api.deps import ANY_ROLE, get_entity_store, require_roles
from compass.api.schemas.profile import (
    DashboardResponse,
    NextAssessment,
    OnboardingOptionsResponse,
    OnboardingRequest,
    ProfileResponse,
    ProfileSummaryResponse,
    RecentInsight,
)
from compass.domain import User
from compass.domain import reference_data as ref
from compass.domain.services.dashboard import DashboardService
from compass.domain.services.profile import PersistenceFailure, ProfileService
from compass.infrastructure.repositories.entity_store import EntityStore
from fastapi import APIRouter, Depends, HTTPException, status

router = APIRouter(tags=["Profile"])
logger = structlog.get_logger()


@router.get("/welcome", response_model=OnboardingOptionsResponse)
async def onboarding_options() -> OnboardingOptionsResponse:
    """Option lists for the onboarding form."""
    return OnboardingOptionsResponse(
        education_statuses=ref.EDUCATION_STATUS_OPTIONS,
        hobbies=ref.HOBBY_OPTIONS,
        challenges=ref.CHALLENGE_OPTIONS,
        family_backgrounds=ref.FAMILY_BACKGROUND_OPTIONS,
        future_goals=ref.FUTURE_GOAL_OPTIONS,
        work_environments=ref.WORK_ENVIRONMENT_OPTIONS,
        financial_considerations=ref.FINANCIAL_CONSIDERATION_OPTIONS,
    )


@router.post("/welcome", response_model=ProfileResponse)
async def save_onboarding(
    payload: OnboardingRequest,
    store: EntityStore = Depends(get_entity_store),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> ProfileResponse:
    """Store the onboarding form; the profile is created on first save."""
    service = ProfileService(store)
    try:
        profile = await service.save_onboarding(
            user.email,
            academic_info=payload.academic_info.model_dump(),
            personal_background=payload.personal_background.model_dump(),
            full_name=payload.full_name,
        )
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    await logger.ainfo("onboarding_saved", education_status=profile.education_status)
    return ProfileResponse(**profile.as_dict())


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    store: EntityStore = Depends(get_entity_store),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> DashboardResponse:
    """Progress overview; redirects to ``/welcome`` until onboarding is done."""
    result = await DashboardService(store).dashboard(user.email)
    overview = result.overview
    next_assessment = overview.next_assessment()

    return DashboardResponse(
        profile=ProfileResponse(**overview.profile.as_dict()),
        completed_count=len(overview.results),
        total_count=overview.total_count,
        completion_percentage=overview.completion_percentage,
        next_assessment=(
            NextAssessment(
                id=next_assessment.id,
                title=next_assessment.title,
                category=next_assessment.category,
            )
            if next_assessment
            else None
        ),
        recent_insights=[RecentInsight(**item) for item in result.recent_insights],
        career_recommendation_count=len(overview.profile.career_recommendations),
    )


@router.get("/profile", response_model=ProfileSummaryResponse)
async def profile_summary(
    store: EntityStore = Depends(get_entity_store),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> ProfileSummaryResponse:
    summary = await DashboardService(store).profile_summary(user.email)
    return ProfileSummaryResponse(
        **{**summary, "profile": ProfileResponse(**summary["profile"])}
    )
