from __future__ import annotations

from compass.api.deps import ANY_ROLE, get_entity_store, get_llm_service, require_roles
from compass.api.schemas.careers import (
    CareerRecommendationsResponse,
    RoadmapRequest,
    RoadmapResponse,
    SelectPathRequest,
    SelectPathResponse,
)
from compass.domain import User
from compass.domain.services.careers import CareerService
from compass.domain.services.profile import PersistenceFailure
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import GenerationFailure, LLMProtocol
from fastapi import APIRouter, Depends, HTTPException, status

router = APIRouter(prefix="/careers", tags=["Careers"])


@router.get("/recommendations", response_model=CareerRecommendationsResponse)
async def get_recommendations(
    store: EntityStore = Depends(get_entity_store),
    llm: LLMProtocol = Depends(get_llm_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> CareerRecommendationsResponse:
    """Return the recommendations stored on the caller's profile."""
    profile = await CareerService(store, llm).profiles.me(user.email)
    return CareerRecommendationsResponse(
        recommendations=profile.career_recommendations,
        selected_career_path=profile.selected_career_path,
    )


@router.post("/recommendations", response_model=CareerRecommendationsResponse)
async def generate_recommendations(
    store: EntityStore = Depends(get_entity_store),
    llm: LLMProtocol = Depends(get_llm_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> CareerRecommendationsResponse:
    """
    Generate ranked career recommendations from the caller's assessment results.

    When generation fails the previously stored recommendations are returned
    with ``degraded`` set.
    """
    service = CareerService(store, llm)
    try:
        recommendations = await service.generate_recommendations(user.email)
        degraded = False
    except GenerationFailure:
        recommendations = await service.recommendations(user.email)
        degraded = True
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    profile = await service.profiles.me(user.email)
    return CareerRecommendationsResponse(
        recommendations=recommendations,
        selected_career_path=profile.selected_career_path,
        degraded=degraded,
    )


@router.put("/selected-path", response_model=SelectPathResponse)
async def select_career_path(
    payload: SelectPathRequest,
    store: EntityStore = Depends(get_entity_store),
    llm: LLMProtocol = Depends(get_llm_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> SelectPathResponse:
    try:
        profile = await CareerService(store, llm).select_path(user.email, payload.field)
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return SelectPathResponse(selected_career_path=profile.selected_career_path or {})


@router.post("/roadmap", response_model=RoadmapResponse)
async def skill_roadmap(
    payload: RoadmapRequest,
    store: EntityStore = Depends(get_entity_store),
    llm: LLMProtocol = Depends(get_llm_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> RoadmapResponse:
    """Technical skills, soft skills and experiences for a career field."""
    roadmap = await CareerService(store, llm).skill_roadmap(payload.career_field)
    if roadmap is None:
        return RoadmapResponse(career_field=payload.career_field, degraded=True)
    return RoadmapResponse(career_field=payload.career_field, **roadmap.model_dump())
