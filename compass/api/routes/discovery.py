from __future__ import annotations

import structlog
from compass.api.deps import ANY_ROLE, get_entity_store, get_llm_service, require_roles
from compass.api.schemas.discovery import (
    CurrencyConversionRequest,
    CurrencyConversionResponse,
    FieldTrendItem,
    JobSearchRequest,
    JobSearchResponse,
    MarketTrendsResponse,
    MentorOptInResponse,
    MentorSearchRequest,
    MentorSearchResponse,
    SearchOptionsResponse,
    UniversitySearchRequest,
    UniversitySearchResponse,
)
from compass.domain import User
from compass.domain import reference_data as ref
from compass.domain.services.discovery import DiscoveryService
from compass.domain.services.profile import PersistenceFailure, ProfileService
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import LLMProtocol
from fastapi import APIRouter, Depends, HTTPException, status

router = APIRouter(tags=["Discovery"])
logger = structlog.get_logger()


def _discovery_service(
    llm: LLMProtocol = Depends(get_llm_service),  # noqa: B008
) -> DiscoveryService:
    return DiscoveryService(llm)


@router.get("/search/options", response_model=SearchOptionsResponse)
async def search_options() -> SearchOptionsResponse:
    return SearchOptionsResponse(
        mentor_fields=ref.MENTOR_FIELDS,
        job_fields=ref.JOB_FIELDS,
        university_majors=ref.UNIVERSITY_MAJORS,
        experience_levels=ref.EXPERIENCE_LEVELS,
        currencies=ref.SUPPORTED_CURRENCIES,
    )


@router.post("/mentors/search", response_model=MentorSearchResponse)
async def search_mentors(
    payload: MentorSearchRequest,
    service: DiscoveryService = Depends(_discovery_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> MentorSearchResponse:
    outcome = await service.search_mentors(
        field=payload.field, experience=payload.experience, location=payload.location
    )
    return MentorSearchResponse(mentors=outcome.items, degraded=outcome.degraded)


@router.post("/mentors/opt-in", response_model=MentorOptInResponse)
async def opt_in_as_mentor(
    store: EntityStore = Depends(get_entity_store),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> MentorOptInResponse:
    try:
        profile = await ProfileService(store).opt_in_as_mentor(user.email)
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    await logger.ainfo("mentor_opted_in")
    return MentorOptInResponse(is_mentor=profile.is_mentor)


@router.post("/jobs/search", response_model=JobSearchResponse)
async def search_jobs(
    payload: JobSearchRequest,
    service: DiscoveryService = Depends(_discovery_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> JobSearchResponse:
    outcome = await service.search_jobs(
        field=payload.field,
        location=payload.location,
        experience=payload.experience,
        salary=payload.salary,
    )
    return JobSearchResponse(jobs=outcome.items, degraded=outcome.degraded)


@router.post("/universities/search", response_model=UniversitySearchResponse)
async def search_universities(
    payload: UniversitySearchRequest,
    service: DiscoveryService = Depends(_discovery_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> UniversitySearchResponse:
    outcome = await service.search_universities(**payload.model_dump())
    return UniversitySearchResponse(universities=outcome.items, degraded=outcome.degraded)


@router.get("/market-trends", response_model=MarketTrendsResponse)
async def market_trends(
    service: DiscoveryService = Depends(_discovery_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> MarketTrendsResponse:
    trends, degraded = await service.market_trends()
    return MarketTrendsResponse(
        growing_fields=[FieldTrendItem(**item.model_dump()) for item in trends.growing_fields],
        declining_fields=[FieldTrendItem(**item.model_dump()) for item in trends.declining_fields],
        degraded=degraded,
    )


@router.post("/currency/convert", response_model=CurrencyConversionResponse)
async def convert_currency(
    payload: CurrencyConversionRequest,
    service: DiscoveryService = Depends(_discovery_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> CurrencyConversionResponse:
    from_currency = payload.from_currency.upper()
    to_currency = payload.to_currency.upper()
    unsupported = [
        code for code in (from_currency, to_currency) if code not in ref.SUPPORTED_CURRENCIES
    ]
    if unsupported:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported currency: {', '.join(unsupported)}",
        )

    conversion = await service.convert_currency(
        amount=payload.amount, from_currency=from_currency, to_currency=to_currency
    )
    if conversion is None:
        return CurrencyConversionResponse(
            from_currency=from_currency,
            to_currency=to_currency,
            original_amount=payload.amount,
            degraded=True,
        )
    return CurrencyConversionResponse(**conversion.model_dump())
