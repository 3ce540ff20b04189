from __future__ import annotations

from typing import Any

from compass.domain.services.discovery import DEFAULT_MAX_TUITION
from pydantic import BaseModel, Field


class MentorSearchRequest(BaseModel):
    field: str | None = None
    experience: str | None = None
    location: str | None = None


class MentorSearchResponse(BaseModel):
    mentors: list[dict[str, Any]]
    degraded: bool = False


class MentorOptInResponse(BaseModel):
    is_mentor: bool


class JobSearchRequest(BaseModel):
    field: str | None = None
    location: str | None = None
    experience: str | None = None
    salary: str | None = None


class JobSearchResponse(BaseModel):
    jobs: list[dict[str, Any]]
    degraded: bool = False


class UniversitySearchRequest(BaseModel):
    major: str | None = None
    career_field: str | None = None
    location: str | None = None
    max_tuition: int = Field(DEFAULT_MAX_TUITION, ge=0)
    part_time_jobs: bool = False
    boarding: bool = False


class UniversitySearchResponse(BaseModel):
    universities: list[dict[str, Any]]
    degraded: bool = False


class FieldTrendItem(BaseModel):
    field: str = ""
    reason: str = ""


class MarketTrendsResponse(BaseModel):
    growing_fields: list[FieldTrendItem]
    declining_fields: list[FieldTrendItem]
    degraded: bool = False


class CurrencyConversionRequest(BaseModel):
    amount: float = Field(..., gt=0)
    from_currency: str = Field("USD", min_length=3, max_length=3)
    to_currency: str = Field("EUR", min_length=3, max_length=3)


class CurrencyConversionResponse(BaseModel):
    converted_amount: float | None = None
    exchange_rate: float | None = None
    from_currency: str
    to_currency: str
    original_amount: float
    degraded: bool = False


class SearchOptionsResponse(BaseModel):
    mentor_fields: list[str]
    job_fields: list[str]
    university_majors: list[str]
    experience_levels: list[str]
    currencies: dict[str, str]
