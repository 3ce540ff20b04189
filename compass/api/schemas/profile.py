from __future__ import annotations

from typing import Any

from compass.domain.models import DEFAULT_EDUCATION_STATUS
from pydantic import BaseModel, Field


class AcademicInfo(BaseModel):
    education_status: str = Field(DEFAULT_EDUCATION_STATUS, min_length=1)
    current_education_details: str | None = None


class PersonalBackground(BaseModel):
    age: int | None = Field(None, ge=5, le=120)
    location: str | None = None
    family_background: str | None = None
    hobbies: list[str] = Field(default_factory=list)
    current_challenges: list[str] = Field(default_factory=list)
    future_goals: str | None = None
    preferred_work_environment: str | None = None
    financial_considerations: str | None = None


class OnboardingRequest(BaseModel):
    full_name: str | None = None
    academic_info: AcademicInfo
    personal_background: PersonalBackground = Field(default_factory=PersonalBackground)


class Option(BaseModel):
    value: str
    label: str


class OnboardingOptionsResponse(BaseModel):
    education_statuses: list[Option]
    hobbies: list[str]
    challenges: list[str]
    family_backgrounds: list[Option]
    future_goals: list[Option]
    work_environments: list[Option]
    financial_considerations: list[Option]


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    academic_info: dict[str, Any] = Field(default_factory=dict)
    personal_background: dict[str, Any] = Field(default_factory=dict)
    career_recommendations: list[dict[str, Any]] = Field(default_factory=list)
    selected_career_path: dict[str, Any] | None = None
    assessment_progress: dict[str, Any] = Field(default_factory=dict)
    is_mentor: bool = False


class RecentInsight(BaseModel):
    result_id: str
    assessment_id: str | None = None
    assessment_title: str = ""
    primary_traits: list[str] = Field(default_factory=list)
    created_date: str


class NextAssessment(BaseModel):
    id: str
    title: str
    category: str


class DashboardResponse(BaseModel):
    profile: ProfileResponse
    completed_count: int
    total_count: int
    completion_percentage: int
    next_assessment: NextAssessment | None = None
    recent_insights: list[RecentInsight]
    career_recommendation_count: int


class ProfileSummaryResponse(BaseModel):
    profile: ProfileResponse
    completed_count: int
    total_count: int
    completion_percentage: int
    insights_by_category: dict[str, list[dict[str, Any]]]
    traits: list[str]
    strengths: list[str]
    recent_results: list[dict[str, Any]]
