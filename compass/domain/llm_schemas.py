"""
Response models for LLM calls.

Each model doubles as the JSON schema sent with the prompt and as the
validator for the answer (see ``compass.libs.llm``).
"""

from __future__ import annotations

from typing import Any

from compass.domain.models import GoalCategory
from pydantic import BaseModel, Field, field_validator


class QuestionItem(BaseModel):
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=1)
    dimension: str


class QuestionSet(BaseModel):
    questions: list[QuestionItem]


class InsightsPayload(BaseModel):
    primary_traits: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    development_areas: list[str] = Field(default_factory=list)
    summary: str = ""


class ScoringResponse(BaseModel):
    scores: dict[str, float] = Field(
        default_factory=dict, description="Score per measured dimension on a 0-100 scale"
    )
    insights: InsightsPayload = Field(default_factory=InsightsPayload)

    @field_validator("scores", "insights", mode="before")
    @classmethod
    def null_section_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class CareerRecommendation(BaseModel):
    field: str
    match_percentage: float = Field(..., ge=0, le=100)
    reasoning: str
    key_alignments: list[str] = Field(default_factory=list)
    growth_potential: str
    next_steps: str


class CareerRecommendations(BaseModel):
    recommendations: list[CareerRecommendation]


class SkillRoadmap(BaseModel):
    technical_skills: list[str]
    soft_skills: list[str]
    key_experiences: list[str]


class SuggestedGoal(BaseModel):
    title: str
    description: str
    category: GoalCategory


class GoalSuggestions(BaseModel):
    suggested_goals: list[SuggestedGoal]


class ChecklistItem(BaseModel):
    item: str
    description: str


class PortfolioChecklist(BaseModel):
    checklist: list[ChecklistItem]


class Mentor(BaseModel):
    name: str
    title: str
    company: str = ""
    experience_years: str = ""
    specialization: str
    bio: str = ""
    platform: str
    profile_url: str
    skills: list[str] = Field(default_factory=list)
    mentoring_focus: str = ""
    availability: str = ""
    cost: str = ""


class MentorResults(BaseModel):
    mentors: list[Mentor] = Field(default_factory=list)


class JobListing(BaseModel):
    title: str
    company: str
    location: str
    summary: str = ""
    salary_range: str = ""
    experience_required: str = ""
    link: str


class JobResults(BaseModel):
    jobs: list[JobListing] = Field(default_factory=list)


class University(BaseModel):
    name: str
    location: str
    description: str
    tuition_cost: str = ""
    website: str
    program_highlights: str = ""


class UniversityResults(BaseModel):
    universities: list[University] = Field(default_factory=list)


class FieldTrend(BaseModel):
    field: str = ""
    reason: str = ""


class MarketTrends(BaseModel):
    growing_fields: list[FieldTrend] = Field(default_factory=list)
    declining_fields: list[FieldTrend] = Field(default_factory=list)


class CurrencyConversion(BaseModel):
    converted_amount: float
    exchange_rate: float
    from_currency: str
    to_currency: str
    original_amount: float
