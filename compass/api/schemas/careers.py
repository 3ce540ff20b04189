from __future__ import annotations

from pydantic import BaseModel, Field


class CareerRecommendationItem(BaseModel):
    field: str
    match_percentage: float
    reasoning: str
    key_alignments: list[str] = Field(default_factory=list)
    growth_potential: str
    next_steps: str


class CareerRecommendationsResponse(BaseModel):
    recommendations: list[CareerRecommendationItem]
    selected_career_path: dict[str, str] | None = None
    degraded: bool = Field(
        False, description="True when new recommendations could not be generated"
    )


class SelectPathRequest(BaseModel):
    field: str = Field(..., min_length=1, max_length=200)


class SelectPathResponse(BaseModel):
    selected_career_path: dict[str, str]


class RoadmapRequest(BaseModel):
    career_field: str = Field(..., min_length=1, max_length=200)


class RoadmapResponse(BaseModel):
    career_field: str
    technical_skills: list[str] = Field(default_factory=list)
    soft_skills: list[str] = Field(default_factory=list)
    key_experiences: list[str] = Field(default_factory=list)
    degraded: bool = False
