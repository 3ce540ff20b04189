from __future__ import annotations

from pydantic import BaseModel, Field


class AssessmentItem(BaseModel):
    id: str
    title: str
    category: str
    description: str = ""
    duration_minutes: int = 0
    completed: bool = False


class AssessmentCatalogResponse(BaseModel):
    assessments: list[AssessmentItem]
    completed_count: int
    total_count: int
    completion_percentage: int


class QuizQuestion(BaseModel):
    question: str
    options: list[str]
    dimension: str


class QuizSessionResponse(BaseModel):
    session_id: str
    assessment_id: str
    assessment_title: str
    phase: str = Field(..., description="loading | active | submitting | complete | cancelled")
    question_count: int
    current_index: int
    current_question: QuizQuestion | None = None
    current_answer: str | None = None
    progress_percentage: int
    can_go_next: bool
    can_go_previous: bool
    can_submit: bool
    is_last_question: bool
    result_id: str | None = None
    error: str | None = Field(None, description="Why the last submission did not go through")


class AnswerRequest(BaseModel):
    answer: str = Field(..., min_length=1)
