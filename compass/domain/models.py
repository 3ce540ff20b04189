from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from compass.infrastructure.repositories.entity_store import Entity

DEFAULT_AGE = 18
DEFAULT_EDUCATION_STATUS = "high_school_graduate"


class AssessmentCategory(str, enum.Enum):
    PERSONALITY = "personality"
    STRENGTHS = "strengths"
    INTERESTS = "interests"
    VALUES = "values"
    LEARNING_STYLE = "learning_style"
    COGNITIVE_SKILLS = "cognitive_skills"


class GoalCategory(str, enum.Enum):
    ACADEMIC = "academic"
    SKILL_DEVELOPMENT = "skill_development"
    PERSONAL_GROWTH = "personal_growth"
    CAREER = "career"


class GoalStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PortfolioCategory(str, enum.Enum):
    PROJECT = "project"
    ACHIEVEMENT = "achievement"
    EXPERIENCE = "experience"
    SKILL = "skill"


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    roles: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class AssessmentDefinition:
    """A catalog assessment; owned by the catalog, read-only here."""

    id: str
    title: str
    category: str
    description: str = ""
    duration_minutes: int = 0

    @classmethod
    def from_entity(cls, entity: Entity) -> AssessmentDefinition:
        return cls(
            id=entity.id,
            title=entity.get("title", ""),
            category=entity.get("category", ""),
            description=entity.get("description", "") or "",
            duration_minutes=int(entity.get("duration_minutes") or 0),
        )


@dataclass(slots=True, frozen=True)
class GeneratedQuestion:
    """One LLM-generated multiple choice question; lives for one quiz attempt."""

    question: str
    options: tuple[str, ...]
    dimension: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "dimension": self.dimension,
        }


@dataclass(slots=True, frozen=True)
class QuestionResponse:
    question_index: int
    answer: str

    def as_dict(self) -> dict[str, Any]:
        return {"question_index": self.question_index, "answer": self.answer}


@dataclass(slots=True)
class Insights:
    primary_traits: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    development_areas: list[str] = field(default_factory=list)
    summary: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "primary_traits": list(self.primary_traits),
            "strengths": list(self.strengths),
            "development_areas": list(self.development_areas),
            "summary": self.summary,
        }


@dataclass(slots=True)
class AssessmentResult:
    assessment_id: str
    user_email: str
    responses: list[QuestionResponse]
    scores: dict[str, float]
    insights: Insights
    completion_time_minutes: int

    def as_record(self) -> dict[str, Any]:
        return {
            "assessment_id": self.assessment_id,
            "user_email": self.user_email,
            "responses": [response.as_dict() for response in self.responses],
            "scores": dict(self.scores),
            "insights": self.insights.as_dict(),
            "completion_time_minutes": self.completion_time_minutes,
        }


@dataclass(slots=True)
class UserProfile:
    """Read view over the ``User`` entity."""

    id: str
    email: str
    version: int
    full_name: str | None = None
    academic_info: dict[str, Any] = field(default_factory=dict)
    personal_background: dict[str, Any] = field(default_factory=dict)
    career_recommendations: list[dict[str, Any]] = field(default_factory=list)
    selected_career_path: dict[str, Any] | None = None
    assessment_progress: dict[str, Any] = field(default_factory=dict)
    is_mentor: bool = False

    @classmethod
    def from_entity(cls, entity: Entity) -> UserProfile:
        return cls(
            id=entity.id,
            email=entity.get("email", ""),
            version=entity.version,
            full_name=entity.get("full_name"),
            academic_info=dict(entity.get("academic_info") or {}),
            personal_background=dict(entity.get("personal_background") or {}),
            career_recommendations=list(entity.get("career_recommendations") or []),
            selected_career_path=entity.get("selected_career_path"),
            assessment_progress=dict(entity.get("assessment_progress") or {}),
            is_mentor=bool(entity.get("is_mentor", False)),
        )

    @property
    def age(self) -> int:
        age = self.personal_background.get("age")
        try:
            return int(age) if age not in (None, "") else DEFAULT_AGE
        except (TypeError, ValueError):
            return DEFAULT_AGE

    @property
    def education_status(self) -> str:
        return self.academic_info.get("education_status") or DEFAULT_EDUCATION_STATUS

    @property
    def hobbies(self) -> list[str]:
        return list(self.personal_background.get("hobbies") or [])

    @property
    def challenges(self) -> list[str]:
        return list(self.personal_background.get("current_challenges") or [])

    @property
    def career_path(self) -> str | None:
        if not self.selected_career_path:
            return None
        return self.selected_career_path.get("field") or None

    @property
    def completed_assessments(self) -> list[str]:
        return list(self.assessment_progress.get("completed_assessments") or [])

    @property
    def is_onboarded(self) -> bool:
        return bool(self.academic_info.get("education_status"))

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "academic_info": self.academic_info,
            "personal_background": self.personal_background,
            "career_recommendations": self.career_recommendations,
            "selected_career_path": self.selected_career_path,
            "assessment_progress": self.assessment_progress,
            "is_mentor": self.is_mentor,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (37.5 -> 38)."""
    return int(math.floor(value + 0.5))


def completion_percentage(completed: int, total: int) -> int:
    """Share of ``total`` assessments completed, capped at 100."""
    if total <= 0:
        return 100 if completed else 0
    return min(100, round_half_up(completed / total * 100))
