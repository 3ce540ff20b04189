"""Domain layer."""

from compass.domain.models import (
    AssessmentDefinition,
    AssessmentResult,
    GeneratedQuestion,
    Insights,
    QuestionResponse,
    User,
    UserProfile,
)

__all__ = [
    "AssessmentDefinition",
    "AssessmentResult",
    "GeneratedQuestion",
    "Insights",
    "QuestionResponse",
    "User",
    "UserProfile",
]
