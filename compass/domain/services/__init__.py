"""Domain services."""

from compass.domain.services.careers import CareerService
from compass.domain.services.dashboard import DashboardService
from compass.domain.services.discovery import DiscoveryService, SearchOutcome
from compass.domain.services.goals import GoalNotFoundError, GoalService
from compass.domain.services.portfolio import PortfolioItemNotFoundError, PortfolioService
from compass.domain.services.profile import PersistenceFailure, ProfileLoadFailure, ProfileService
from compass.domain.services.quiz import (
    AssessmentAlreadyCompletedError,
    AssessmentNotFoundError,
    QuizService,
)
from compass.domain.services.quiz_session import (
    IllegalTransitionError,
    QuizPhase,
    QuizSession,
    QuizSessionNotFoundError,
    QuizSessionRegistry,
)

__all__ = [
    "AssessmentAlreadyCompletedError",
    "AssessmentNotFoundError",
    "CareerService",
    "DashboardService",
    "DiscoveryService",
    "GoalNotFoundError",
    "GoalService",
    "IllegalTransitionError",
    "PersistenceFailure",
    "PortfolioItemNotFoundError",
    "PortfolioService",
    "ProfileLoadFailure",
    "ProfileService",
    "QuizPhase",
    "QuizService",
    "QuizSession",
    "QuizSessionNotFoundError",
    "QuizSessionRegistry",
    "SearchOutcome",
]
