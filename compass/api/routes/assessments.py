from __future__ import annotations

from compass.api.deps import (
    ANY_ROLE,
    get_entity_store,
    get_llm_service,
    get_quiz_registry,
    require_roles,
)
from compass.api.schemas.assessments import AssessmentCatalogResponse, QuizSessionResponse
from compass.domain import User
from compass.domain.services.dashboard import DashboardService
from compass.domain.services.profile import PersistenceFailure
from compass.domain.services.quiz import (
    AssessmentAlreadyCompletedError,
    AssessmentNotFoundError,
    QuizService,
)
from compass.domain.services.quiz_session import QuizSessionRegistry
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import LLMProtocol
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

router = APIRouter(prefix="/assessments", tags=["Assessments"])


@router.get("", response_model=AssessmentCatalogResponse)
async def list_assessments(
    store: EntityStore = Depends(get_entity_store),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> AssessmentCatalogResponse:
    """Return the assessment catalog with the caller's completion flags."""
    catalog = await DashboardService(store).catalog(user.email)
    return AssessmentCatalogResponse(**catalog)


@router.post(
    "/{assessment_id}/sessions",
    response_model=QuizSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_quiz(
    assessment_id: str,
    background_tasks: BackgroundTasks,
    store: EntityStore = Depends(get_entity_store),
    llm: LLMProtocol = Depends(get_llm_service),
    registry: QuizSessionRegistry = Depends(get_quiz_registry),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    """
    Start a quiz attempt.

    - Returns the session in ``loading``; poll ``GET /sessions/{id}`` until ``active``
    - Questions are generated in the background, personalised to the caller's profile
    - Falls back to a single placeholder question when generation fails
    - The attempt may be cancelled while loading
    - Refuses a second attempt once the assessment has a result
    """
    service = QuizService(store, llm, registry)
    try:
        session = await service.open(user=user, assessment_id=assessment_id)
    except AssessmentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except AssessmentAlreadyCompletedError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    background_tasks.add_task(service.load_questions, session)
    return QuizSessionResponse(**session.as_dict())
