from __future__ import annotations

from collections.abc import Callable

from compass.api.deps import (
    ANY_ROLE,
    get_entity_store,
    get_llm_service,
    get_quiz_registry,
    require_roles,
)
from compass.api.schemas.assessments import AnswerRequest, QuizSessionResponse
from compass.domain import User
from compass.domain.services.quiz import QuizService
from compass.domain.services.quiz_session import (
    IllegalTransitionError,
    QuizSession,
    QuizSessionNotFoundError,
    QuizSessionRegistry,
)
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.llm import LLMProtocol
from fastapi import APIRouter, Depends, HTTPException, status

router = APIRouter(prefix="/sessions", tags=["Quiz"])


def _quiz_service(
    store: EntityStore = Depends(get_entity_store),  # noqa: B008
    llm: LLMProtocol = Depends(get_llm_service),  # noqa: B008
    registry: QuizSessionRegistry = Depends(get_quiz_registry),  # noqa: B008
) -> QuizService:
    return QuizService(store, llm, registry)


def _run(action: Callable[[], QuizSession]) -> QuizSessionResponse:
    try:
        session = action()
    except QuizSessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except IllegalTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    return QuizSessionResponse(**session.as_dict())


@router.get("/{session_id}", response_model=QuizSessionResponse)
async def get_session(
    session_id: str,
    service: QuizService = Depends(_quiz_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    return _run(lambda: service.get(user=user, session_id=session_id))


@router.post("/{session_id}/answer", response_model=QuizSessionResponse)
async def answer_question(
    session_id: str,
    payload: AnswerRequest,
    service: QuizService = Depends(_quiz_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    """Select an option for the current question (overwrites a previous answer)."""
    return _run(lambda: service.answer(user=user, session_id=session_id, answer=payload.answer))


@router.post("/{session_id}/next", response_model=QuizSessionResponse)
async def next_question(
    session_id: str,
    service: QuizService = Depends(_quiz_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    return _run(lambda: service.next(user=user, session_id=session_id))


@router.post("/{session_id}/previous", response_model=QuizSessionResponse)
async def previous_question(
    session_id: str,
    service: QuizService = Depends(_quiz_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    return _run(lambda: service.previous(user=user, session_id=session_id))


@router.post("/{session_id}/cancel", response_model=QuizSessionResponse)
async def cancel_quiz(
    session_id: str,
    service: QuizService = Depends(_quiz_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    return _run(lambda: service.cancel(user=user, session_id=session_id))


@router.post("/{session_id}/submit", response_model=QuizSessionResponse)
async def submit_quiz(
    session_id: str,
    service: QuizService = Depends(_quiz_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> QuizSessionResponse:
    """
    Submit the attempt for scoring.

    - Only allowed on the last question once it is answered
    - On success the session is ``complete`` and carries ``result_id``
    - On failure the session is back to ``active`` with ``error`` set
    """
    try:
        session = await service.submit(user=user, session_id=session_id)
    except QuizSessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except IllegalTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    return QuizSessionResponse(**session.as_dict())
