from __future__ import annotations

from compass.api.deps import (
    ANY_ROLE,
    get_entity_store,
    get_file_storage,
    get_llm_service,
    require_roles,
)
from compass.api.schemas.portfolio import (
    PortfolioChecklistResponse,
    PortfolioItemResponse,
    PortfolioResponse,
)
from compass.domain import User
from compass.domain.models import PortfolioCategory
from compass.domain.services.portfolio import (
    PortfolioItemNotFoundError,
    PortfolioService,
    Upload,
)
from compass.domain.services.profile import PersistenceFailure
from compass.infrastructure.repositories.entity_store import EntityStore
from compass.libs.file_storage import FileStorageError, FileStorageProtocol
from compass.libs.llm import LLMProtocol
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

router = APIRouter(prefix="/portfolio", tags=["Portfolio"])


def _portfolio_service(
    store: EntityStore = Depends(get_entity_store),  # noqa: B008
    llm: LLMProtocol = Depends(get_llm_service),  # noqa: B008
    storage: FileStorageProtocol = Depends(get_file_storage),  # noqa: B008
) -> PortfolioService:
    return PortfolioService(store, llm, storage)


async def _read_upload(file: UploadFile | None) -> Upload | None:
    if file is None:
        return None
    content = await file.read()
    if not content:
        return None
    return Upload(filename=file.filename or "upload", content=content)


@router.get("", response_model=PortfolioResponse)
async def list_items(
    service: PortfolioService = Depends(_portfolio_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> PortfolioResponse:
    """Return the caller's portfolio, most recent ``date`` first."""
    items = await service.list_items(user.email)
    return PortfolioResponse(items=[PortfolioItemResponse(**item.as_dict()) for item in items])


@router.post("", response_model=PortfolioItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    title: str = Form(..., min_length=1, max_length=200),
    description: str | None = Form(None),
    category: PortfolioCategory | None = Form(None),
    date: str | None = Form(None, description="ISO date (YYYY-MM-DD)"),
    link: str | None = Form(None),
    file: UploadFile | None = File(None),
    service: PortfolioService = Depends(_portfolio_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> PortfolioItemResponse:
    data = {
        "title": title,
        "description": description,
        "category": category.value if category else None,
        "date": date,
        "link": link,
    }
    try:
        item = await service.save(user.email, data, upload=await _read_upload(file))
    except FileStorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return PortfolioItemResponse(**item.as_dict())


@router.put("/{item_id}", response_model=PortfolioItemResponse)
async def update_item(
    item_id: str,
    title: str = Form(..., min_length=1, max_length=200),
    description: str | None = Form(None),
    category: PortfolioCategory | None = Form(None),
    date: str | None = Form(None),
    link: str | None = Form(None),
    file: UploadFile | None = File(None),
    service: PortfolioService = Depends(_portfolio_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> PortfolioItemResponse:
    """Replace an item's fields; the stored file is kept unless a new one is uploaded."""
    data = {
        "title": title,
        "description": description,
        "category": category.value if category else None,
        "date": date,
        "link": link,
    }
    try:
        item = await service.save(
            user.email, data, item_id=item_id, upload=await _read_upload(file)
        )
    except PortfolioItemNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except FileStorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return PortfolioItemResponse(**item.as_dict())


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    service: PortfolioService = Depends(_portfolio_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> None:
    try:
        await service.delete(user.email, item_id)
    except PortfolioItemNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except PersistenceFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


@router.get("/checklist", response_model=PortfolioChecklistResponse)
async def portfolio_checklist(
    service: PortfolioService = Depends(_portfolio_service),
    user: User = Depends(require_roles(ANY_ROLE)),
) -> PortfolioChecklistResponse:
    """Essential portfolio components for the selected career path."""
    profile = await service.profiles.me(user.email)
    outcome = await service.checklist(user.email)
    return PortfolioChecklistResponse(
        career_field=profile.career_path,
        checklist=outcome.items,
        degraded=outcome.degraded,
    )
