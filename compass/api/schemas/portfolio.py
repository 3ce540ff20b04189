from __future__ import annotations

from compass.domain.models import PortfolioCategory
from pydantic import BaseModel


class PortfolioItemResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: PortfolioCategory | None = None
    date: str | None = None
    link: str | None = None
    file_url: str | None = None
    created_date: str
    updated_date: str


class PortfolioResponse(BaseModel):
    items: list[PortfolioItemResponse]


class ChecklistEntry(BaseModel):
    item: str
    description: str


class PortfolioChecklistResponse(BaseModel):
    career_field: str | None = None
    checklist: list[ChecklistEntry]
    degraded: bool = False
