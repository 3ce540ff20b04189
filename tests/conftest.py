from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
from compass.api.deps import get_db_session, get_file_storage, get_llm_service, get_quiz_registry
from compass.api.main import create_app
from compass.core.config import get_settings
from compass.domain.reference_data import ASSESSMENT_DEFINITIONS, CAREER_FIELDS
from compass.domain.services.quiz_session import QuizSessionRegistry
from compass.infrastructure.db.base import Base
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import Entity, SqlEntityStore
from compass.libs.file_storage import LocalFileStorage
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tests.utils import FakeLLM


@pytest.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def store(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[SqlEntityStore]:
    async with session_factory() as session:
        yield SqlEntityStore(session)


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture()
def registry() -> QuizSessionRegistry:
    return QuizSessionRegistry()


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def app(
    session_factory: async_sessionmaker[AsyncSession],
    fake_llm: FakeLLM,
    registry: QuizSessionRegistry,
    upload_dir: Path,
) -> FastAPI:
    app = create_app()

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_llm_service] = lambda: fake_llm
    app.dependency_overrides[get_quiz_registry] = lambda: registry
    app.dependency_overrides[get_file_storage] = lambda: LocalFileStorage(
        root=upload_dir, base_url="/uploads"
    )
    return app


@pytest.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the app (redirects are not followed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
async def catalog(session_factory: async_sessionmaker[AsyncSession]) -> list[Entity]:
    """The seeded assessment catalog, in catalog (creation) order."""
    async with session_factory() as session:
        store = SqlEntityStore(session)
        for definition in ASSESSMENT_DEFINITIONS:
            await store.create(EntityType.ASSESSMENT, definition)
        for career_field in CAREER_FIELDS:
            await store.create(EntityType.CAREER_FIELD, career_field)
        return await store.list(EntityType.ASSESSMENT, sort="created_date")


@pytest.fixture()
def read_entities(session_factory: async_sessionmaker[AsyncSession]):
    """Read entities through a fresh session, as a separate process would."""

    async def _read(entity_type: EntityType, criteria: dict | None = None) -> list[Entity]:
        async with session_factory() as session:
            return await SqlEntityStore(session).filter(entity_type, criteria or {})

    return _read


@pytest.fixture()
def configured_total(monkeypatch: pytest.MonkeyPatch) -> Iterator[int]:
    """Pin ASSESSMENT_TOTAL_COUNT to 10 for the duration of a test."""
    monkeypatch.setenv("ASSESSMENT_TOTAL_COUNT", "10")
    get_settings.cache_clear()
    yield 10
    get_settings.cache_clear()
