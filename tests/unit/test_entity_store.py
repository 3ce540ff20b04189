from __future__ import annotations

import pytest
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.repositories.entity_store import (
    EntityNotFoundError,
    SqlEntityStore,
    VersionConflictError,
)


@pytest.mark.asyncio
async def test_create_and_get(store: SqlEntityStore) -> None:
    created = await store.create(EntityType.GOAL, {"title": "Learn SQL", "user_email": "a@x.io"})

    loaded = await store.get(EntityType.GOAL, created.id)

    assert loaded is not None
    assert loaded.version == 1
    assert loaded.get("title") == "Learn SQL"
    assert await store.get(EntityType.PORTFOLIO_ITEM, created.id) is None


@pytest.mark.asyncio
async def test_filter_by_owner_and_fields(store: SqlEntityStore) -> None:
    await store.create(
        EntityType.GOAL, {"title": "A", "status": "completed", "user_email": "a@x.io"}
    )
    await store.create(
        EntityType.GOAL, {"title": "B", "status": "in_progress", "user_email": "a@x.io"}
    )
    await store.create(
        EntityType.GOAL, {"title": "C", "status": "completed", "user_email": "b@x.io"}
    )

    owned = await store.filter(EntityType.GOAL, {"user_email": "a@x.io"})
    completed = await store.filter(
        EntityType.GOAL, {"user_email": "a@x.io", "status": "completed"}
    )

    assert {goal.get("title") for goal in owned} == {"A", "B"}
    assert [goal.get("title") for goal in completed] == ["A"]


@pytest.mark.asyncio
async def test_users_are_filtered_by_email(store: SqlEntityStore) -> None:
    await store.create(EntityType.USER, {"email": "a@x.io"})
    await store.create(EntityType.USER, {"email": "b@x.io"})

    found = await store.filter(EntityType.USER, {"email": "b@x.io"}, limit=1)

    assert [user.get("email") for user in found] == ["b@x.io"]


@pytest.mark.asyncio
async def test_sort_and_limit(store: SqlEntityStore) -> None:
    for title, date in (("old", "2023-01-01"), ("new", "2024-06-01"), ("undated", None)):
        await store.create(EntityType.PORTFOLIO_ITEM, {"title": title, "date": date})

    newest_first = await store.list(EntityType.PORTFOLIO_ITEM, sort="-date")
    oldest_first = await store.list(EntityType.PORTFOLIO_ITEM, sort="date", limit=2)

    assert [item.get("title") for item in newest_first] == ["new", "old", "undated"]
    assert [item.get("title") for item in oldest_first] == ["old", "new"]


@pytest.mark.asyncio
async def test_update_merges_and_bumps_version(store: SqlEntityStore) -> None:
    created = await store.create(EntityType.USER, {"email": "a@x.io", "full_name": "Ada"})

    updated = await store.update(
        EntityType.USER, created.id, {"is_mentor": True}, expected_version=1
    )

    assert updated.version == 2
    assert updated.data == {"email": "a@x.io", "full_name": "Ada", "is_mentor": True}


@pytest.mark.asyncio
async def test_stale_version_is_rejected(store: SqlEntityStore) -> None:
    created = await store.create(EntityType.USER, {"email": "a@x.io"})
    await store.update(EntityType.USER, created.id, {"full_name": "First"}, expected_version=1)

    with pytest.raises(VersionConflictError) as exc_info:
        await store.update(EntityType.USER, created.id, {"full_name": "Second"}, expected_version=1)

    assert exc_info.value.current_version == 2
    current = await store.get(EntityType.USER, created.id)
    assert current is not None
    assert current.get("full_name") == "First"


@pytest.mark.asyncio
async def test_delete(store: SqlEntityStore) -> None:
    created = await store.create(EntityType.GOAL, {"title": "Temp"})

    await store.delete(EntityType.GOAL, created.id)

    assert await store.get(EntityType.GOAL, created.id) is None
    with pytest.raises(EntityNotFoundError):
        await store.delete(EntityType.GOAL, created.id)


@pytest.mark.asyncio
async def test_as_dict_flattens_metadata(store: SqlEntityStore) -> None:
    created = await store.create(EntityType.GOAL, {"title": "Flat"})

    payload = created.as_dict()

    assert payload["id"] == created.id
    assert payload["title"] == "Flat"
    assert "created_date" in payload
    assert "updated_date" in payload
