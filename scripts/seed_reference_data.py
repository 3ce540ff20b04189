#!/usr/bin/env python3
"""
Seed the assessment catalog and career fields.

Existing records (matched by title) are left alone, so the script can be
re-run after adding new entries to ``compass.domain.reference_data``.

Run with:
    python scripts/seed_reference_data.py
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from compass.core.logging import setup_logging
from compass.domain.reference_data import ASSESSMENT_DEFINITIONS, CAREER_FIELDS
from compass.infrastructure.db.models import EntityType
from compass.infrastructure.db.session import dispose_engine, get_session_factory
from compass.infrastructure.repositories.entity_store import EntityStore, SqlEntityStore

logger = structlog.get_logger()


async def seed(store: EntityStore, entity_type: EntityType, records: list[dict[str, Any]]) -> int:
    """Create every record whose title is not stored yet; return how many were created."""
    existing = {entity.get("title") for entity in await store.list(entity_type)}
    created = 0
    for record in records:
        if record["title"] in existing:
            continue
        await store.create(entity_type, record)
        created += 1
    return created


async def main() -> None:
    setup_logging(json_output=False)
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            store = SqlEntityStore(session)
            assessments = await seed(store, EntityType.ASSESSMENT, ASSESSMENT_DEFINITIONS)
            fields = await seed(store, EntityType.CAREER_FIELD, CAREER_FIELDS)
        await logger.ainfo("reference_data_seeded", assessments=assessments, career_fields=fields)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
