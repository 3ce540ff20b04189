from .entity_store import (
    Entity,
    EntityNotFoundError,
    EntityStore,
    EntityStoreError,
    SqlEntityStore,
    VersionConflictError,
)

__all__ = [
    "Entity",
    "EntityNotFoundError",
    "EntityStore",
    "EntityStoreError",
    "SqlEntityStore",
    "VersionConflictError",
]
