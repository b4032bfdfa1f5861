"""
Storage backends for the recipe catalog.

The backend is chosen once at process start by create_storage() and handed
to the API app factory; nothing else in the code base instantiates one.
"""

import logging
from typing import Optional

from cookbook.db import create_db_engine
from cookbook.storage.base import RecipeStorage
from cookbook.storage.memory import MemoryRecipeStorage
from cookbook.storage.sql import SqlRecipeStorage

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "database")

__all__ = [
    "BACKENDS",
    "MemoryRecipeStorage",
    "RecipeStorage",
    "SqlRecipeStorage",
    "create_storage",
]


def create_storage(backend: str, database_url: Optional[str] = None) -> RecipeStorage:
    """
    Instantiate the configured storage backend.

    Args:
        backend: "memory" or "database"
        database_url: SQLAlchemy URL, required for the database backend

    Returns:
        A ready-to-use RecipeStorage (tables created for the database backend)

    Raises:
        RuntimeError: If the backend is unknown or DATABASE_URL is missing
    """
    if backend == "memory":
        logger.info("Using in-memory recipe storage")
        return MemoryRecipeStorage()

    if backend == "database":
        if not database_url:
            raise RuntimeError(
                "RECIPE_STORAGE=database requires DATABASE_URL to be set. "
                "Please add it to the .env file at the project root."
            )
        logger.info("Using database recipe storage")
        return SqlRecipeStorage(create_db_engine(database_url))

    raise RuntimeError(f"Unknown RECIPE_STORAGE '{backend}'. Valid options: {', '.join(BACKENDS)}")
