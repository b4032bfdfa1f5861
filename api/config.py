"""
Configuration management for the recipe catalog.

This module centralizes environment variable loading from the .env file at the
project root. It is imported early by both the backend (api/main.py) and the
frontend (streamlit_app/app.py) so that .env is loaded before any other code
reads the environment.

In production .env usually does not exist; load_dotenv() then does nothing
and the platform's environment variables are used instead.

Environment Variables:
- RECIPE_STORAGE: Optional, "memory" or "database" (defaults to "database" when
  DATABASE_URL is set, otherwise "memory")
- DATABASE_URL: Required for the database backend (SQLAlchemy URL)
- SEED_RECIPES: Optional, seed sample recipes into an empty store (default: true)
- EVENT_LOG_FILE: Optional, JSONL event log path (default: events.log)
- BACKEND_URL: Optional, backend URL for the Streamlit client
  (defaults to http://localhost:8000 for local dev)
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}


def load_env_file() -> None:
    """
    Load environment variables from the .env file at the project root.

    The project root is found by going up from this file's location
    (api/config.py -> project root). Existing environment variables take
    precedence over values in .env. Safe to call multiple times.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


class StorageConfig:
    """Configuration for the recipe storage backend."""

    @staticmethod
    def get_database_url() -> Optional[str]:
        """
        Get the SQLAlchemy database URL from environment.

        Returns:
            Database URL string or None if not set
        """
        return os.getenv("DATABASE_URL") or None

    @staticmethod
    def get_backend() -> str:
        """
        Get the storage backend name.

        Returns:
            RECIPE_STORAGE lower-cased, or "database" when DATABASE_URL is set
            and RECIPE_STORAGE is not, otherwise "memory"
        """
        backend = (os.getenv("RECIPE_STORAGE") or "").strip().lower()
        if backend:
            return backend
        return "database" if StorageConfig.get_database_url() else "memory"

    @staticmethod
    def seed_enabled() -> bool:
        """Whether to seed the sample recipes into an empty store (default: True)."""
        return _env_flag("SEED_RECIPES", True)


class ClientConfig:
    """Configuration for the Streamlit client."""

    @staticmethod
    def get_backend_url() -> str:
        """
        Get the backend API URL.

        Returns:
            Backend URL without trailing slash (default: "http://localhost:8000")
        """
        return os.getenv("BACKEND_URL", "http://localhost:8000").rstrip("/")


def validate_storage_config() -> None:
    """
    Validate the storage configuration before the app starts.

    Raises:
        RuntimeError: If RECIPE_STORAGE is unknown, or is "database" without DATABASE_URL
    """
    backend = StorageConfig.get_backend()
    if backend not in ("memory", "database"):
        raise RuntimeError(
            f"Invalid RECIPE_STORAGE '{backend}'. Valid options: memory, database"
        )
    if backend == "database" and not StorageConfig.get_database_url():
        raise RuntimeError(
            "Missing required environment variables:\n"
            "  - DATABASE_URL (required when RECIPE_STORAGE=database)\n\n"
            "Please create a .env file at the project root with these variables."
        )
