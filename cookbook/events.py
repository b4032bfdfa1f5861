# cookbook/events.py
"""
Event logging for the recipe catalog.

Responsibilities:
- Provide a single log_event(...) function that:
  - Writes a JSONL record (ts, event, payload) to the file named by EVENT_LOG_FILE.
  - Never raises exceptions (events are strictly non-blocking).

- Provide small helper functions for the events the route layer emits:
  - log_recipes_listed(...)
  - log_recipe_created(...)
  - log_recipe_updated(...)
  - log_recipe_deleted(...)
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_EVENT_LOG_FILE = "events.log"


def get_event_log_path() -> Path:
    """
    Resolve the event log path.

    Read on every call so that tests (and operators) can redirect the log by
    changing EVENT_LOG_FILE without reloading the module.
    """
    return Path(os.getenv("EVENT_LOG_FILE", DEFAULT_EVENT_LOG_FILE))


def _write_to_file(record: Dict[str, Any]) -> None:
    """
    Append a single JSON record to the event log as JSONL.
    Never raise exceptions.
    """
    path = get_event_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    except Exception as exc:
        # Last-resort: log at debug level, never raise.
        logger.debug("Failed to write event to %s: %s", path, exc)


def log_event(event: str, payload: Optional[Dict[str, Any]] = None) -> None:
    """
    Core event logger.

    Builds a record with keys ts, event and payload and appends it to the
    event log. Never raises.
    """
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "payload": payload or {},
    }
    _write_to_file(record)


# ---------------------------------------------------------------------------
# Helper functions for common event types
# ---------------------------------------------------------------------------

def log_recipes_listed(
    mode: str,
    result_count: int,
    limit: int,
    offset: int,
    search: Optional[str] = None,
    tags: Optional[List[str]] = None,
    sort: Optional[str] = None,
) -> None:
    """
    Log a recipes_listed event.

    payload:
    {
        "mode": "search" | "tags" | "sort",
        "result_count": 6,
        "limit": 6,
        "offset": 0,
        "search": "pasta",          # only in search mode
        "tags": ["Vegan"],          # only in tags mode
        "sort": "newest"            # only in sort mode
    }
    """
    payload: Dict[str, Any] = {
        "mode": mode,
        "result_count": result_count,
        "limit": limit,
        "offset": offset,
    }
    if search is not None:
        payload["search"] = search
    if tags is not None:
        payload["tags"] = tags
    if sort is not None:
        payload["sort"] = sort

    log_event("recipes_listed", payload)


def log_recipe_created(recipe_id: int, name: str, tags: List[str]) -> None:
    """
    Log a recipe_created event.

    payload:
    {
        "recipe_id": 7,
        "name": "...",
        "tags": ["Dinner", ...]
    }
    """
    log_event("recipe_created", {"recipe_id": recipe_id, "name": name, "tags": tags})


def log_recipe_updated(recipe_id: int, fields: List[str]) -> None:
    """
    Log a recipe_updated event.

    payload:
    {
        "recipe_id": 7,
        "fields": ["name", "tags"]   # attribute names that were sent
    }
    """
    log_event("recipe_updated", {"recipe_id": recipe_id, "fields": sorted(fields)})


def log_recipe_deleted(recipe_id: int) -> None:
    log_event("recipe_deleted", {"recipe_id": recipe_id})
