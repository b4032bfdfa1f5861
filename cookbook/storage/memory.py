"""
In-memory recipe store.

This module provides a process-local recipe store backed by a dictionary keyed
by recipe id. It is the default backend when no DATABASE_URL is configured.

The store:
- Assigns ids from a monotonically increasing counter
- Guards every read and write with a lock, since FastAPI runs sync endpoints
  on a threadpool
- Hands out copies, so callers cannot mutate stored records behind its back

Note: Recipes are lost when the process exits. Use the database backend for
anything that must survive a restart.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from cookbook.models import DEFAULT_AUTHOR_ID, Recipe, RecipeCreate, RecipeUpdate
from cookbook.storage.base import (
    ORDERINGS,
    RecipeStorage,
    ensure_complete,
    ensure_valid_changes,
    name_sort_key,
    validate_criterion,
    validate_page,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _primary_key(field: str) -> Callable[[Recipe], object]:
    if field == "name":
        return lambda r: (name_sort_key(r.name), r.name)
    return lambda r: getattr(r, field)


def _matches(recipe: Recipe, needle: str) -> bool:
    """Case-insensitive substring match on name, description, ingredients and tags."""
    if needle in recipe.name.casefold() or needle in recipe.description.casefold():
        return True
    if any(needle in ingredient.casefold() for ingredient in recipe.ingredients):
        return True
    return any(needle in tag.casefold() for tag in recipe.tags)


class MemoryRecipeStorage(RecipeStorage):
    """Recipe store holding all records in a dict for the lifetime of the process."""
    backend = "memory"

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._recipes: Dict[int, Recipe] = {}
        self._next_id = 1
        self._lock = threading.RLock()
        self._clock = clock

    def _ordered(self, criterion: str) -> List[Recipe]:
        """Snapshot of all recipes in the given order. Caller must hold the lock."""
        field, direction, id_direction = ORDERINGS[criterion]
        recipes = list(self._recipes.values())
        # Stable sorts: tie-break first, then the primary key.
        recipes.sort(key=lambda r: r.id, reverse=id_direction == "desc")
        recipes.sort(key=_primary_key(field), reverse=direction == "desc")
        return recipes

    @staticmethod
    def _page(recipes: List[Recipe], limit: int, offset: int) -> List[Recipe]:
        return [r.model_copy(deep=True) for r in recipes[offset:offset + limit]]

    def get_many(self, limit: int, offset: int) -> List[Recipe]:
        return self.sort_by("newest", limit, offset)

    def get_by_id(self, recipe_id: int) -> Optional[Recipe]:
        with self._lock:
            recipe = self._recipes.get(recipe_id)
            return recipe.model_copy(deep=True) if recipe else None

    def get_by_author(self, author_id: int) -> List[Recipe]:
        with self._lock:
            matched = [r for r in self._recipes.values() if r.author_id == author_id]
            matched.sort(key=lambda r: r.id)
            return [r.model_copy(deep=True) for r in matched]

    def count(self) -> int:
        with self._lock:
            return len(self._recipes)

    def create(self, recipe: RecipeCreate) -> Recipe:
        ensure_complete(recipe)
        data = recipe.model_dump(exclude={"author_id"})
        with self._lock:
            recipe_id = self._next_id
            self._next_id += 1
            stored = Recipe(
                **data,
                id=recipe_id,
                author_id=DEFAULT_AUTHOR_ID,
                rating=0,
                rating_count=0,
                created_at=self._clock(),
                updated_at=None,
            )
            self._recipes[recipe_id] = stored
        logger.debug(f"Created recipe {recipe_id} in memory store")
        return stored.model_copy(deep=True)

    def update(self, recipe_id: int, changes: RecipeUpdate) -> Optional[Recipe]:
        updates = changes.changes()
        ensure_valid_changes(updates)
        with self._lock:
            existing = self._recipes.get(recipe_id)
            if existing is None:
                return None
            if not updates:
                return existing.model_copy(deep=True)
            updates["updated_at"] = self._clock()
            updated = existing.model_copy(update=updates, deep=True)
            self._recipes[recipe_id] = updated
            return updated.model_copy(deep=True)

    def delete(self, recipe_id: int) -> bool:
        with self._lock:
            return self._recipes.pop(recipe_id, None) is not None

    def search(self, query: str, limit: int, offset: int) -> List[Recipe]:
        validate_page(limit, offset)
        needle = (query or "").strip().casefold()
        if not needle:
            return self.get_many(limit, offset)
        with self._lock:
            matched = [r for r in self._ordered("newest") if _matches(r, needle)]
            return self._page(matched, limit, offset)

    def filter_by_tags(self, tags: List[str], limit: int, offset: int) -> List[Recipe]:
        validate_page(limit, offset)
        wanted = set(tags)
        if not wanted:
            return self.get_many(limit, offset)
        with self._lock:
            matched = [r for r in self._ordered("newest") if wanted.issubset(r.tags)]
            return self._page(matched, limit, offset)

    def sort_by(self, criterion: str, limit: int, offset: int) -> List[Recipe]:
        validate_criterion(criterion)
        validate_page(limit, offset)
        with self._lock:
            return self._page(self._ordered(criterion), limit, offset)
