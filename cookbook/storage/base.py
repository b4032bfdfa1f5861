"""
Base storage abstract class for recipe persistence.

This module defines the abstract base class that every storage backend must
implement. The route layer only talks to this interface, so the in-memory and
the relational backends are interchangeable and chosen once at startup.

All backends must:
- Return recipes newest-first from get_many, search and filter_by_tags
- Break ordering ties the same way (see ORDERINGS), so results are deterministic
- Report "not found" with None/False instead of raising
- Raise ValidationError for bad input (empty ingredients, unknown sort criterion, ...)
"""

import unicodedata
from abc import ABC, abstractmethod
from typing import List, Optional

from cookbook.exceptions import ValidationError
from cookbook.models import SORT_OPTIONS, Recipe, RecipeCreate, RecipeUpdate

# Ordering keys per sort criterion: (primary key, direction) followed by the id
# tie-break direction. Both backends implement exactly these orderings.
ORDERINGS = {
    "newest": ("created_at", "desc", "desc"),
    "oldest": ("created_at", "asc", "asc"),
    "az": ("name", "asc", "asc"),
    "za": ("name", "desc", "asc"),
    "popular": ("rating", "desc", "asc"),
}


def name_sort_key(name: str) -> str:
    """
    Collation key for name ordering: accents stripped, then case-folded.

    "Éclair" sorts with "eclair", and "apple" before "Banana".
    """
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def validate_criterion(criterion: str) -> str:
    """
    Check a sort criterion against SORT_OPTIONS.

    Raises:
        ValidationError: If the criterion is unknown
    """
    if criterion not in SORT_OPTIONS:
        raise ValidationError.for_field(
            "sort",
            f"'{criterion}' is not a valid sort option. Valid options: {', '.join(SORT_OPTIONS)}",
        )
    return criterion


def validate_page(limit: int, offset: int) -> None:
    """
    Raises:
        ValidationError: If limit or offset is negative
    """
    if limit < 0:
        raise ValidationError.for_field("limit", "must be zero or greater")
    if offset < 0:
        raise ValidationError.for_field("offset", "must be zero or greater")


def ensure_complete(recipe: RecipeCreate) -> None:
    """
    Re-check the invariants the HTTP boundary already validates.

    RecipeCreate.model_construct() skips pydantic validation, so backends
    cannot assume the payload went through it.

    Raises:
        ValidationError: If ingredients or instructions are empty
    """
    errors = []
    if not recipe.name:
        errors.append({"field": "name", "message": "is required"})
    if not recipe.ingredients:
        errors.append({"field": "ingredients", "message": "add at least one ingredient"})
    if not recipe.instructions:
        errors.append({"field": "instructions", "message": "add at least one instruction step"})
    if errors:
        raise ValidationError("Invalid recipe data", errors=errors)


def ensure_valid_changes(changes: dict) -> None:
    """
    Raises:
        ValidationError: If a partial update would empty ingredients or instructions
    """
    errors = []
    for field in ("ingredients", "instructions"):
        if field in changes and not changes[field]:
            errors.append({"field": field, "message": "must contain at least one entry"})
    if errors:
        raise ValidationError("Invalid recipe data", errors=errors)


class RecipeStorage(ABC):
    """
    Abstract base class for all recipe storage backends.

    Attributes:
        backend: Short identifier of the backend ("memory" or "database")
    """
    backend: str

    @abstractmethod
    def get_many(self, limit: int, offset: int) -> List[Recipe]:
        """
        Return recipes newest-first, sliced to [offset, offset + limit).

        Args:
            limit: Maximum number of recipes to return
            offset: Number of recipes to skip

        Returns:
            List of Recipe objects
        """

    @abstractmethod
    def get_by_id(self, recipe_id: int) -> Optional[Recipe]:
        """Return the recipe with the given id, or None if it does not exist."""

    @abstractmethod
    def get_by_author(self, author_id: int) -> List[Recipe]:
        """Return every recipe by the given author in id order (no pagination)."""

    @abstractmethod
    def create(self, recipe: RecipeCreate) -> Recipe:
        """
        Store a new recipe.

        Assigns id and createdAt, zeroes rating and ratingCount and sets the
        author to DEFAULT_AUTHOR_ID.

        Raises:
            ValidationError: If required fields are missing or empty
        """

    @abstractmethod
    def update(self, recipe_id: int, changes: RecipeUpdate) -> Optional[Recipe]:
        """
        Merge the supplied fields into an existing recipe.

        id and createdAt never change. updatedAt is refreshed when at least
        one field is supplied.

        Returns:
            The updated Recipe, or None if the id does not exist
        """

    @abstractmethod
    def delete(self, recipe_id: int) -> bool:
        """Delete a recipe. Returns True if a record existed and was removed."""

    @abstractmethod
    def search(self, query: str, limit: int, offset: int) -> List[Recipe]:
        """
        Case-insensitive substring search over name, description, ingredients and tags.

        A blank query behaves like get_many.
        """

    @abstractmethod
    def filter_by_tags(self, tags: List[str], limit: int, offset: int) -> List[Recipe]:
        """
        Return recipes carrying every one of the given tags (AND semantics).

        An empty tag list behaves like get_many.
        """

    @abstractmethod
    def sort_by(self, criterion: str, limit: int, offset: int) -> List[Recipe]:
        """
        Return recipes ordered by criterion: newest, oldest, az, za or popular.

        Raises:
            ValidationError: If the criterion is unknown
        """

    @abstractmethod
    def count(self) -> int:
        """Number of stored recipes."""

    def seed(self, recipes: List[RecipeCreate]) -> int:
        """
        Insert the given recipes if the store is empty.

        Returns:
            Number of recipes inserted
        """
        if self.count() > 0:
            return 0
        for recipe in recipes:
            self.create(recipe)
        return len(recipes)

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""
