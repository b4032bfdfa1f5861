"""
Favorite Recipes Module.

Favorites are kept on the client only: a set of recipe ids in Streamlit's
session_state. Nothing is sent to the backend.

The Favorites class works on any mutable mapping, so it can be tested with a
plain dict instead of st.session_state.

# NOTE: Favorites last for the current Streamlit session. A page refresh starts
    with an empty set.
"""

from typing import Any, Dict, List, MutableMapping, Optional, Set

import streamlit as st

# Session state key for the favorite recipe ids
FAVORITES_KEY = "favorite_recipe_ids"


class Favorites:
    """Set of favorite recipe ids stored under FAVORITES_KEY in a mapping."""

    def __init__(self, store: MutableMapping[str, Any]):
        self._store = store
        if FAVORITES_KEY not in self._store:
            self._store[FAVORITES_KEY] = set()

    @property
    def ids(self) -> Set[int]:
        return self._store[FAVORITES_KEY]

    def is_favorite(self, recipe_id: int) -> bool:
        return recipe_id in self.ids

    def add(self, recipe_id: int) -> None:
        self.ids.add(recipe_id)

    def remove(self, recipe_id: int) -> None:
        self.ids.discard(recipe_id)

    def toggle(self, recipe_id: int) -> bool:
        """
        Flip the favorite state of a recipe.

        Returns:
            True if the recipe is a favorite afterwards
        """
        if self.is_favorite(recipe_id):
            self.remove(recipe_id)
            return False
        self.add(recipe_id)
        return True

    def filter(self, recipes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Keep only the favorite recipes, preserving order."""
        return [r for r in recipes if r.get("id") in self.ids]


def get_favorites(store: Optional[MutableMapping[str, Any]] = None) -> Favorites:
    """Favorites of the current Streamlit session (or of the given mapping)."""
    return Favorites(st.session_state if store is None else store)
