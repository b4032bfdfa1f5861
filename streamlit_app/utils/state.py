"""
Browse State Management Module.

This module wraps Streamlit's session_state to keep the browse page's query
(RecipeQueryState), the pages loaded so far (RecipePager) and the debounced
search box value across reruns.

# NOTE: This module uses session_state, so the state persists only for the current
    Streamlit session. When the user refreshes the page, everything is reset.
"""

from typing import Any, Dict, List

import streamlit as st

from utils.api_client import list_recipes
from utils.query_builder import DebouncedValue, RecipePager, RecipeQueryState

# Session state keys
QUERY_KEY = "recipe_query"
PAGER_KEY = "recipe_pager"
SEARCH_KEY = "recipe_search_debounce"


def get_query_state() -> RecipeQueryState:
    if QUERY_KEY not in st.session_state:
        st.session_state[QUERY_KEY] = RecipeQueryState()
    return st.session_state[QUERY_KEY]


def get_pager() -> RecipePager:
    if PAGER_KEY not in st.session_state:
        st.session_state[PAGER_KEY] = RecipePager(get_query_state().page_size)
    return st.session_state[PAGER_KEY]


def get_search_debounce() -> DebouncedValue:
    if SEARCH_KEY not in st.session_state:
        st.session_state[SEARCH_KEY] = DebouncedValue()
    return st.session_state[SEARCH_KEY]


def load_recipes(load_more: bool = False) -> List[Dict[str, Any]]:
    """
    Return the recipes to show for the current query.

    Fetches the first page after the query changed (or on first visit), and
    the next page when load_more is True.

    Returns:
        All recipes loaded so far for the current query
    """
    query = get_query_state()
    pager = get_pager()
    pager.sync(query.fingerprint())

    if not pager.pages or load_more:
        pager.load_next(lambda offset: list_recipes(query.to_params(offset)))
    return pager.items


def invalidate_recipes() -> None:
    """Drop loaded pages so the next render refetches (after create/update/delete)."""
    get_pager().reset()
