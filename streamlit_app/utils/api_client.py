"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls to the FastAPI backend go through functions in this module.

Key principles:
- Centralized error handling for network issues
- Graceful degradation when the backend is unavailable
- Failures are shown to the user with a generic st.error message; failed
  mutations are not retried

# NOTE: When adding new endpoints, follow this pattern:
    - Create a function that takes parameters needed for the endpoint
    - Use requests.get/post/put/delete with a timeout
    - Return parsed JSON (dict/list) or None on error
    - Report errors via st.error for user visibility
    - Never let exceptions bubble up to crash the Streamlit app
"""

from typing import Any, Dict, List, Optional

import requests
import streamlit as st

from api.config import ClientConfig

REQUEST_TIMEOUT = 10


def get_backend_url() -> str:
    """
    Get the backend API base URL.

    Returns:
        BACKEND_URL without trailing slash, or http://localhost:8000 for local development
    """
    return ClientConfig.get_backend_url()


def _error_message(response: requests.Response, fallback: str) -> str:
    """Pull the "message" field out of an API error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


def _show_failure(exc: requests.exceptions.RequestException, action: str) -> None:
    if isinstance(exc, requests.exceptions.Timeout):
        st.error("Request timed out. The backend may be slow or unreachable.")
    elif isinstance(exc, requests.exceptions.ConnectionError):
        st.error("Could not connect to backend. Please check that the backend is running.")
    elif isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
        if exc.response.status_code == 400:
            st.error(_error_message(exc.response, f"Failed to {action}."))
        elif exc.response.status_code == 404:
            st.error("Recipe not found. It may have been deleted.")
        else:
            st.error(f"Failed to {action}. Please try again later.")
    else:
        st.error(f"Failed to {action}. Please try again later.")


@st.cache_data(ttl=60)  # Cache for 60 seconds to avoid hitting backend too frequently
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check backend health status by calling the /health endpoint.

    Returns:
        The /health response (status, name, version, uptime_seconds, storage)
        when status is "ok", or None if the backend is unreachable or unhealthy.
    """
    try:
        response = requests.get(f"{get_backend_url()}/health", timeout=5)
        response.raise_for_status()
        data = response.json()
        return data if data.get("status") == "ok" else None
    except requests.exceptions.RequestException:
        return None


def list_recipes(params: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """
    Fetch one page of recipes.

    Args:
        params: Query parameters, usually RecipeQueryState.to_params(offset)

    Returns:
        List of recipe dictionaries (camelCase keys), or None on error
    """
    try:
        response = requests.get(
            f"{get_backend_url()}/api/recipes",
            params=params,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _show_failure(e, "load recipes")
        return None


def get_recipe(recipe_id: int) -> Optional[Dict[str, Any]]:
    """
    Fetch a single recipe.

    Returns:
        Recipe dictionary, or None if it does not exist or the request failed.
        A missing recipe is not reported with st.error; the caller decides.
    """
    try:
        response = requests.get(f"{get_backend_url()}/api/recipes/{recipe_id}", timeout=REQUEST_TIMEOUT)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _show_failure(e, "load the recipe")
        return None


def create_recipe(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Create a recipe.

    Args:
        payload: camelCase recipe body (see utils.forms.build_recipe_payload)

    Returns:
        The created recipe, or None on error
    """
    try:
        response = requests.post(f"{get_backend_url()}/api/recipes", json=payload, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _show_failure(e, "create the recipe")
        return None


def update_recipe(recipe_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Partially update a recipe.

    Args:
        recipe_id: Recipe to update
        changes: camelCase fields to change; fields not present stay as they are

    Returns:
        The updated recipe, or None on error
    """
    try:
        response = requests.put(
            f"{get_backend_url()}/api/recipes/{recipe_id}",
            json=changes,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _show_failure(e, "update the recipe")
        return None


def delete_recipe(recipe_id: int) -> bool:
    """
    Delete a recipe.

    Returns:
        True if the backend confirmed the deletion (204)
    """
    try:
        response = requests.delete(f"{get_backend_url()}/api/recipes/{recipe_id}", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return True
    except requests.exceptions.RequestException as e:
        _show_failure(e, "delete the recipe")
        return False
