"""
Standardized feedback utilities for consistent error, empty, and loading states.

Provides reusable components for displaying errors, empty states, and loading
indicators on the recipe pages.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_form_errors(errors: dict) -> None:
    """Show one line per invalid form field."""
    if not errors:
        return
    lines = "\n".join(f"- **{field.replace('_', ' ').capitalize()}**: {message}"
                      for field, message in errors.items())
    st.error(f"Please fix the following:\n\n{lines}")


def show_success(message: str) -> None:
    st.toast(message, icon="✅")


def show_empty_state(title: str, subtitle: Optional[str] = None) -> None:
    """
    Display a standardized empty state.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Loading recipes…"):
            recipes = load_recipes()
    """
    with st.spinner(label):
        yield
