"""
Layout primitives for consistent page structure.

Provides the page header and section helpers shared by the recipe pages.
"""

import html
from typing import Callable, Optional

import streamlit as st


def _title_block(title: str, subtitle: Optional[str]) -> None:
    st.markdown(f"# {title}")
    if subtitle:
        st.markdown(f'<div class="rc-page-header"><div class="subtitle">{html.escape(subtitle)}</div></div>',
                    unsafe_allow_html=True)


def page_header(title: str, subtitle: Optional[str] = None, right: Optional[Callable[[], None]] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
        right: Optional callable that renders right-side content (e.g., a button)
    """
    if right is None:
        _title_block(title, subtitle)
        return
    col_title, col_right = st.columns([3, 1])
    with col_title:
        _title_block(title, subtitle)
    with col_right:
        right()


def section(title: str, caption: Optional[str] = None) -> None:
    """
    Render a section header with optional caption.

    Args:
        title: Section title
        caption: Optional caption/help text below title
    """
    st.markdown(f"## {title}")
    if caption:
        st.caption(caption)
