"""
Global CSS Styling for the Recipe Catalog.

This module provides load_global_styles() to inject consistent styling
across all pages, and pill_tag() for the small tag labels on recipe cards.
"""

import html

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the recipe catalog.

    This function:
    - Sets heading weights and a slightly narrower content width
    - Styles recipe cards with rounded corners and a subtle border
    - Styles the tag pills shown on cards and detail pages
    """
    css = """
    <style>
        h1, h2, h3, h4, h5, h6 {
            font-weight: 600 !important;
            letter-spacing: 0.01em !important;
        }

        .block-container {
            max-width: 1200px;
            padding-top: 2rem;
        }

        .rc-page-header .subtitle {
            color: #6b7280;
            margin-top: -0.5rem;
            margin-bottom: 1.5rem;
        }

        .rc-meta {
            color: #6b7280;
            font-size: 0.9rem;
        }

        .pill-tag {
            display: inline-block;
            padding: 0.1rem 0.6rem;
            margin: 0 0.3rem 0.3rem 0;
            border-radius: 999px;
            background: #fef3c7;
            color: #92400e;
            font-size: 0.8rem;
            font-weight: 600;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)


def pill_tag(text: str) -> str:
    """
    Create HTML for a small rounded pill tag (e.g., "Vegan", "Dessert").

    Returns:
        HTML string for the pill tag, with the text escaped
    """
    return f'<span class="pill-tag">{html.escape(text)}</span>'
