"""
UI Styling and Components Module.

This module provides global CSS styling, layout helpers and the recipe
components for the Recipe Catalog Streamlit app.
"""

from ui.styles import load_global_styles, pill_tag
from ui.layout import page_header, section

__all__ = [
    "load_global_styles",
    "pill_tag",
    "page_header",
    "section",
]
