"""
Recipe Catalog - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up the page
configuration and shows the backend status with links to the recipe pages.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_📖_Recipes.py`) appear
as pages in the sidebar navigation.

Run with:
    streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and cookbook
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import streamlit as st

from utils.api_client import get_backend_url, get_health_status
from utils.favorites import get_favorites
from ui.feedback import show_error
from ui.layout import page_header
from ui.styles import load_global_styles

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Catalog",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="expanded",
)

load_global_styles()

with st.sidebar:
    st.markdown("### 🍳 **Recipe Catalog**")
    st.divider()
    st.markdown(f"**Favorites:** {len(get_favorites().ids)}")

page_header("Recipe Catalog", "Browse, search and share your favorite recipes.")

health = get_health_status()
if health:
    st.success(
        f"Backend online · {health.get('name', 'API')} v{health.get('version', '?')} · "
        f"storage: {health.get('storage', 'unknown')}"
    )
else:
    show_error(
        "Backend is offline.",
        hint=f"Start it with `uvicorn api.main:app --reload` (expected at {get_backend_url()}).",
    )

st.page_link("pages/01_📖_Recipes.py", label="Browse recipes", icon="📖")
