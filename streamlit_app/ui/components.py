"""
Recipe UI components shared by the browse and detail pages.

- render_recipe_card: compact card with image, meta line, tags, favorite toggle
- render_tag_pills: tag labels as pills
- render_recipe_form: create/edit form; returns the raw values on submit
"""

from typing import Any, Dict, Optional

import streamlit as st

from cookbook.models import AVAILABLE_TAGS
from ui.styles import pill_tag
from utils.favorites import Favorites
from utils.forms import parse_lines

DETAIL_PAGE = "pages/02_🍽_Recipe_Detail.py"
SELECTED_RECIPE_KEY = "selected_recipe_id"


def open_recipe(recipe_id: int) -> None:
    """Navigate to the detail page for a recipe."""
    st.session_state[SELECTED_RECIPE_KEY] = recipe_id
    st.switch_page(DETAIL_PAGE)


def render_tag_pills(tags) -> None:
    if tags:
        st.markdown("".join(pill_tag(t) for t in tags), unsafe_allow_html=True)


def render_meta_line(recipe: Dict[str, Any]) -> None:
    total = (recipe.get("prepTime") or 0) + (recipe.get("cookTime") or 0)
    st.markdown(
        f'<div class="rc-meta">⏱ {total} min · 🍽 {recipe.get("servings", 1)} servings</div>',
        unsafe_allow_html=True,
    )


def render_recipe_card(recipe: Dict[str, Any], favorites: Favorites, key_prefix: str = "card") -> None:
    """
    Render a recipe card.

    Args:
        recipe: Recipe dictionary from the API (camelCase keys)
        favorites: Favorites of the current session
        key_prefix: Prefix for widget keys, unique per page
    """
    recipe_id = recipe["id"]
    with st.container(border=True):
        if recipe.get("imageUrl"):
            st.image(recipe["imageUrl"], use_container_width=True)
        st.markdown(f"### {recipe.get('name', '')}")
        render_meta_line(recipe)
        description = recipe.get("description", "")
        st.caption(description if len(description) <= 140 else description[:137] + "...")
        render_tag_pills(recipe.get("tags"))

        col_view, col_fav = st.columns([3, 1])
        with col_view:
            if st.button("View recipe", key=f"{key_prefix}_view_{recipe_id}", use_container_width=True):
                open_recipe(recipe_id)
        with col_fav:
            is_fav = favorites.is_favorite(recipe_id)
            if st.button("♥" if is_fav else "♡", key=f"{key_prefix}_fav_{recipe_id}",
                         help="Remove from favorites" if is_fav else "Add to favorites",
                         use_container_width=True):
                favorites.toggle(recipe_id)
                st.rerun()


def render_recipe_form(key: str, initial: Optional[Dict[str, Any]] = None,
                       submit_label: str = "Save recipe") -> Optional[Dict[str, Any]]:
    """
    Render the recipe form.

    Args:
        key: Form key, unique per page
        initial: Prefill values (see utils.forms.form_values_from_recipe)
        submit_label: Label of the submit button

    Returns:
        Form values (snake_case keys, ingredients/instructions as lists) when
        submitted, otherwise None. Validation is left to the caller.
    """
    initial = initial or {}
    with st.form(key, clear_on_submit=False):
        name = st.text_input("Name", value=initial.get("name", ""))
        description = st.text_area("Description", value=initial.get("description", ""), height=80)
        image_url = st.text_input("Image URL (optional)", value=initial.get("image_url", ""))

        col_prep, col_cook, col_serv = st.columns(3)
        with col_prep:
            prep_time = st.number_input("Prep time (min)", min_value=0, step=1,
                                        value=int(initial.get("prep_time", 0)))
        with col_cook:
            cook_time = st.number_input("Cook time (min)", min_value=0, step=1,
                                        value=int(initial.get("cook_time", 1)))
        with col_serv:
            servings = st.number_input("Servings", min_value=0, step=1,
                                       value=int(initial.get("servings", 1)))

        ingredients = st.text_area("Ingredients (one per line)",
                                   value="\n".join(initial.get("ingredients", [])), height=140)
        instructions = st.text_area("Instructions (one step per line)",
                                    value="\n".join(initial.get("instructions", [])), height=160)
        tags = st.multiselect("Tags", AVAILABLE_TAGS, default=initial.get("tags", []))

        submitted = st.form_submit_button(submit_label, type="primary")

    if not submitted:
        return None
    return {
        "name": name,
        "description": description,
        "image_url": image_url,
        "prep_time": int(prep_time),
        "cook_time": int(cook_time),
        "servings": int(servings),
        "ingredients": parse_lines(ingredients),
        "instructions": parse_lines(instructions),
        "tags": tags,
    }
