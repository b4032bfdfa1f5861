"""
Recipe form helpers for the create and edit forms.

Validation here is stricter than the API's: it also enforces minimum lengths,
a cook time of at least one minute, at least one tag, and tags taken from
AVAILABLE_TAGS. The API only rejects records it cannot store.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from cookbook.models import AVAILABLE_TAGS

NAME_MIN_LENGTH = 3
DESCRIPTION_MIN_LENGTH = 10


def parse_lines(text: Optional[str]) -> List[str]:
    """Split a text area into non-blank, stripped lines."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_recipe_form(values: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate the values of the recipe form.

    Args:
        values: Dictionary with name, description, image_url, prep_time,
                cook_time, servings, ingredients (list), instructions (list)
                and tags (list)

    Returns:
        Dictionary mapping field name to error message; empty when valid

    Example:
        >>> validate_recipe_form({"name": "Ok", ...})
        {"name": "Recipe name must be at least 3 characters"}
    """
    errors: Dict[str, str] = {}

    name = (values.get("name") or "").strip()
    if len(name) < NAME_MIN_LENGTH:
        errors["name"] = f"Recipe name must be at least {NAME_MIN_LENGTH} characters"

    description = (values.get("description") or "").strip()
    if len(description) < DESCRIPTION_MIN_LENGTH:
        errors["description"] = f"Description must be at least {DESCRIPTION_MIN_LENGTH} characters"

    image_url = (values.get("image_url") or "").strip()
    if image_url and not is_valid_url(image_url):
        errors["image_url"] = "Please enter a valid URL"

    prep_time = values.get("prep_time")
    if prep_time is None or prep_time < 0:
        errors["prep_time"] = "Prep time cannot be negative"

    cook_time = values.get("cook_time")
    if cook_time is None or cook_time < 1:
        errors["cook_time"] = "Cook time must be at least 1 minute"

    servings = values.get("servings")
    if servings is None or servings < 1:
        errors["servings"] = "Servings must be at least 1"

    if not [i for i in values.get("ingredients") or [] if i and i.strip()]:
        errors["ingredients"] = "Add at least one ingredient"

    if not [i for i in values.get("instructions") or [] if i and i.strip()]:
        errors["instructions"] = "Add at least one instruction step"

    tags = values.get("tags") or []
    if not tags:
        errors["tags"] = "Select at least one tag"
    else:
        unknown = [t for t in tags if t not in AVAILABLE_TAGS]
        if unknown:
            errors["tags"] = f"Unknown tag(s): {', '.join(unknown)}"

    return errors


def build_recipe_payload(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert form values into the JSON body expected by POST/PUT /api/recipes.

    Returns:
        camelCase payload; an empty image URL is sent as null
    """
    image_url = (values.get("image_url") or "").strip()
    return {
        "name": (values.get("name") or "").strip(),
        "description": (values.get("description") or "").strip(),
        "ingredients": [i.strip() for i in values.get("ingredients") or [] if i and i.strip()],
        "instructions": [i.strip() for i in values.get("instructions") or [] if i and i.strip()],
        "imageUrl": image_url or None,
        "prepTime": values.get("prep_time"),
        "cookTime": values.get("cook_time"),
        "servings": values.get("servings"),
        "tags": list(values.get("tags") or []),
    }


def unsupported_tags(recipe: Dict[str, Any]) -> List[str]:
    """Tags of an API recipe that are not in AVAILABLE_TAGS and so cannot be kept by the edit form."""
    return [t for t in recipe.get("tags") or [] if t not in AVAILABLE_TAGS]


def form_values_from_recipe(recipe: Dict[str, Any]) -> Dict[str, Any]:
    """
    Prefill values for the edit form from an API recipe (camelCase keys).

    Tags outside AVAILABLE_TAGS are left out (see unsupported_tags); saving
    the form removes them from the recipe.
    """
    return {
        "name": recipe.get("name", ""),
        "description": recipe.get("description", ""),
        "image_url": recipe.get("imageUrl") or "",
        "prep_time": recipe.get("prepTime", 0),
        "cook_time": recipe.get("cookTime", 1),
        "servings": recipe.get("servings", 1),
        "ingredients": list(recipe.get("ingredients") or []),
        "instructions": list(recipe.get("instructions") or []),
        "tags": [t for t in recipe.get("tags") or [] if t in AVAILABLE_TAGS],
    }
