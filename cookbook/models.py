"""
Recipe models for the cookbook catalog.

This module defines the canonical recipe schemas used throughout the catalog.
Storage backends return Recipe instances; the API accepts RecipeCreate and
RecipeUpdate payloads and hands them to the storage layer unchanged.

JSON field names are camelCase (imageUrl, prepTime, createdAt, ...) while the
Python attributes are snake_case. Both spellings are accepted on input.

# NOTE: Server-controlled fields (id, createdAt, updatedAt, rating, ratingCount)
    are not part of RecipeCreate or RecipeUpdate. Because the input models use
    extra="ignore", a client that sends them simply has them dropped.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Authentication is disabled, so every recipe is attributed to this author.
DEFAULT_AUTHOR_ID = 1

# Page size used by the API and the Streamlit client when none is given.
DEFAULT_PAGE_SIZE = 6

# Fixed tag vocabulary offered by the UI. The storage layer accepts any string.
AVAILABLE_TAGS = [
    "Breakfast",
    "Lunch",
    "Dinner",
    "Dessert",
    "Vegetarian",
    "Vegan",
    "Quick & Easy",
    "Italian",
    "Healthy",
    "Baking",
    "High-Protein",
    "Kid-Friendly",
]

# Valid sort criteria, in the order the UI presents them.
SORT_OPTIONS = {
    "newest": "Newest First",
    "oldest": "Oldest First",
    "az": "Name (A-Z)",
    "za": "Name (Z-A)",
    "popular": "Most Popular",
}
DEFAULT_SORT = "newest"


def _clean_lines(items: List[str]) -> List[str]:
    """Strip every entry and drop the blank ones."""
    return [item.strip() for item in items if item and item.strip()]


def _unique_tags(tags: List[str]) -> List[str]:
    """Strip tags and drop blanks and duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


class Recipe(BaseModel):
    """A stored recipe as returned by every storage backend and the API."""
    id: int = Field(..., description="Unique, server-assigned recipe identifier")
    name: str = Field(..., description="Recipe name")
    description: str = Field(..., description="Short description of the dish")
    ingredients: List[str] = Field(..., description="Ordered list of ingredients")
    instructions: List[str] = Field(..., description="Ordered list of preparation steps")
    image_url: Optional[str] = Field(None, description="URL of a picture of the dish")
    prep_time: int = Field(..., description="Preparation time in minutes")
    cook_time: int = Field(..., description="Cooking time in minutes")
    servings: int = Field(..., description="Number of servings")
    tags: List[str] = Field(default_factory=list, description="Category tags")
    author_id: int = Field(DEFAULT_AUTHOR_ID, description="Author identifier")
    rating: int = Field(0, description="Aggregate rating used by the 'popular' sort")
    rating_count: int = Field(0, description="Number of ratings received")
    created_at: datetime = Field(..., description="Creation timestamp (UTC), never changes")
    updated_at: Optional[datetime] = Field(None, description="Timestamp of the last update (UTC)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Berry Smoothie Bowl",
                "description": "A refreshing smoothie bowl topped with fresh fruit and granola.",
                "ingredients": ["1 cup mixed frozen berries", "1 frozen banana"],
                "instructions": ["Blend until smooth.", "Top and serve."],
                "imageUrl": "https://example.com/bowl.jpg",
                "prepTime": 10,
                "cookTime": 0,
                "servings": 1,
                "tags": ["Breakfast", "Vegan", "Healthy"],
                "authorId": 1,
                "rating": 0,
                "ratingCount": 0,
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": None,
            }
        },
    )


class RecipeCreate(BaseModel):
    """
    Payload for creating a recipe.

    Ingredients and instructions are stripped of blank lines and must keep at
    least one entry each. authorId may be sent but is always overwritten by
    the server with DEFAULT_AUTHOR_ID.
    """
    name: str = Field(..., min_length=1, description="Recipe name")
    description: str = Field(..., description="Short description of the dish")
    ingredients: List[str] = Field(..., min_length=1, description="Ordered list of ingredients")
    instructions: List[str] = Field(..., min_length=1, description="Ordered list of preparation steps")
    image_url: Optional[str] = Field(None, description="URL of a picture of the dish")
    prep_time: int = Field(..., ge=0, description="Preparation time in minutes")
    cook_time: int = Field(..., ge=0, description="Cooking time in minutes")
    servings: int = Field(..., ge=1, description="Number of servings")
    tags: List[str] = Field(default_factory=list, description="Category tags")
    author_id: Optional[int] = Field(None, description="Ignored; the server assigns the author")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    @field_validator("ingredients", "instructions", mode="after")
    @classmethod
    def _drop_blank_lines(cls, value: List[str]) -> List[str]:
        cleaned = _clean_lines(value)
        if not cleaned:
            raise ValueError("must contain at least one non-blank entry")
        return cleaned

    @field_validator("tags", mode="after")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        return _unique_tags(value)

    @field_validator("image_url", mode="after")
    @classmethod
    def _empty_image_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


# Fields of RecipeUpdate that may be cleared with an explicit null.
NULLABLE_UPDATE_FIELDS = {"image_url"}


class RecipeUpdate(BaseModel):
    """
    Partial update payload. Only the fields actually sent are applied.

    id, createdAt, authorId, rating and ratingCount cannot be changed here;
    if a client sends them they are ignored.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    image_url: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    tags: Optional[List[str]] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    @field_validator("name", mode="after")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("ingredients", "instructions", mode="after")
    @classmethod
    def _drop_blank_lines(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        cleaned = _clean_lines(value)
        if not cleaned:
            raise ValueError("must contain at least one non-blank entry")
        return cleaned

    @field_validator("tags", mode="after")
    @classmethod
    def _dedupe_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        return _unique_tags(value)

    @field_validator("image_url", mode="after")
    @classmethod
    def _empty_image_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "RecipeUpdate":
        for field_name in self.model_fields_set:
            if field_name in NULLABLE_UPDATE_FIELDS:
                continue
            if getattr(self, field_name) is None:
                raise ValueError(f"{to_camel(field_name)} cannot be null")
        return self

    def changes(self) -> dict:
        """Return only the fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
