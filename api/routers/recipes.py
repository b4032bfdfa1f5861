"""
Recipes router: the CRUD and listing endpoints of the catalog.

Endpoints:
- GET /api/recipes - List recipes (search, tag filter or sort, paginated)
- GET /api/recipes/{recipe_id} - Get a single recipe
- POST /api/recipes - Create a recipe
- PUT /api/recipes/{recipe_id} - Partially update a recipe
- DELETE /api/recipes/{recipe_id} - Delete a recipe

The storage backend is taken from app.state through the get_storage
dependency; the router never creates one itself.

Error bodies are produced by the exception handlers registered in api.main:
ValidationError -> 400, NotFoundError -> 404, anything else -> 500 with a
generic message per action.

# NOTE: search, tags and sort are mutually exclusive selection modes. When more
    than one is supplied, a non-blank search wins over tags, and tags win over
    sort. Combining them in one request is not supported.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from cookbook.events import (
    log_recipe_created,
    log_recipe_deleted,
    log_recipe_updated,
    log_recipes_listed,
)
from cookbook.exceptions import InternalError, NotFoundError, ValidationError
from cookbook.models import DEFAULT_PAGE_SIZE, DEFAULT_SORT, Recipe, RecipeCreate, RecipeUpdate
from cookbook.storage import RecipeStorage
from cookbook.storage.base import validate_criterion
from api.schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

MAX_PAGE_SIZE = 100

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid input"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Storage failure"},
}
_NOT_FOUND_RESPONSE = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Recipe not found"},
}


def get_storage(request: Request) -> RecipeStorage:
    """Return the storage backend created by the app factory."""
    return request.app.state.storage


def parse_tags(tags: Optional[str]) -> List[str]:
    """
    Split a comma-separated tags parameter.

    Entries are stripped; blanks and duplicates are dropped.

    Example:
        parse_tags("Vegan, Dessert,,Vegan") -> ["Vegan", "Dessert"]
    """
    if not tags:
        return []
    result: List[str] = []
    for tag in tags.split(","):
        tag = tag.strip()
        if tag and tag not in result:
            result.append(tag)
    return result


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """
    Translate unexpected failures into InternalError(action).

    ValidationError and NotFoundError pass through unchanged. Anything else is
    logged with its details and replaced by a generic message, so no
    exception text reaches the client.
    """
    try:
        yield
    except (ValidationError, NotFoundError):
        raise
    except Exception as e:
        logger.error(f"{action}: {e}", exc_info=True)
        raise InternalError(action) from e


@router.get(
    "",
    response_model=List[Recipe],
    summary="List recipes",
    description="List recipes in one of three modes: free-text search, tag filter (AND), or sorted listing. "
                "A non-blank search takes precedence over tags, and tags over sort.",
    responses=_ERROR_RESPONSES,
)
def list_recipes(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size (max: 100)"),
    offset: int = Query(0, ge=0, description="Number of recipes to skip"),
    search: Optional[str] = Query(
        None,
        description="Case-insensitive substring matched against name, description, ingredients and tags",
    ),
    tags: Optional[str] = Query(
        None,
        description="Comma-separated tags; recipes must carry all of them (e.g. 'Vegan,Dessert')",
    ),
    sort: str = Query(
        DEFAULT_SORT,
        description="Sort criterion: 'newest', 'oldest', 'az', 'za' or 'popular'",
    ),
    storage: RecipeStorage = Depends(get_storage),
) -> List[Recipe]:
    """
    List recipes.

    Args:
        limit: Page size (1-100, default: 6)
        offset: Number of recipes to skip (default: 0)
        search: Optional free-text query
        tags: Optional comma-separated tag list
        sort: Sort criterion (default: "newest"); validated even when search or
              tags select the mode

    Returns:
        List of Recipe models. Search and tag results are ordered newest first.

    Raises:
        ValidationError: If sort is not a valid criterion (400)
        InternalError: If the storage backend fails (500)

    Example:
        ```bash
        GET /api/recipes?limit=6&offset=6&tags=Vegan,Dessert
        ```
    """
    validate_criterion(sort)
    query = (search or "").strip()
    tag_list = parse_tags(tags)

    with storage_errors("Error fetching recipes"):
        if query:
            recipes = storage.search(query, limit, offset)
            log_recipes_listed("search", len(recipes), limit, offset, search=query)
        elif tag_list:
            recipes = storage.filter_by_tags(tag_list, limit, offset)
            log_recipes_listed("tags", len(recipes), limit, offset, tags=tag_list)
        else:
            recipes = storage.sort_by(sort, limit, offset)
            log_recipes_listed("sort", len(recipes), limit, offset, sort=sort)

    return recipes


@router.get(
    "/{recipe_id}",
    response_model=Recipe,
    summary="Get a recipe",
    responses={**_ERROR_RESPONSES, **_NOT_FOUND_RESPONSE},
)
def get_recipe(recipe_id: int, storage: RecipeStorage = Depends(get_storage)) -> Recipe:
    """
    Get a single recipe by id.

    Raises:
        NotFoundError: If no recipe has this id (404)
    """
    with storage_errors("Error fetching recipe"):
        recipe = storage.get_by_id(recipe_id)
    if recipe is None:
        raise NotFoundError()
    return recipe


@router.post(
    "",
    response_model=Recipe,
    status_code=status.HTTP_201_CREATED,
    summary="Create a recipe",
    description="Create a recipe. The server assigns id, createdAt and authorId; rating starts at 0.",
    responses=_ERROR_RESPONSES,
)
def create_recipe(payload: RecipeCreate, storage: RecipeStorage = Depends(get_storage)) -> Recipe:
    """
    Create a new recipe.

    Args:
        payload: Recipe fields. Any id, createdAt, rating or ratingCount sent by
                 the client is ignored, and authorId is overwritten.

    Returns:
        The stored Recipe (201 Created)

    Raises:
        ValidationError: If the body is incomplete (400)
        InternalError: If the storage backend fails (500)

    Example:
        ```bash
        POST /api/recipes
        {"name": "Pancakes", "description": "Fluffy pancakes", "ingredients": ["flour", "milk"],
         "instructions": ["Mix", "Fry"], "prepTime": 10, "cookTime": 15, "servings": 4,
         "tags": ["Breakfast"]}
        ```
    """
    with storage_errors("Error creating recipe"):
        recipe = storage.create(payload)
    log_recipe_created(recipe.id, recipe.name, recipe.tags)
    return recipe


@router.put(
    "/{recipe_id}",
    response_model=Recipe,
    summary="Update a recipe",
    description="Merge the supplied fields into an existing recipe. Fields that are not sent stay unchanged.",
    responses={**_ERROR_RESPONSES, **_NOT_FOUND_RESPONSE},
)
def update_recipe(
    recipe_id: int,
    payload: RecipeUpdate,
    storage: RecipeStorage = Depends(get_storage),
) -> Recipe:
    """
    Partially update a recipe.

    Raises:
        NotFoundError: If no recipe has this id (404)
        ValidationError: If a supplied field is invalid (400)
    """
    with storage_errors("Error updating recipe"):
        recipe = storage.update(recipe_id, payload)
    if recipe is None:
        raise NotFoundError()
    log_recipe_updated(recipe_id, list(payload.changes()))
    return recipe


@router.delete(
    "/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a recipe",
    responses={**_ERROR_RESPONSES, **_NOT_FOUND_RESPONSE},
)
def delete_recipe(recipe_id: int, storage: RecipeStorage = Depends(get_storage)) -> Response:
    """
    Delete a recipe.

    Returns:
        Empty 204 response

    Raises:
        NotFoundError: If no recipe has this id (404)
    """
    with storage_errors("Error deleting recipe"):
        deleted = storage.delete(recipe_id)
    if not deleted:
        raise NotFoundError()
    log_recipe_deleted(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
