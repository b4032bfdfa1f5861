"""
FastAPI application for the recipe catalog API.

This module builds the REST API of the catalog:
- /api/recipes: recipe listing and CRUD (see api/routers/recipes.py)
- GET /health: Health check and uptime
- GET /: API information

The storage backend (in-memory or database) is chosen once, when the app is
created, from RECIPE_STORAGE / DATABASE_URL, and lives on app.state.storage
for the lifetime of the app.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.config import StorageConfig, validate_storage_config
from api.routers.recipes import router as recipes_router
from api.schemas import HealthResponse
from cookbook.exceptions import InternalError, NotFoundError, ValidationError
from cookbook.seed import SAMPLE_RECIPES
from cookbook.storage import RecipeStorage, create_storage

logger = logging.getLogger(__name__)

API_NAME = "Recipe Catalog API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Backend API for browsing, searching, filtering and editing recipes"

# Request locations FastAPI prefixes to validation error paths
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _error_field(loc) -> str:
    parts = [str(part) for part in loc if part not in _LOCATIONS]
    return ".".join(parts) or (str(loc[0]) if loc else "request")


def validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """
    Flatten FastAPI validation errors into {"field", "message"} pairs.

    Body fields are reported by their JSON (camelCase) names.
    """
    return [{"field": _error_field(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
            for err in exc.errors()]


def register_exception_handlers(app: FastAPI) -> None:
    """Map catalog errors to HTTP responses with a {"message", "errors"} body."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = validation_errors(exc)
        in_body = any(err.get("loc", ("",))[0] == "body" for err in exc.errors())
        message = "Invalid recipe data" if in_body else "Invalid request parameters"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message, "errors": errors},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": exc.message},
        )


def create_app(storage: Optional[RecipeStorage] = None, seed: Optional[bool] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        storage: Backend to serve. When None, one is created from the environment
                 (RECIPE_STORAGE, DATABASE_URL).
        seed: Seed SAMPLE_RECIPES into an empty store. Defaults to SEED_RECIPES
              when the backend comes from the environment, and to False when
              a storage is passed in.

    Returns:
        Configured FastAPI app with storage on app.state.storage

    Raises:
        RuntimeError: If the storage configuration is invalid
    """
    if storage is None:
        validate_storage_config()
        storage = create_storage(StorageConfig.get_backend(), StorageConfig.get_database_url())
        if seed is None:
            seed = StorageConfig.seed_enabled()

    if seed:
        inserted = storage.seed(SAMPLE_RECIPES)
        logger.info(f"Seeded {inserted} sample recipes into {storage.backend} storage")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.storage.close()

    app = FastAPI(
        title=API_NAME,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "recipes",
                "description": "Browse, search, filter, sort, create, edit and delete recipes.",
            },
            {
                "name": "health",
                "description": "Health check and monitoring endpoints.",
            },
        ],
    )
    app.state.storage = storage
    app.state.started_at = time.time()

    register_exception_handlers(app)
    app.include_router(recipes_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    def health(request: Request) -> HealthResponse:
        """
        Health check endpoint for monitoring and status checks.

        Returns:
            Status, API metadata, uptime and the active storage backend.
            Always returns 200 OK if the endpoint is reachable.
        """
        return HealthResponse(
            status="ok",
            name=API_NAME,
            version=API_VERSION,
            uptime_seconds=int(time.time() - request.app.state.started_at),
            storage=request.app.state.storage.backend,
        )

    @app.get("/")
    def root() -> Dict[str, Any]:
        """
        Root endpoint providing API information.

        Returns:
            Dictionary with API name and version
        """
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "description": API_DESCRIPTION,
            "docs": "/docs",
        }

    return app


app = create_app()
