"""
Pydantic schemas for FastAPI responses that are not recipes.

Recipe payloads themselves (Recipe, RecipeCreate, RecipeUpdate) live in
cookbook.models so that the storage layer and the API share one definition.

The schemas include:
- ErrorDetail / ErrorResponse: body of every 4xx/5xx response
- HealthResponse: body of GET /health
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """A single field-level validation problem."""
    field: str = Field(..., description="Name of the offending field or parameter")
    message: str = Field(..., description="Human-readable description of the problem")


class ErrorResponse(BaseModel):
    """
    Error body returned by the API.

    errors is only filled for 400 responses; 404 and 500 carry a message only.
    """
    message: str = Field(..., description="Summary of what went wrong")
    errors: List[ErrorDetail] = Field(default_factory=list, description="Field-level details")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Invalid recipe data",
                "errors": [{"field": "ingredients", "message": "List should have at least 1 item"}],
            }
        }
    )


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str = Field(..., description="Always 'ok' when the API is reachable")
    name: str = Field(..., description="API name")
    version: str = Field(..., description="API version")
    uptime_seconds: int = Field(..., ge=0, description="Seconds since the app was created")
    storage: str = Field(..., description="Active storage backend ('memory' or 'database')")
