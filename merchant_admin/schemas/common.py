"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Structured error detail."""

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    """

    error: ErrorDetail


class UniqueEntity(BaseModel):
    """Request body for uniqueness checks (e.g. a username within a store)."""

    unique: str = Field(min_length=1, max_length=100)
    merchant: str | None = Field(default=None, max_length=100)


class EntityExists(BaseModel):
    """Result of a uniqueness check."""

    exists: bool


class Paginated(BaseModel):
    """Pagination envelope shared by list endpoints."""

    total_pages: int = Field(alias="totalPages", ge=0)
    records_total: int = Field(alias="recordsTotal", ge=0)
    records_filtered: int = Field(alias="recordsFiltered", ge=0)
    number: int = Field(ge=0)

    model_config = {"populate_by_name": True}
