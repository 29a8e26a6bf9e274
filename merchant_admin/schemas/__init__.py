"""Pydantic schemas for API request/response validation."""

from merchant_admin.schemas.auth import LoginRequest, TokenResponse
from merchant_admin.schemas.catalog import (
    CatalogPatch,
    PersistableCatalog,
    PersistableCatalogEntry,
    ReadableCatalog,
    ReadableCatalogEntry,
    ReadableCatalogList,
)
from merchant_admin.schemas.common import EntityExists, ErrorDetail, ErrorResponse, UniqueEntity
from merchant_admin.schemas.user import (
    GroupRef,
    PersistableUser,
    ReadableUser,
    ReadableUserList,
    UserPassword,
)

__all__ = [
    "CatalogPatch",
    "EntityExists",
    "ErrorDetail",
    "ErrorResponse",
    "GroupRef",
    "LoginRequest",
    "PersistableCatalog",
    "PersistableCatalogEntry",
    "PersistableUser",
    "ReadableCatalog",
    "ReadableCatalogEntry",
    "ReadableCatalogList",
    "ReadableUser",
    "ReadableUserList",
    "TokenResponse",
    "UniqueEntity",
    "UserPassword",
]
