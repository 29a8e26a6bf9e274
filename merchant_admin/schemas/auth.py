"""Schemas for the admin login endpoint."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=100)


class TokenResponse(BaseModel):
    """Bearer token issued on successful login."""

    id: int
    token: str
    token_type: str = Field(alias="tokenType", default="bearer")

    model_config = {"populate_by_name": True}
