"""Schemas for admin user endpoints (/api/v1/private/user*)."""

from datetime import datetime

from pydantic import BaseModel, Field

from merchant_admin.schemas.common import Paginated


class GroupRef(BaseModel):
    """Authorization group reference."""

    name: str = Field(min_length=1, max_length=100)


class PersistableUser(BaseModel):
    """Payload for creating or updating an admin user."""

    user_name: str = Field(alias="userName", min_length=1, max_length=100)
    email_address: str = Field(alias="emailAddress", min_length=3, max_length=255)
    first_name: str | None = Field(alias="firstName", default=None, max_length=100)
    last_name: str | None = Field(alias="lastName", default=None, max_length=100)
    password: str | None = Field(default=None, min_length=6, max_length=100)
    default_language: str = Field(alias="defaultLanguage", default="en", max_length=5)
    active: bool = True
    groups: list[GroupRef] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def group_names(self) -> list[str]:
        return [group.name for group in self.groups]


class UserPassword(BaseModel):
    """Password change payload."""

    password: str = Field(min_length=1, max_length=100)
    change_password: str = Field(alias="changePassword", min_length=6, max_length=100)

    model_config = {"populate_by_name": True}


class ReadableUser(BaseModel):
    """Admin user profile as returned by the API."""

    id: int
    user_name: str = Field(alias="userName")
    email_address: str = Field(alias="emailAddress")
    first_name: str | None = Field(alias="firstName", default=None)
    last_name: str | None = Field(alias="lastName", default=None)
    default_language: str = Field(alias="defaultLanguage")
    active: bool
    merchant: str
    groups: list[GroupRef] = Field(default_factory=list)
    last_access: datetime | None = Field(alias="lastAccess", default=None)
    login_time: datetime | None = Field(alias="loginTime", default=None)

    model_config = {"populate_by_name": True}


class ReadableUserList(Paginated):
    """One page of admin users."""

    data: list[ReadableUser] = Field(default_factory=list)
