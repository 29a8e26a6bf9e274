"""Request context dependencies shared by the private routes.

- merchant store from ``?store=`` (default settings.default_store_code)
- language from ``?lang=`` (default settings.default_language)
- acting admin user from ``Authorization: Bearer <token>``
"""

from fastapi import Depends, Query, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from merchant_admin.models import MerchantStore
from merchant_admin.services import store_facade, user_facade
from merchant_admin.services.authorization import Principal
from merchant_admin.services.errors import UnauthorizedError
from merchant_admin.settings import get_settings

bearer_scheme = HTTPBearer(auto_error=False)


async def current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal | None:
    """Acting admin user, or None when the request carries no valid token."""
    if credentials is None:
        return None
    return await user_facade.authenticated_user(credentials.credentials)


async def require_principal(
    principal: Principal | None = Depends(current_principal),
) -> Principal:
    if principal is None:
        raise UnauthorizedError()
    return principal


async def merchant_store(
    store: str | None = Query(
        default=None,
        description="Merchant store code",
        max_length=100,
        examples=["DEFAULT"],
    ),
) -> MerchantStore:
    return await store_facade.get(store or get_settings().default_store_code)


def request_language(
    response: Response,
    lang: str | None = Query(
        default=None,
        description="Language code",
        min_length=2,
        max_length=5,
        examples=["en", "fr"],
    ),
) -> str:
    """Resolve the request language and echo it as Content-Language."""
    language = (lang or get_settings().default_language).lower()
    response.headers["Content-Language"] = language
    return language
