"""Admin login endpoint.

POST /private/login - exchange username/password for a bearer token.
"""

from fastapi import APIRouter

from merchant_admin.schemas import LoginRequest, TokenResponse
from merchant_admin.services import login as login_service

router = APIRouter()


@router.post("/private/login", response_model=TokenResponse)
async def login(credentials: LoginRequest) -> TokenResponse:
    """Authenticate an admin user.

    Returns:
        Bearer token to send as ``Authorization: Bearer <token>``.

    Raises:
        401 on invalid credentials, 429 when the username is locked out.
    """
    return await login_service.login(credentials.username, credentials.password)
