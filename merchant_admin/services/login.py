"""Admin login.

Flow:
1. Refuse if the username is locked out (too many recent failures, Redis)
2. Check credentials against the stored PBKDF2 hash
3. On failure, count it; on success, clear the counter, stamp
   login_time / last_access and issue a bearer token
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select

from merchant_admin.models import User
from merchant_admin.schemas import TokenResponse
from merchant_admin.services.errors import TooManyAttemptsError, UnauthorizedError
from merchant_admin.services.security import create_access_token, verify_password
from merchant_admin.settings import get_settings
from merchant_admin.stores.postgres import get_session
from merchant_admin.stores.redis import clear_login_failures, get_login_failures, record_login_failure

logger = logging.getLogger("uvicorn.error")


async def login(username: str, password: str) -> TokenResponse:
    """Authenticate an admin user and issue a token.

    Raises:
        TooManyAttemptsError: Username locked out.
        UnauthorizedError: Unknown user, inactive user or wrong password.
    """
    settings = get_settings()

    if await get_login_failures(username) >= settings.login_max_attempts:
        logger.warning("Login refused for %s: locked out", username)
        raise TooManyAttemptsError(
            f"Too many failed login attempts for [{username}]",
            detail={"retryAfterSeconds": settings.login_lockout_seconds},
        )

    async with get_session() as session:
        result = await session.execute(select(User).where(User.admin_name == username))
        user = result.scalar_one_or_none()
        valid = user is not None and user.active and verify_password(password, user.admin_password)
        if valid:
            now = datetime.now(timezone.utc)
            user.login_time = now
            user.last_access = now
            user_id = user.id

    if not valid:
        failures = await record_login_failure(username, settings.login_lockout_seconds)
        logger.warning("Failed login for %s (%d/%d)", username, failures, settings.login_max_attempts)
        raise UnauthorizedError("Invalid credentials")

    await clear_login_failures(username)
    logger.info("User %s logged in", username)
    return TokenResponse(id=user_id, token=create_access_token(username))
