"""Password hashing and signed bearer tokens.

Tokens are compact JWTs (HS256): base64url(header).base64url(payload).signature,
signed with settings.secret_key. Claims: ``sub`` (admin username), ``exp``.

Passwords are stored as ``<salt hex>$<pbkdf2-sha256 hex>``.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any

from merchant_admin.settings import get_settings

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(subject: str, expires_seconds: int | None = None) -> str:
    """Create a signed token for the given admin username.

    Args:
        subject: Admin username stored in the ``sub`` claim.
        expires_seconds: Token lifetime; defaults to settings.access_token_expire_minutes.

    Returns:
        Token string to send as ``Authorization: Bearer <token>``.
    """
    settings = get_settings()
    lifetime = expires_seconds if expires_seconds is not None else settings.access_token_expire_minutes * 60
    payload = {"sub": subject, "exp": int(time.time()) + lifetime}
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verify signature and expiry; return the claims or None if invalid."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected = _sign(signing_input, get_settings().secret_key)
    try:
        actual = _b64_url_decode(signature_b64)
        claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not hmac.compare_digest(expected, actual):
        return None
    if not isinstance(claims, dict) or not claims.get("sub"):
        return None
    try:
        expires_at = int(claims.get("exp", 0))
    except (TypeError, ValueError):
        return None
    if expires_at < int(time.time()):
        return None
    return claims


def hash_password(password: str) -> str:
    """Hash a password with PBKDF2-HMAC-SHA256 and a random 16-byte salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored)
