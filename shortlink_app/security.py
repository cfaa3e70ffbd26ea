"""
Bearer token check for mutating routes.

The expected header value is "Bearer <token>". Both sides are hashed and
compared in constant time.
"""

import hashlib
import hmac
from functools import lru_cache
from typing import Optional

from fastapi import Header

from shortlink_app.config import settings
from shortlink_app.errors import AuthorizationError


def _digest(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


@lru_cache()
def expected_token_digest() -> bytes:
    """
    Digest of the accepted Authorization header (cached).

    Raises:
        AuthorizationError: If no token is configured
    """
    if not settings.token:
        raise AuthorizationError("TOKEN is not configured")
    return _digest(f"Bearer {settings.token}")


def check_authorization(authorization: Optional[str]) -> None:
    """Raise AuthorizationError unless the header carries the configured token"""
    expected = expected_token_digest()
    if authorization is None or not hmac.compare_digest(expected, _digest(authorization)):
        raise AuthorizationError()


def require_token(authorization: Optional[str] = Header(default=None)) -> None:
    """FastAPI dependency guarding mutating routes"""
    check_authorization(authorization)
