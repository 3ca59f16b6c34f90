"""
Identity & auth gate.

Resolves the acting user from an ``Authorization: Bearer <jwt>`` header.
Tokens are HS256-signed with ``settings.SECRET_KEY`` and carry the user id
in the ``sub`` claim.
"""
from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from blog_api.config import settings
from blog_api.errors import Unauthenticated

bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    user_id: str


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Issue a signed access token for *user_id*."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": user_id, "iat": now, "exp": expire, "type": "access"}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> AuthenticatedUser:
    """
    Validate *token* and return the user it identifies.

    Raises ``Unauthenticated`` for a bad signature, an expired token, the
    wrong token type, or a missing subject.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise Unauthenticated("Invalid or expired token") from exc

    user_id = payload.get("sub")
    if not user_id or payload.get("type") != "access":
        raise Unauthenticated("Invalid or expired token")
    return AuthenticatedUser(user_id=user_id)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """FastAPI dependency for routes that require an authenticated user."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated()
    return decode_access_token(credentials.credentials)
