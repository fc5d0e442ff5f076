"""Bearer-token gate for the item routes.

Tokens are HS256 JWTs whose ``sub`` claim identifies the caller. Issuing
tokens belongs to a separate identity service; ``create_access_token`` exists
for operators and tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stockroom.config import Settings, get_settings

logger = logging.getLogger(__name__)

security_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller."""

    user_id: str


def create_access_token(
    subject: str,
    settings: Settings,
    expires_in: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expires = now + (expires_in or timedelta(minutes=settings.access_token_minutes))
    claims = {"sub": subject, "iat": now, "exp": expires}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_identity(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Identity:
    """Verify the bearer token and return the caller.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired
    """
    if credentials is None:
        logger.warning("Missing bearer token on %s", request.url.path)
        raise _unauthorized("Not authorized, no token")

    try:
        claims = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        logger.warning("Rejected bearer token on %s: %s", request.url.path, e)
        raise _unauthorized("Not authorized, token failed") from None

    return Identity(user_id=str(claims["sub"]))


IdentityDep = Annotated[Identity, Depends(get_identity)]
