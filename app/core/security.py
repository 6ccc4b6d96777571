"""Bearer-token authentication against the external identity provider.

Tokens are JWTs issued (and signed) by the identity provider. This module only
verifies them and turns the claims into an :class:`Actor`; it never issues
tokens itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.exceptions import forbidden, unauthorized

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

APPROVER_ROLES = frozenset({"approver", "admin"})


@dataclass(frozen=True)
class Actor:
    """The authenticated user behind a request."""

    id: str
    role: Optional[str] = None
    email: Optional[str] = None


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify signature/expiry against ``settings`` and return the token claims.

    Raises an UNAUTHORIZED AppException for any invalid token.
    """
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not configured; rejecting bearer token")
        raise unauthorized("Authentication is not configured")

    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise unauthorized("Invalid token")


async def get_optional_actor(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[Actor]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    claims = decode_token(credentials.credentials, request.app.state.settings)
    subject = claims.get("sub")
    if not subject:
        raise unauthorized("Token has no subject")
    return Actor(id=str(subject), role=claims.get("user_role"), email=claims.get("email"))


async def get_current_actor(actor: Optional[Actor] = Depends(get_optional_actor)) -> Actor:
    """Dependency for endpoints that require an authenticated actor."""
    if actor is None:
        raise unauthorized()
    return actor


async def get_approver(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Dependency for approve/reject: the actor must hold an approver role."""
    if actor.role not in APPROVER_ROLES:
        raise forbidden("Approver role required")
    return actor
