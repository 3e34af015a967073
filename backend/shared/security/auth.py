"""
Authentication and authorization utilities.

Tokens are issued elsewhere; this service only verifies staff JWTs and
checks role capabilities against them.

Claims used here:
    sub   - staff user id, as a string
    roles - list of role tags (admin, waiter, cook)
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable
from typing import Any

import jwt
from fastapi import Header, HTTPException, status

from shared.config.constants import Roles, ErrorMessages
from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import get_logger
from shared.utils.exceptions import InsufficientRoleError

logger = get_logger(__name__)


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign a staff access token with the given payload.

    Used by the CLI and by tests; production tokens come from the
    identity provider sharing the same secret, issuer and audience.

    Args:
        payload: Claims to include in the token (sub, roles, ...).
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": "access",
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        HTTPException: 401 if token is invalid, expired or missing claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.TOKEN_EXPIRED,
        )
    except jwt.InvalidTokenError as e:
        # Log the real reason, return a generic message
        logger.warning("JWT validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.INVALID_TOKEN,
        )

    if "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido: falta el claim sub",
        )

    try:
        int(payload["sub"])
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido: claim sub mal formado",
        )

    if not isinstance(payload.get("roles", []), list):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido: claim roles mal formado",
        )

    return payload


# =============================================================================
# FastAPI dependencies
# =============================================================================


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        HTTPException: If header is missing or malformed.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.NOT_AUTHENTICATED,
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Formato de Authorization inválido. Se espera: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Usage:
        @router.get("/orders")
        def list_orders(ctx = Depends(current_user_context)):
            staff_id = current_staff_id(ctx)
            ...
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


# =============================================================================
# Role capability checks
# =============================================================================


def context_roles(ctx: dict[str, Any]) -> set[Roles]:
    """Roles carried by the token. Unknown tags are ignored."""
    known = {role.value for role in Roles}
    return {Roles(r) for r in ctx.get("roles", []) if isinstance(r, str) and r in known}


def current_staff_id(ctx: dict[str, Any]) -> int:
    return int(ctx["sub"])


def primary_role(ctx: dict[str, Any]) -> str | None:
    """First role tag of the token, reported as the actor of published events."""
    roles = ctx.get("roles") or []
    return str(roles[0]) if roles else None


def require_roles(ctx: dict[str, Any], allowed: Iterable[Roles]) -> None:
    """
    Verify that the caller has at least one of the allowed roles.

    Raises:
        InsufficientRoleError: If the caller lacks every allowed role.
    """
    allowed_set = set(allowed)
    if not context_roles(ctx) & allowed_set:
        raise InsufficientRoleError(
            [role.value for role in allowed_set],
            user_id=ctx.get("sub"),
        )
