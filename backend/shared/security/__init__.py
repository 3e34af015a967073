"""
Security module: JWT verification and role capability checks.
"""

from shared.security.auth import (
    sign_jwt,
    verify_jwt,
    get_bearer_token,
    current_user_context,
    context_roles,
    current_staff_id,
    primary_role,
    require_roles,
)

__all__ = [
    "sign_jwt",
    "verify_jwt",
    "get_bearer_token",
    "current_user_context",
    "context_roles",
    "current_staff_id",
    "primary_role",
    "require_roles",
]
