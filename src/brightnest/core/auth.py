"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.
Tokens are issued by the identity service; this module only validates them
and maps their claims onto an AuthUser.

SECURITY NOTE:
- Development mode test tokens are ONLY accepted when PYTHON_ENV=development
- Staging and production never accept test tokens
"""

import logging
import os
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from brightnest.core.config import settings
from brightnest.core.security import decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)

# Roles allowed to manage waitlists
STAFF_ROLES = frozenset(
    {
        "super_admin",
        "school_owner",
        "school_admin",
        "admissions_staff",
    }
)


@dataclass
class AuthUser:
    """
    An authenticated caller, populated from JWT claims.

    Attributes:
        id: User's unique identifier
        email: User's email address
        role: Primary role claim
        school_id: School the user belongs to (None for platform users)
        name: Display name (optional)
    """

    id: UUID
    email: str
    role: str
    school_id: str | None = None
    name: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def __str__(self) -> str:
        return f"AuthUser(id={self.id}, email={self.email}, role={self.role})"


def _is_dev_mode_safe() -> bool:
    """
    Check if development test tokens may be accepted.

    Requires settings.is_development AND PYTHON_ENV explicitly set to
    "development" in the process environment. An unset PYTHON_ENV never
    enables test tokens, even though settings default to development.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()

    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var == "development"
    )

    if is_safe:
        logger.warning(
            "SECURITY: Development auth mode is ENABLED. This MUST NOT be used in production!"
        )

    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()

_DEV_STAFF = AuthUser(
    id=UUID("00000000-0000-0000-0000-000000000001"),
    email="staff@brightnest.dev",
    role="super_admin",
    name="Development Staff",
)


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _validate_jwt_token(token: str) -> AuthUser:
    """
    Validate a JWT and extract user claims.

    Raises:
        HTTPException 401: If token is invalid, expired or has bad claims
    """
    if _DEVELOPMENT_MODE and token in ("dev-token", "test-token"):
        logger.debug("Development mode: Using test token")
        return _DEV_STAFF

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    token_type = payload.get("type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id_str = payload.get("sub")
        if not user_id_str:
            raise ValueError("Missing 'sub' claim in token")

        return AuthUser(
            id=UUID(user_id_str),
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            school_id=payload.get("school_id"),
            name=payload.get("name"),
        )
    except (ValueError, KeyError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """FastAPI dependency returning the authenticated caller."""
    user = await _validate_jwt_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role})")
    return user


async def get_current_staff_user(
    user: AuthUser = Depends(get_current_user),
) -> AuthUser:
    """
    FastAPI dependency that requires a school staff role.

    Raises:
        HTTPException 403: If the caller is not staff
    """
    if not user.is_staff:
        logger.warning(
            f"Access denied: User {user.id} has role '{user.role}', staff role is required"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "STAFF_ACCESS_REQUIRED",
                "message": "School staff access is required for this endpoint.",
            },
        )
    return user


__all__ = [
    "AuthUser",
    "STAFF_ROLES",
    "get_current_user",
    "get_current_staff_user",
]
