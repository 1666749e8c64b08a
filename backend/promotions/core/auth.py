"""Permission gate for admin endpoints.

Admin sessions are represented by short-lived HS256 bearer tokens carrying a
``permissions`` claim. Every route declares the permission it needs through
``require_permission``.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import HTTPException, Request

from promotions.core.config import settings

DISCOUNTS_VIEW = "discounts.view"
DISCOUNTS_MANAGE = "discounts.manage"


@dataclass(frozen=True)
class Actor:
    """The authenticated admin behind a request."""

    user_id: str
    permissions: frozenset[str]
    ip_address: str | None = None
    user_agent: str | None = None


def create_access_token(
    user_id: str,
    permissions: Iterable[str],
    expires_in: timedelta = timedelta(hours=8),
) -> str:
    """Issue a bearer token for an admin user."""
    payload = {
        "sub": user_id,
        "permissions": sorted(set(permissions)),
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def _decode_bearer(request: Request) -> dict[str, object]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Authentication required")

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = auth_header[7:]
    if not token:
        raise HTTPException(status_code=401, detail="Bearer token is required")

    try:
        return jwt.decode(
            token, settings.AUTH_JWT_SECRET, algorithms=[settings.AUTH_JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired") from None
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token") from None


def require_permission(permission: str) -> Callable[[Request], Actor]:
    """Build a dependency that admits only actors holding ``permission``."""

    def dependency(request: Request) -> Actor:
        payload = _decode_bearer(request)
        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise HTTPException(status_code=401, detail="Invalid token")

        raw_permissions = payload.get("permissions") or []
        if not isinstance(raw_permissions, list):
            raise HTTPException(status_code=401, detail="Invalid token")
        permissions = frozenset(str(p) for p in raw_permissions)

        if permission not in permissions:
            raise HTTPException(status_code=403, detail=f"Missing permission: {permission}")

        return Actor(
            user_id=user_id,
            permissions=permissions,
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )

    return dependency
