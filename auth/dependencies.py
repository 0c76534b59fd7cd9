"""
FastAPI dependencies resolving the caller of a request.

No session is stored on the server: the caller is whoever the signed bearer
token names. Requests without a token are guests and may only read.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt_handler import decode_access_token
from fundmanager.config import settings
from fundmanager.errors import AuthError, ForbiddenError
from fundmanager.logger import get_logger
from schemas.auth import Principal

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """Principal named by the bearer token; None for guests, AuthError for bad tokens."""
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthError("Invalid or expired session")

    return Principal(
        id=payload["sub"],
        username=payload.get("username", ""),
        display_name=payload.get("display_name"),
        role=payload.get("role", "member"),
    )


def require_admin(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Optional[Principal]:
    """
    Gate for every write route.

    Returns the acting admin, or None when write checks are switched off and
    the caller is anonymous.
    """
    if not settings.require_admin_for_writes:
        return principal
    if principal is None:
        raise AuthError("Authentication required")
    if principal.role != "admin":
        logger.warning(f"Write refused for non-admin user {principal.username}")
        raise ForbiddenError()
    return principal


def actor_id(principal: Optional[Principal]) -> Optional[str]:
    return principal.id if principal else None
