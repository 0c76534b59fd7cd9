from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.dependencies import get_optional_principal
from auth.jwt_handler import create_access_token
from auth.security import hash_password, needs_rehash, verify_password
from fundmanager import repository
from fundmanager.config import settings
from fundmanager.db import get_db
from fundmanager.errors import AuthError
from fundmanager.logger import get_logger
from schemas.auth import Capabilities, LoginRequest, LoginResponse, Principal

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

GUEST = Capabilities(role="guest", can_write=False)


def _capabilities(principal: Optional[Principal]) -> Capabilities:
    if principal is None:
        return GUEST
    can_write = principal.role == "admin" or not settings.require_admin_for_writes
    return Capabilities(role=principal.role, can_write=can_write, principal=principal)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Check a username/password pair and issue a session token.

    Unknown users and wrong passwords fail with the same 401 so the response
    does not reveal which usernames exist.
    """
    user = repository.find_user(db, body.username)

    if not user or not verify_password(body.password, user.password_hash):
        logger.warning(f"Failed login attempt for '{body.username}'")
        raise AuthError()

    if needs_rehash(user.password_hash):
        repository.users.update(db, user.id, {"password_hash": hash_password(body.password)})
        logger.info(f"Upgraded password hash for {user.username}")

    token = create_access_token({
        "sub": user.id,
        "username": user.username,
        "display_name": user.display_name,
        "role": user.role,
    })
    logger.info(f"User {user.username} signed in")
    return LoginResponse(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        role=user.role,
        access_token=token,
    )


@router.post("/guest", response_model=Capabilities)
def guest():
    """Read-only access; no credentials needed and no token issued."""
    return GUEST


@router.get("/me", response_model=Capabilities)
def me(principal: Optional[Principal] = Depends(get_optional_principal)):
    return _capabilities(principal)
