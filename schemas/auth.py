from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Principal(BaseModel):
    id: str
    username: str
    display_name: Optional[str] = None
    role: str


class LoginResponse(Principal):
    access_token: str
    token_type: str = "bearer"


class Capabilities(BaseModel):
    """What the caller's session lets a front end show."""
    role: str
    can_write: bool
    principal: Optional[Principal] = None
