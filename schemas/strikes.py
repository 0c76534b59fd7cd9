from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import Field

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText
from schemas.members import MemberRead


class StrikeCreate(CreateModel):
    member_id: RequiredText
    reason: Optional[str] = None
    points: int = Field(1, ge=1)


class StrikeUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("member_id", "points")

    member_id: Optional[RequiredText] = None
    reason: Optional[str] = None
    points: Optional[int] = Field(None, ge=1)


class StrikeRead(ReadModel):
    id: str
    member_id: str
    issued_by: Optional[str] = None
    reason: Optional[str] = None
    points: int
    created_at: datetime


class MemberStrikeSummary(MemberRead):
    """Member row extended with the strike fold."""
    strike_count: int
    total_strike_points: int
    at_risk: bool
