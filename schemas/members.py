from datetime import datetime
from typing import ClassVar, Optional, Tuple

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText


class MemberCreate(CreateModel):
    name: RequiredText
    tag: Optional[str] = None
    notes: Optional[str] = None


class MemberUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("name",)

    name: Optional[RequiredText] = None
    tag: Optional[str] = None
    notes: Optional[str] = None


class MemberRead(ReadModel):
    id: str
    name: str
    tag: Optional[str] = None
    notes: Optional[str] = None
    added_by: Optional[str] = None
    created_at: datetime
