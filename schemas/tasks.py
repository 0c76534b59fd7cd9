from datetime import datetime
from typing import ClassVar, Literal, Optional, Tuple

from pydantic import Field

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText

Recurrence = Literal["daily", "once", "custom"]


class TaskCreate(CreateModel):
    title: RequiredText
    description: Optional[str] = None
    resource_id: Optional[str] = None
    required_amount: int = Field(0, ge=0)
    assigned_member_id: Optional[str] = None
    recurrence: Recurrence = "daily"


class TaskUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("title", "required_amount", "recurrence")

    title: Optional[RequiredText] = None
    description: Optional[str] = None
    resource_id: Optional[str] = None
    required_amount: Optional[int] = Field(None, ge=0)
    assigned_member_id: Optional[str] = None
    recurrence: Optional[Recurrence] = None


class TaskRead(ReadModel):
    id: str
    title: str
    description: Optional[str] = None
    resource_id: Optional[str] = None
    required_amount: int
    assigned_member_id: Optional[str] = None
    recurrence: Recurrence
    created_by: Optional[str] = None
    created_at: datetime
