import datetime as dt
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText
from schemas.members import MemberRead


class TaskCompletionCreate(CreateModel):
    task_id: RequiredText
    member_id: Optional[str] = None
    date: Optional[dt.date] = Field(None, description="Day the work was done, defaults to today")
    amount_collected: int = Field(0, ge=0)
    completed: bool = False

    def row_values(self) -> Dict[str, Any]:
        values = self.model_dump()
        values["date"] = (self.date or dt.date.today()).isoformat()
        return values


class TaskCompletionUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("date", "amount_collected", "completed")

    member_id: Optional[str] = None
    date: Optional[dt.date] = None
    amount_collected: Optional[int] = Field(None, ge=0)
    completed: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        values = super().changes()
        if values.get("date") is not None:
            values["date"] = values["date"].isoformat()
        return values


class TaskCompletionRead(ReadModel):
    id: str
    task_id: str
    member_id: Optional[str] = None
    date: str
    amount_collected: int
    completed: bool
    noted_by: Optional[str] = None
    noted_at: dt.datetime


class MemberCompletionHistory(BaseModel):
    member: MemberRead
    completions: List[TaskCompletionRead]
    completed_count: int
    total_collected: int


class DailyCompletionSummary(BaseModel):
    task_id: str
    member_id: Optional[str] = None
    date: str
    entries: int
    completed_count: int
    total_collected: int
