from datetime import datetime
from typing import ClassVar, Optional, Tuple

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText


class ResourceCreate(CreateModel):
    name: RequiredText
    description: Optional[str] = None
    unit: RequiredText = "pcs"


class ResourceUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("name", "unit")

    name: Optional[RequiredText] = None
    description: Optional[str] = None
    unit: Optional[RequiredText] = None


class ResourceRead(ReadModel):
    id: str
    name: str
    description: Optional[str] = None
    unit: str
    created_at: datetime
