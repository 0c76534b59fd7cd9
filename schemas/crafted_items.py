from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import Field

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText


class CraftedItemCreate(CreateModel):
    item_name: RequiredText
    quantity: int = Field(..., ge=1)
    crafted_by: Optional[str] = None


class CraftedItemUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("item_name", "quantity")

    item_name: Optional[RequiredText] = None
    quantity: Optional[int] = Field(None, ge=1)
    crafted_by: Optional[str] = None


class CraftedItemRead(ReadModel):
    id: str
    item_name: str
    quantity: int
    crafted_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
