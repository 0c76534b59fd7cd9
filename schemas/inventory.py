from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, Field

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText


class InventoryCreate(CreateModel):
    resource_id: RequiredText
    quantity: int = Field(0, ge=0)


class InventoryUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = ("quantity",)

    quantity: Optional[int] = Field(None, ge=0)


class InventoryLevel(BaseModel):
    """Body of PUT /api/inventory/{resource_id}."""
    quantity: int = Field(..., ge=0)


class InventoryRead(ReadModel):
    id: str
    resource_id: str
    quantity: int
    updated_by: Optional[str] = None
    updated_at: datetime
