from datetime import datetime
from typing import ClassVar, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from schemas.base import CreateModel, PatchModel, ReadModel, RequiredText

OrderStatus = Literal["pending", "in_progress", "completed"]


class OrderCreate(CreateModel):
    reference_id: RequiredText
    items: RequiredText
    quantity: int = Field(..., ge=1)
    customer_name: RequiredText
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus = "pending"
    assigned_member_id: Optional[str] = None


class OrderUpdate(PatchModel):
    non_nullable: ClassVar[Tuple[str, ...]] = (
        "reference_id", "items", "quantity", "customer_name", "status",
    )

    reference_id: Optional[RequiredText] = None
    items: Optional[RequiredText] = None
    quantity: Optional[int] = Field(None, ge=1)
    customer_name: Optional[RequiredText] = None
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[OrderStatus] = None
    assigned_member_id: Optional[str] = None


class OrderRead(ReadModel):
    id: str
    reference_id: str
    items: str
    quantity: int
    customer_name: str
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus
    assigned_member_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderBoard(BaseModel):
    """Orders split the way the orders page shows them."""
    active: List[OrderRead]
    history: List[OrderRead]
