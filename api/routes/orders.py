"""
Routes for customer orders.

Status moves pending -> in_progress -> completed through PATCH. Completed
orders drop out of the active view and show up in history.
"""
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import require_admin
from fundmanager import repository
from fundmanager.aggregates import split_orders
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.orders import OrderBoard, OrderCreate, OrderRead, OrderStatus, OrderUpdate

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=List[OrderRead])
def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    view: Optional[Literal["active", "history"]] = None,
    assigned_member_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List orders newest first, optionally by status or as the active/history view."""
    orders = repository.orders.list(
        db,
        status=status_filter,
        assigned_member_id=assigned_member_id,
    )
    if view is None:
        return orders
    active, history = split_orders(orders)
    return active if view == "active" else history


@router.get("/board", response_model=OrderBoard)
def order_board(db: Session = Depends(get_db)):
    active, history = split_orders(repository.orders.list(db))
    return {"active": active, "history": history}


@router.post("", response_model=List[OrderRead])
def create_order(
    body: OrderCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.orders.create(db, body.model_dump())]


@router.patch("", response_model=List[OrderRead])
def update_order(
    body: OrderUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.orders.update(db, body.id, body.changes())]


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_order(
    order_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    repository.orders.delete(db, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
