from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import require_admin
from fundmanager import repository
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.crafted_items import CraftedItemCreate, CraftedItemRead, CraftedItemUpdate

router = APIRouter(prefix="/api/crafted-items", tags=["Crafting"])


@router.get("", response_model=List[CraftedItemRead])
def list_crafted_items(crafted_by: Optional[str] = None, db: Session = Depends(get_db)):
    """Crafting log, newest first."""
    return repository.crafted_items.list(db, crafted_by=crafted_by)


@router.post("", response_model=List[CraftedItemRead])
def create_crafted_item(
    body: CraftedItemCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.crafted_items.create(db, body.model_dump())]


@router.patch("", response_model=List[CraftedItemRead])
def update_crafted_item(
    body: CraftedItemUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.crafted_items.update(db, body.id, body.changes())]


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_crafted_item(
    item_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    repository.crafted_items.delete(db, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
