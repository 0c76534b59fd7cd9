"""
Routes for inventory snapshots.

Every row is kept as history. The current level of a resource is the row
with the latest `updated_at`; `/current` resolves it on the server and
`PUT /{resource_id}` sets it without the caller having to know which row
is current. There is no delete.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.dependencies import actor_id, require_admin
from fundmanager import repository
from fundmanager.aggregates import resolve_current_inventory
from fundmanager.db import get_db
from fundmanager.errors import NotFoundError
from schemas.auth import Principal
from schemas.inventory import InventoryCreate, InventoryLevel, InventoryRead, InventoryUpdate

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


@router.get("", response_model=List[InventoryRead])
def list_inventory(
    resource_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """All inventory rows, most recently updated first."""
    return repository.inventory.list(db, resource_id=resource_id)


@router.get("/current", response_model=List[InventoryRead])
def current_inventory(db: Session = Depends(get_db)):
    """One row per resource: the latest recorded level."""
    return resolve_current_inventory(repository.inventory.list(db))


@router.post("", response_model=List[InventoryRead])
def create_inventory(
    body: InventoryCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    row = repository.inventory.create(db, {**body.model_dump(), "updated_by": actor_id(principal)})
    return [row]


@router.patch("", response_model=List[InventoryRead])
def update_inventory(
    body: InventoryUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    values = body.changes()
    actor = actor_id(principal)
    if actor:
        values["updated_by"] = actor
    return [repository.inventory.update(db, body.id, values)]


@router.put("/{resource_id}", response_model=List[InventoryRead])
def set_inventory_level(
    resource_id: str,
    body: InventoryLevel,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    if repository.resources.get(db, resource_id) is None:
        raise NotFoundError("Resource not found")
    row = repository.set_inventory_level(db, resource_id, body.quantity, actor_id(principal))
    return [row]
