from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import require_admin
from fundmanager import repository
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.resources import ResourceCreate, ResourceRead, ResourceUpdate

router = APIRouter(prefix="/api/resources", tags=["Resources"])


@router.get("", response_model=List[ResourceRead])
def list_resources(db: Session = Depends(get_db)):
    return repository.resources.list(db)


@router.post("", response_model=List[ResourceRead])
def create_resource(
    body: ResourceCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.resources.create(db, body.model_dump())]


@router.patch("", response_model=List[ResourceRead])
def update_resource(
    body: ResourceUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.resources.update(db, body.id, body.changes())]


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_resource(
    resource_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    # Inventory rows and tasks for the resource are kept
    repository.resources.delete(db, resource_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
