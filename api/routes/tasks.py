from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import actor_id, require_admin
from fundmanager import repository
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.tasks import TaskCreate, TaskRead, TaskUpdate

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("", response_model=List[TaskRead])
def list_tasks(
    assigned_member_id: Optional[str] = None,
    resource_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List tasks, optionally filtered by assignee or resource."""
    return repository.tasks.list(
        db,
        assigned_member_id=assigned_member_id,
        resource_id=resource_id,
    )


@router.post("", response_model=List[TaskRead])
def create_task(
    body: TaskCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    task = repository.tasks.create(db, {**body.model_dump(), "created_by": actor_id(principal)})
    return [task]


@router.patch("", response_model=List[TaskRead])
def update_task(
    body: TaskUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.tasks.update(db, body.id, body.changes())]


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    repository.tasks.delete(db, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
