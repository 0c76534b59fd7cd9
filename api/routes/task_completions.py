"""
Routes for the task completion log.

Completions are append-only: logging the same task for the same member on
the same day twice creates two rows. The history and daily views aggregate
them instead of assuming one row per day.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import actor_id, require_admin
from fundmanager import repository
from fundmanager.aggregates import completion_history, daily_completion_summary
from fundmanager.config import settings
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.task_completions import (
    DailyCompletionSummary,
    MemberCompletionHistory,
    TaskCompletionCreate,
    TaskCompletionRead,
    TaskCompletionUpdate,
)

router = APIRouter(prefix="/api/task-completions", tags=["Task Completions"])


@router.get("", response_model=List[TaskCompletionRead])
def list_task_completions(
    task_id: Optional[str] = None,
    member_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=500, description="Defaults to the configured history limit"),
    db: Session = Depends(get_db),
):
    """Most recent completions first, capped to a bounded window."""
    return repository.task_completions.list(
        db,
        limit=limit or settings.completion_history_limit,
        task_id=task_id,
        member_id=member_id,
    )


@router.get("/history", response_model=List[MemberCompletionHistory])
def member_history(db: Session = Depends(get_db)):
    """Completions grouped per member with completed counts and collected totals."""
    return completion_history(
        repository.members.list(db),
        repository.task_completions.list(db),
    )


@router.get("/daily", response_model=List[DailyCompletionSummary])
def daily_summary(
    task_id: Optional[str] = None,
    member_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Totals per task, member and day."""
    rows = repository.task_completions.list(db, task_id=task_id, member_id=member_id)
    return daily_completion_summary(rows)


@router.post("", response_model=List[TaskCompletionRead])
def create_task_completion(
    body: TaskCompletionCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    values = body.row_values()
    values["noted_by"] = actor_id(principal)
    return [repository.task_completions.create(db, values)]


@router.patch("", response_model=List[TaskCompletionRead])
def update_task_completion(
    body: TaskCompletionUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    values = body.changes()
    actor = actor_id(principal)
    if actor:
        values["noted_by"] = actor
    return [repository.task_completions.update(db, body.id, values)]


@router.delete("/{completion_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_task_completion(
    completion_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    repository.task_completions.delete(db, completion_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
