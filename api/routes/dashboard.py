from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fundmanager import repository
from fundmanager.aggregates import split_orders
from fundmanager.db import get_db
from schemas.dashboard import DashboardStats

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])

RECENT_COMPLETIONS = 10


@router.get("", response_model=DashboardStats)
def dashboard(db: Session = Depends(get_db)):
    """Headline counts for the landing page plus the last few completions."""
    active, _ = split_orders(repository.orders.list(db))
    return DashboardStats(
        members=len(repository.members.list(db)),
        resources=len(repository.resources.list(db)),
        tasks=len(repository.tasks.list(db)),
        active_orders=len(active),
        recent_completions=repository.task_completions.list(db, limit=RECENT_COMPLETIONS),
    )
