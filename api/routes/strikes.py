from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import actor_id, require_admin
from fundmanager import repository
from fundmanager.aggregates import summarize_strikes
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.strikes import MemberStrikeSummary, StrikeCreate, StrikeRead, StrikeUpdate

router = APIRouter(prefix="/api/strikes", tags=["Strikes"])


@router.get("", response_model=List[StrikeRead])
def list_strikes(member_id: Optional[str] = None, db: Session = Depends(get_db)):
    return repository.strikes.list(db, member_id=member_id)


@router.get("/summary", response_model=List[MemberStrikeSummary])
def strike_summary(db: Session = Depends(get_db)):
    """Strike count and points per member, recomputed from every strike on each call."""
    return summarize_strikes(repository.members.list(db), repository.strikes.list(db))


@router.post("", response_model=List[StrikeRead])
def create_strike(
    body: StrikeCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    strike = repository.strikes.create(db, {**body.model_dump(), "issued_by": actor_id(principal)})
    return [strike]


@router.patch("", response_model=List[StrikeRead])
def update_strike(
    body: StrikeUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.strikes.update(db, body.id, body.changes())]


@router.delete("/{strike_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_strike(
    strike_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    repository.strikes.delete(db, strike_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
