"""
Routes for the member roster.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from auth.dependencies import actor_id, require_admin
from fundmanager import repository
from fundmanager.db import get_db
from schemas.auth import Principal
from schemas.members import MemberCreate, MemberRead, MemberUpdate

router = APIRouter(prefix="/api/members", tags=["Members"])


@router.get("", response_model=List[MemberRead])
def list_members(db: Session = Depends(get_db)):
    """List all members, newest first."""
    return repository.members.list(db)


@router.post("", response_model=List[MemberRead])
def create_member(
    body: MemberCreate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    member = repository.members.create(db, {**body.model_dump(), "added_by": actor_id(principal)})
    return [member]


@router.patch("", response_model=List[MemberRead])
def update_member(
    body: MemberUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    return [repository.members.update(db, body.id, body.changes())]


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_member(
    member_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(require_admin),
):
    """Remove a member. Strikes, tasks and orders pointing at it are left as they are."""
    repository.members.delete(db, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
