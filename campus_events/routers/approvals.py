"""Account approval routes — college admin and forum-head peer paths."""
import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from campus_events.auth import Principal, get_principal
from campus_events.database import get_db
from campus_events.models.user import ApprovalStatus
from campus_events.schemas.user import ApprovalPayload, CollegeUserOut, TeacherOut, UserOut
from campus_events.services import approval_service, staff_service

logger = logging.getLogger(__name__)
admin_router = APIRouter()
forum_router = APIRouter()


@admin_router.get("/", response_model=list[CollegeUserOut])
def list_users(
    status: Optional[ApprovalStatus] = Query(None),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Users of the admin's college; `?status=pending` gives the approval queue."""
    return approval_service.get_college_users(db, principal, approval_status=status)


@admin_router.post("/{user_id}/approve", response_model=UserOut)
def approve_user(
    user_id: str,
    payload: Optional[ApprovalPayload] = Body(None),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Approve a pending teacher or forum head (forum heads need a forum_id)."""
    forum_id = payload.forum_id if payload else None
    return approval_service.approve_account(db, principal, user_id, forum_id=forum_id)


@admin_router.post("/{user_id}/reject", response_model=UserOut)
def reject_user(user_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    return approval_service.reject_account(db, principal, user_id)


@admin_router.delete("/{user_id}")
def delete_user(user_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Delete a user; their staff assignments are released."""
    approval_service.delete_account(db, principal, user_id)
    return {"message": "User deleted successfully."}


@forum_router.get("/heads/pending", response_model=list[UserOut])
def pending_forum_heads(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Candidates for the forums the caller heads."""
    return approval_service.get_pending_forum_heads(db, principal)


@forum_router.post("/heads/{user_id}/approve", response_model=UserOut)
def approve_forum_head(
    user_id: str,
    payload: Optional[ApprovalPayload] = Body(None),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    forum_id = payload.forum_id if payload else None
    return approval_service.approve_forum_head(db, principal, user_id, forum_id=forum_id)


@forum_router.post("/heads/{user_id}/reject", response_model=UserOut)
def reject_forum_head(user_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    return approval_service.reject_forum_head(db, principal, user_id)


@forum_router.get("/teachers", response_model=list[TeacherOut])
def requestable_teachers(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Approved teachers a forum head can request as event staff."""
    return staff_service.get_requestable_teachers(db, principal)
