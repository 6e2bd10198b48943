"""Admin router - moderation of conferences and reported issues."""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from symposium.auth.models import User
from symposium.common.clock import get_now
from symposium.common.db import get_db
from symposium.common.security import get_admin_user
from symposium.conferences import issues as issue_service
from symposium.conferences import scopes
from symposium.conferences.models import Conference
from symposium.conferences.schemas import ConferenceListItem, IssueClose, IssueRead
from symposium.conferences.service import ConferenceService, to_list_item

router = APIRouter()


@router.get("/conferences/pending", response_model=List[ConferenceListItem])
def list_pending_conferences(
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Conferences waiting for approval."""
    stmt = (
        select(Conference)
        .where(Conference.approved_at.is_(None), scopes.not_rejected())
        .order_by(Conference.created_at.asc(), Conference.id.asc())
    )
    conferences = list(db.execute(stmt).scalars().all())
    issue_service.refresh_open_issue_counts(db, conferences)
    return [to_list_item(conference, current_user, now) for conference in conferences]


@router.get("/conferences/unshared", response_model=List[ConferenceListItem])
def list_unshared_conferences(
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Approved conferences that have not been announced yet."""
    conferences = ConferenceService(db).unshared()
    return [to_list_item(conference, current_user, now) for conference in conferences]


@router.post("/conferences/{conference_id}/shared", response_model=ConferenceListItem)
def mark_conference_shared(
    conference_id: int,
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    service = ConferenceService(db)
    conference = service.mark_shared(service.get_conference(conference_id))
    return to_list_item(conference, current_user, now)


@router.post("/conferences/{conference_id}/approve", response_model=ConferenceListItem)
def approve_conference(
    conference_id: int,
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    service = ConferenceService(db)
    conference = service.approve(service.get_conference(conference_id), now)
    return to_list_item(conference, current_user, now)


@router.post("/conferences/{conference_id}/reject", response_model=ConferenceListItem)
def reject_conference(
    conference_id: int,
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Hide a conference from everyone but admins."""
    service = ConferenceService(db)
    conference = service.reject(service.get_conference(conference_id), now)
    return to_list_item(conference, current_user, now)


@router.post("/conferences/{conference_id}/restore", response_model=ConferenceListItem)
def restore_conference(
    conference_id: int,
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    service = ConferenceService(db)
    conference = service.restore(service.get_conference(conference_id))
    return to_list_item(conference, current_user, now)


@router.get("/issues", response_model=List[IssueRead])
def list_open_issues(
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    return issue_service.list_open_issues(db)


@router.post("/issues/{issue_id}/close", response_model=IssueRead)
def close_issue(
    issue_id: int,
    payload: IssueClose,
    current_user: User = Depends(get_admin_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Resolve an issue with an optional note for the record."""
    issue = issue_service.get_issue(db, issue_id)
    return issue_service.close_issue(db, issue, current_user, payload.admin_note, now)
