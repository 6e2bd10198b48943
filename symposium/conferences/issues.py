"""Reporting, closing and counting conference issues."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from symposium.auth.models import User, UserRole
from symposium.common.config import get_settings
from symposium.common.notifications import Notifier
from symposium.conferences.models import Conference, ConferenceIssue, IssueReason

logger = logging.getLogger(__name__)


def refresh_open_issue_counts(db: Session, conferences: Sequence[Conference]) -> None:
    """
    Recount open issues for the given conferences.

    ``Conference.is_flagged`` reads the stored count only; call this after
    anything that opens or closes an issue.
    """
    if not conferences:
        return
    ids = [conference.id for conference in conferences]
    stmt = (
        select(ConferenceIssue.conference_id, func.count(ConferenceIssue.id))
        .where(ConferenceIssue.conference_id.in_(ids), ConferenceIssue.closed_at.is_(None))
        .group_by(ConferenceIssue.conference_id)
    )
    counts: Dict[int, int] = dict(db.execute(stmt).all())
    for conference in conferences:
        conference.open_issues_count = counts.get(conference.id, 0)


def admin_recipients(db: Session) -> List[str]:
    settings = get_settings()
    emails = db.execute(select(User.email).where(User.role == UserRole.ADMIN)).scalars().all()
    return sorted(set(emails) | set(settings.admin_notification_emails))


def report_issue(
    db: Session,
    conference: Conference,
    reason: IssueReason,
    note: str,
    reporter: Optional[User],
    notifier: Notifier,
) -> ConferenceIssue:
    """Record an issue against a conference and let the admins know."""
    issue = ConferenceIssue(
        conference_id=conference.id,
        user_id=reporter.id if reporter else None,
        reason=reason,
        note=note,
    )
    db.add(issue)
    db.commit()
    db.refresh(issue)

    logger.info(f"Issue {issue.id} ({reason.value}) reported for conference {conference.id}")
    try:
        notifier.issue_reported(admin_recipients(db), issue)
    except Exception:
        logger.exception(f"Failed to notify admins about issue {issue.id}")
    return issue


def get_issue(db: Session, issue_id: int) -> ConferenceIssue:
    issue = db.get(ConferenceIssue, issue_id)
    if not issue:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Issue not found"
        )
    return issue


def close_issue(
    db: Session,
    issue: ConferenceIssue,
    user: User,
    note: Optional[str],
    now: datetime,
) -> ConferenceIssue:
    if not issue.is_open():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Issue already closed"
        )
    issue.close(user, note, now)
    db.commit()
    db.refresh(issue)
    logger.info(f"Issue {issue.id} closed by user {user.id}")
    return issue


def list_open_issues(db: Session) -> List[ConferenceIssue]:
    stmt = (
        select(ConferenceIssue)
        .where(ConferenceIssue.closed_at.is_(None))
        .options(selectinload(ConferenceIssue.conference))
        .order_by(ConferenceIssue.created_at.asc(), ConferenceIssue.id.asc())
    )
    return list(db.execute(stmt).scalars().all())
