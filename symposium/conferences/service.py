"""Conference service layer - business logic for conference operations."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from symposium.auth.models import User
from symposium.conferences import scopes
from symposium.conferences.issues import refresh_open_issue_counts
from symposium.conferences.models import Conference
from symposium.conferences.schemas import (
    ConferenceCreate,
    ConferenceDetail,
    ConferenceListItem,
    ConferenceTalk,
    ConferenceUpdate,
)
from symposium.talks.models import Submission, Talk

logger = logging.getLogger(__name__)


def to_list_item(conference: Conference, viewer: Optional[User], now: datetime) -> ConferenceListItem:
    return ConferenceListItem(
        id=conference.id,
        title=conference.title,
        location=conference.location,
        url=conference.url,
        starts_at=conference.starts_at,
        ends_at=conference.ends_at,
        has_cfp=conference.has_cfp,
        cfp_starts_at=conference.cfp_starts_at,
        cfp_ends_at=conference.cfp_ends_at,
        event_dates_display=conference.event_dates_display,
        is_flagged=conference.is_flagged(),
        is_rejected=conference.is_rejected(),
        is_accepting_proposals=conference.is_currently_accepting_proposals(now),
        is_favorited=viewer is not None and conference.is_favorited_by(viewer),
        is_dismissed=viewer is not None and conference.is_dismissed_by(viewer),
    )


def to_detail(
    conference: Conference,
    viewer: Optional[User],
    now: datetime,
    talks: List[ConferenceTalk],
) -> ConferenceDetail:
    item = to_list_item(conference, viewer, now)
    package = conference.package
    return ConferenceDetail(
        **item.model_dump(),
        description=conference.description,
        cfp_url=conference.cfp_url,
        latitude=conference.latitude,
        longitude=conference.longitude,
        author_id=conference.author_id,
        is_approved=conference.is_approved(),
        is_owner=conference.is_owned_by(viewer),
        speaker_package=package if package.is_displayable() else None,
        talks=talks,
    )


class ConferenceService:
    """Service for conference records, per-user toggles and moderation."""

    def __init__(self, session: Session):
        self.session = session

    def get_conference(self, conference_id: int) -> Conference:
        conference = self.session.get(Conference, conference_id)
        if not conference:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Conference not found"
            )
        return conference

    def get_visible_conference(self, conference_id: int, viewer: Optional[User]) -> Conference:
        """Like ``get_conference``, but rejected listings 404 for non-admins."""
        conference = self.get_conference(conference_id)
        if not conference.is_visible_to(viewer):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Conference not found"
            )
        refresh_open_issue_counts(self.session, [conference])
        return conference

    def create_conference(self, data: ConferenceCreate, author: User) -> Conference:
        values = data.model_dump(exclude={"speaker_package"})
        conference = Conference(**values, author_id=author.id)
        if data.speaker_package is not None:
            conference.speaker_package = data.speaker_package.to_database()

        self.session.add(conference)
        self.session.commit()
        self.session.refresh(conference)
        logger.info(f"Conference {conference.id} created by user {author.id}")
        return conference

    def update_conference(self, conference: Conference, data: ConferenceUpdate) -> Conference:
        """
        Apply the fields that were sent.

        The end date is checked against the stored start date too, so a
        partial update cannot produce an inverted range.

        Raises:
            HTTPException: 422 on ``ends_at`` if the resulting range is inverted
        """
        changes = data.model_dump(exclude_unset=True, exclude={"speaker_package"})
        starts_at = changes.get("starts_at", conference.starts_at)
        ends_at = changes.get("ends_at", conference.ends_at)
        if starts_at is not None and ends_at is not None and ends_at.date() < starts_at.date():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=[{
                    "loc": ["body", "ends_at"],
                    "msg": "The end date must be on or after the start date",
                    "type": "value_error",
                }],
            )

        for key, value in changes.items():
            setattr(conference, key, value)
        if "speaker_package" in data.model_fields_set:
            package = data.speaker_package
            conference.speaker_package = package.to_database() if package is not None else None

        self.session.commit()
        self.session.refresh(conference)
        return conference

    def delete_conference(self, conference: Conference) -> None:
        conference_id = conference.id
        self.session.delete(conference)
        self.session.commit()
        logger.info(f"Conference {conference_id} deleted")

    # Favorite / dismiss toggles
    def toggle_favorite(self, conference: Conference, user: User) -> bool:
        """
        Flip the user's favorite on a conference.

        Refused (returns False, nothing changes) while the user has the
        conference dismissed.
        """
        if conference.is_dismissed_by(user):
            return False
        if conference.is_favorited_by(user):
            conference.favorited_by.remove(user)
        else:
            conference.favorited_by.append(user)
        self.session.commit()
        return True

    def toggle_dismissed(self, conference: Conference, user: User) -> bool:
        """Flip the user's dismissal; refused while the conference is a favorite."""
        if conference.is_favorited_by(user):
            return False
        if conference.is_dismissed_by(user):
            conference.dismissed_by.remove(user)
        else:
            conference.dismissed_by.append(user)
        self.session.commit()
        return True

    # Moderation
    def approve(self, conference: Conference, now: datetime) -> Conference:
        conference.approve(now)
        self.session.commit()
        logger.info(f"Conference {conference.id} approved")
        return conference

    def reject(self, conference: Conference, now: datetime) -> Conference:
        conference.reject(now)
        self.session.commit()
        logger.info(f"Conference {conference.id} rejected")
        return conference

    def restore(self, conference: Conference) -> Conference:
        conference.restore()
        self.session.commit()
        logger.info(f"Conference {conference.id} restored")
        return conference

    # Queries
    def viewer_talks(self, conference: Conference, viewer: Optional[User]) -> List[ConferenceTalk]:
        """The viewer's talks, flagged with how this conference answered them."""
        if viewer is None:
            return []
        talks = self.session.execute(
            select(Talk).where(Talk.author_id == viewer.id).order_by(Talk.id)
        ).scalars().all()
        submissions = {
            submission.talk_id: submission
            for submission in self.session.execute(
                select(Submission).where(
                    Submission.conference_id == conference.id,
                    Submission.talk_id.in_([talk.id for talk in talks]),
                )
            ).scalars().all()
        }
        result = []
        for talk in talks:
            submission = submissions.get(talk.id)
            result.append(ConferenceTalk(
                id=talk.id,
                title=talk.title,
                submitted=submission is not None,
                accepted=submission is not None and submission.is_accepted(),
                rejected=submission is not None and submission.is_rejected(),
            ))
        return result

    def search(self, query: str, now: datetime, page: int = 1, size: int = 50) -> Tuple[List[Conference], int]:
        """Free-text search over title and location, limited to searchable conferences."""
        conditions = [
            scopes.approved(),
            scopes.where_searchable(now),
            scopes.where_matches_text(query),
        ]
        total = self.session.execute(
            select(func.count(Conference.id)).where(*conditions)
        ).scalar_one()
        stmt = (
            select(Conference)
            .where(*conditions)
            .order_by(Conference.starts_at.asc(), Conference.id.asc())
            .offset((page - 1) * size)
            .limit(size)
        )
        conferences = list(self.session.execute(stmt).scalars().all())
        refresh_open_issue_counts(self.session, conferences)
        return conferences, total

    def featured_conferences(self) -> List[Conference]:
        stmt = (
            select(Conference)
            .where(scopes.featured(), scopes.approved(), scopes.not_rejected())
            .order_by(Conference.starts_at.asc(), Conference.id.asc())
        )
        conferences = list(self.session.execute(stmt).scalars().all())
        refresh_open_issue_counts(self.session, conferences)
        return conferences

    def favorited_by(self, user: User) -> List[Conference]:
        stmt = (
            select(Conference)
            .where(scopes.where_favorited_by(user), scopes.not_rejected())
            .options(selectinload(Conference.favorited_by), selectinload(Conference.dismissed_by))
            .order_by(Conference.starts_at.asc(), Conference.id.asc())
        )
        conferences = list(self.session.execute(stmt).scalars().all())
        refresh_open_issue_counts(self.session, conferences)
        return conferences

    def submitted_to_by(self, user: User) -> List[Conference]:
        """Conferences the user has submitted at least one talk to."""
        submitted_ids = (
            select(Submission.conference_id)
            .join(Talk, Talk.id == Submission.talk_id)
            .where(Talk.author_id == user.id)
        )
        stmt = (
            select(Conference)
            .where(Conference.id.in_(submitted_ids))
            .options(selectinload(Conference.favorited_by), selectinload(Conference.dismissed_by))
            .order_by(Conference.starts_at.asc(), Conference.id.asc())
        )
        conferences = list(self.session.execute(stmt).scalars().all())
        refresh_open_issue_counts(self.session, conferences)
        return conferences

    def unshared(self) -> List[Conference]:
        """Approved conferences not yet announced on social media."""
        stmt = (
            select(Conference)
            .where(scopes.approved(), scopes.not_rejected(), scopes.not_shared())
            .order_by(Conference.created_at.asc(), Conference.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def mark_shared(self, conference: Conference) -> Conference:
        conference.is_shared = True
        self.session.commit()
        return conference
