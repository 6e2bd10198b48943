"""Conference router - listing, detail, owner edits and per-user toggles."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from symposium.auth.models import User
from symposium.common.clock import get_now
from symposium.common.config import get_settings
from symposium.common.db import get_db
from symposium.common.notifications import Notifier, get_notifier
from symposium.common.schemas import Paginated
from symposium.common.security import get_current_user, get_optional_user
from symposium.conferences import issues as issue_service
from symposium.conferences.listing import (
    ConferenceFilter,
    ConferenceSort,
    Direction,
    ListingParams,
    MonthWindow,
    list_conferences,
)
from symposium.conferences.schemas import (
    ConferenceCreate,
    ConferenceDetail,
    ConferenceListItem,
    ConferenceListResponse,
    ConferenceUpdate,
    IssueCreate,
    IssueRead,
    MonthRead,
    ToggleResponse,
)
from symposium.conferences.service import ConferenceService, to_detail, to_list_item

router = APIRouter()


def _refuse() -> RedirectResponse:
    """Non-owners are sent home instead of getting an error."""
    return RedirectResponse(get_settings().home_url, status_code=status.HTTP_303_SEE_OTHER)


def _month(window: Optional[MonthWindow]) -> Optional[MonthRead]:
    if window is None:
        return None
    return MonthRead(year=window.year, month=window.month)


@router.get("", response_model=ConferenceListResponse)
def list_conference_page(
    conference_filter: ConferenceFilter = Query(ConferenceFilter.ALL, alias="filter"),
    sort: ConferenceSort = Query(ConferenceSort.DATE),
    year: Optional[int] = Query(None, ge=1970, le=9998),
    month: Optional[int] = Query(None, ge=1, le=12),
    direction: Optional[Direction] = Query(None),
    viewer: Optional[User] = Depends(get_optional_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """
    List conferences for one filter/sort/month combination.

    Pass the month currently displayed together with ``direction`` to page
    forwards or backwards.
    """
    params = ListingParams(filter=conference_filter, sort=sort, year=year, month=month, direction=direction)
    listing = list_conferences(db, params, viewer, now)
    window = listing.window

    return ConferenceListResponse(
        filter=conference_filter,
        sort=sort,
        month=_month(window),
        previous_month=_month(window.previous()) if window else None,
        next_month=_month(window.next()) if window else None,
        conferences=[to_list_item(conference, viewer, now) for conference in listing.conferences],
    )


@router.get("/search", response_model=Paginated[ConferenceListItem])
def search_conferences(
    q: str = Query(..., min_length=1, max_length=255),
    page: int = Query(1, ge=1),
    size: Optional[int] = Query(None, ge=1, le=200),
    viewer: Optional[User] = Depends(get_optional_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Search upcoming conferences by title or location."""
    size = size or get_settings().default_page_size
    conferences, total = ConferenceService(db).search(q, now, page=page, size=size)
    return Paginated[ConferenceListItem](
        items=[to_list_item(conference, viewer, now) for conference in conferences],
        total=total,
        page=page,
        size=size,
    )


@router.post("", response_model=ConferenceDetail, status_code=status.HTTP_201_CREATED)
def create_conference(
    payload: ConferenceCreate,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Submit a conference; it stays out of the list until an admin approves it."""
    service = ConferenceService(db)
    conference = service.create_conference(payload, current_user)
    return to_detail(conference, current_user, now, talks=[])


@router.get("/{conference_id}", response_model=ConferenceDetail)
def get_conference(
    conference_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """Get conference details, including the viewer's talks and their submission status."""
    service = ConferenceService(db)
    conference = service.get_visible_conference(conference_id, viewer)
    return to_detail(conference, viewer, now, service.viewer_talks(conference, viewer))


@router.get("/{conference_id}/edit", response_model=ConferenceDetail)
def edit_conference(
    conference_id: int,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    service = ConferenceService(db)
    conference = service.get_conference(conference_id)
    if not conference.is_owned_by(current_user):
        return _refuse()
    return to_detail(conference, current_user, now, talks=[])


@router.put("/{conference_id}", response_model=ConferenceDetail)
def update_conference(
    conference_id: int,
    payload: ConferenceUpdate,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    service = ConferenceService(db)
    conference = service.get_conference(conference_id)
    if not conference.is_owned_by(current_user):
        return _refuse()
    conference = service.update_conference(conference, payload)
    return to_detail(conference, current_user, now, talks=[])


@router.delete("/{conference_id}")
def delete_conference(
    conference_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = ConferenceService(db)
    conference = service.get_conference(conference_id)
    if not conference.is_owned_by(current_user):
        return _refuse()
    service.delete_conference(conference)
    return RedirectResponse(request.app.url_path_for("list_conference_page"), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{conference_id}/favorite", response_model=ToggleResponse)
def toggle_favorite(
    conference_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Favorite or unfavorite; a dismissed conference is left as it is."""
    service = ConferenceService(db)
    conference = service.get_visible_conference(conference_id, current_user)
    changed = service.toggle_favorite(conference, current_user)
    return ToggleResponse(
        conference_id=conference.id,
        changed=changed,
        is_favorited=conference.is_favorited_by(current_user),
        is_dismissed=conference.is_dismissed_by(current_user),
    )


@router.post("/{conference_id}/dismiss", response_model=ToggleResponse)
def toggle_dismissed(
    conference_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Dismiss or undismiss; a favorited conference is left as it is."""
    service = ConferenceService(db)
    conference = service.get_visible_conference(conference_id, current_user)
    changed = service.toggle_dismissed(conference, current_user)
    return ToggleResponse(
        conference_id=conference.id,
        changed=changed,
        is_favorited=conference.is_favorited_by(current_user),
        is_dismissed=conference.is_dismissed_by(current_user),
    )


@router.post("/{conference_id}/issues", response_model=IssueRead, status_code=status.HTTP_201_CREATED)
def report_issue(
    conference_id: int,
    payload: IssueCreate,
    current_user: User = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    """Report a problem with a listing; admins are notified."""
    conference = ConferenceService(db).get_visible_conference(conference_id, current_user)
    return issue_service.report_issue(db, conference, payload.reason, payload.note, current_user, notifier)
