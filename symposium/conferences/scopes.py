"""Composable query predicates over conferences.

Each function returns a SQLAlchemy boolean clause, so scopes combine with
``select(Conference).where(scope_a, scope_b)`` and can be checked one at a
time against a throwaway database.
"""

from datetime import datetime, time
from typing import Optional

from sqlalchemy import and_, false, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from symposium.auth.models import User
from symposium.conferences.models import Conference, conference_dismissals, conference_favorites

DATE_FIELDS = {
    "starts_at": Conference.starts_at,
    "ends_at": Conference.ends_at,
    "cfp_starts_at": Conference.cfp_starts_at,
    "cfp_ends_at": Conference.cfp_ends_at,
}


def date_column(field: str):
    try:
        return DATE_FIELDS[field]
    except KeyError:
        raise ValueError(f"Unknown conference date field: {field}") from None


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min)


def month_bounds(year: int, month: int):
    """Return ``(first day of month, first day of next month)``."""
    start = datetime(year, month, 1)
    if month == 12:
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)


def approved() -> ColumnElement:
    return Conference.approved_at.is_not(None)


def not_rejected() -> ColumnElement:
    return Conference.rejected_at.is_(None)


def not_shared() -> ColumnElement:
    return Conference.is_shared.is_(False)


def featured() -> ColumnElement:
    return Conference.is_featured.is_(True)


def where_has_dates() -> ColumnElement:
    return and_(Conference.starts_at.is_not(None), Conference.ends_at.is_not(None))


def where_has_cfp_start() -> ColumnElement:
    return Conference.cfp_starts_at.is_not(None)


def where_has_cfp_end() -> ColumnElement:
    return Conference.cfp_ends_at.is_not(None)


def where_has_date(field: str) -> ColumnElement:
    return date_column(field).is_not(None)


def where_cfp_is_open(now: datetime) -> ColumnElement:
    return and_(Conference.cfp_starts_at <= now, Conference.cfp_ends_at >= now)


def where_cfp_is_future(now: datetime) -> ColumnElement:
    return Conference.cfp_starts_at > now


def where_cfp_is_unclosed(now: datetime) -> ColumnElement:
    return or_(Conference.cfp_ends_at.is_(None), Conference.cfp_ends_at >= now)


def where_has_cfp() -> ColumnElement:
    return Conference.has_cfp.is_(True)


def where_date_is_future(field: str, now: datetime) -> ColumnElement:
    """Anything dated today or later; undated conferences never match."""
    return date_column(field) >= start_of_day(now)


def where_date_during(year: int, month: int, field: str = "starts_at") -> ColumnElement:
    """Inclusive at the first of the month, exclusive at the first of the next."""
    column = date_column(field)
    start, end = month_bounds(year, month)
    return and_(column >= start, column < end)


def where_favorited_by(user: Optional[User]) -> ColumnElement:
    if user is None:
        return false()
    return Conference.id.in_(
        select(conference_favorites.c.conference_id).where(conference_favorites.c.user_id == user.id)
    )


def where_dismissed_by(user: Optional[User]) -> ColumnElement:
    if user is None:
        return false()
    return Conference.id.in_(
        select(conference_dismissals.c.conference_id).where(conference_dismissals.c.user_id == user.id)
    )


def where_not_dismissed_by(user: Optional[User]) -> ColumnElement:
    if user is None:
        return true()
    return Conference.id.not_in(
        select(conference_dismissals.c.conference_id).where(conference_dismissals.c.user_id == user.id)
    )


def where_searchable(now: datetime) -> ColumnElement:
    """SQL twin of ``Conference.should_be_searchable``."""
    return and_(
        not_rejected(),
        or_(
            Conference.ends_at > now,
            and_(Conference.ends_at.is_(None), Conference.starts_at > now),
        ),
    )


def where_matches_text(query: str) -> ColumnElement:
    term = query.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{term}%"
    return or_(
        Conference.title.ilike(pattern, escape="\\"),
        Conference.location.ilike(pattern, escape="\\"),
    )
