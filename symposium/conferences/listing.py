"""Conference discovery: which conferences a viewer sees, and in what order.

The list is a pure function of (filter, sort, month window, viewer, now).
Nothing here keeps state between requests; month paging is expressed by the
caller passing the page it is on plus a direction.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from symposium.auth.models import User
from symposium.conferences import scopes
from symposium.conferences.issues import refresh_open_issue_counts
from symposium.conferences.models import Conference


class ConferenceFilter(str, Enum):
    ALL = "all"
    FUTURE = "future"
    OPEN_CFP = "open_cfp"
    FUTURE_CFP = "future_cfp"
    UNCLOSED_CFP = "unclosed_cfp"
    DISMISSED = "dismissed"
    FAVORITES = "favorites"


class ConferenceSort(str, Enum):
    DATE = "date"
    CFP_OPENING_NEXT = "cfp_opening_next"
    CFP_CLOSING_NEXT = "cfp_closing_next"


class Direction(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"


SORT_FIELDS = {
    ConferenceSort.DATE: "starts_at",
    ConferenceSort.CFP_OPENING_NEXT: "cfp_starts_at",
    ConferenceSort.CFP_CLOSING_NEXT: "cfp_ends_at",
}


@dataclass(frozen=True)
class MonthWindow:
    """A calendar month the list is restricted to."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        # The month after must still be a representable datetime
        if not (1, 1) <= (self.year, self.month) <= (9999, 11):
            raise ValueError(f"Year out of range: {self.year}")

    @classmethod
    def containing(cls, moment: datetime) -> "MonthWindow":
        return cls(moment.year, moment.month)

    def next(self) -> "MonthWindow":
        if self.month == 12:
            return MonthWindow(self.year + 1, 1)
        return MonthWindow(self.year, self.month + 1)

    def previous(self) -> "MonthWindow":
        if self.month == 1:
            return MonthWindow(self.year - 1, 12)
        return MonthWindow(self.year, self.month - 1)

    @property
    def start(self) -> datetime:
        return scopes.month_bounds(self.year, self.month)[0]

    @property
    def end(self) -> datetime:
        return scopes.month_bounds(self.year, self.month)[1]


@dataclass
class ListingParams:
    filter: ConferenceFilter = ConferenceFilter.ALL
    sort: ConferenceSort = ConferenceSort.DATE
    year: Optional[int] = None
    month: Optional[int] = None
    direction: Optional[Direction] = None

    @property
    def sort_field(self) -> str:
        return SORT_FIELDS[self.sort]

    def window(self, now: datetime) -> Optional[MonthWindow]:
        """
        Resolve the month being displayed.

        An explicit year/month always wins. Without one, only the calendar
        view (every conference, by event date) starts on the current month;
        other combinations are unwindowed until the caller pages.
        """
        if self.year is not None and self.month is not None:
            window = MonthWindow(self.year, self.month)
        elif self.direction is not None or (
            self.filter == ConferenceFilter.ALL and self.sort == ConferenceSort.DATE
        ):
            window = MonthWindow.containing(now)
        else:
            return None

        if self.direction == Direction.NEXT:
            return window.next()
        if self.direction == Direction.PREVIOUS:
            return window.previous()
        return window


@dataclass
class ConferenceListing:
    params: ListingParams
    window: Optional[MonthWindow]
    conferences: List[Conference] = field(default_factory=list)


def visibility_clauses(viewer: Optional[User]) -> List[ColumnElement]:
    """Approval and rejection rules shared by every filter."""
    clauses = [scopes.approved()]
    if viewer is None or not viewer.is_admin():
        clauses.append(scopes.not_rejected())
    return clauses


def filter_clauses(
    conference_filter: ConferenceFilter,
    sort: ConferenceSort,
    viewer: Optional[User],
    now: datetime,
) -> List[ColumnElement]:
    sort_field = SORT_FIELDS[sort]

    if conference_filter == ConferenceFilter.DISMISSED:
        return [scopes.where_dismissed_by(viewer)]

    clauses = [scopes.where_not_dismissed_by(viewer)]
    if conference_filter == ConferenceFilter.FUTURE:
        clauses.append(scopes.where_date_is_future(sort_field, now))
    elif conference_filter == ConferenceFilter.OPEN_CFP:
        clauses += [
            scopes.where_has_cfp(),
            scopes.where_cfp_is_open(now),
            scopes.where_date_is_future("starts_at", now),
        ]
    elif conference_filter == ConferenceFilter.FUTURE_CFP:
        clauses += [scopes.where_has_cfp(), scopes.where_cfp_is_future(now)]
    elif conference_filter == ConferenceFilter.UNCLOSED_CFP:
        clauses += [scopes.where_has_cfp(), scopes.where_cfp_is_unclosed(now)]
    elif conference_filter == ConferenceFilter.FAVORITES:
        clauses.append(scopes.where_favorited_by(viewer))
    return clauses


def build_listing_query(
    params: ListingParams,
    viewer: Optional[User],
    now: datetime,
    window: Optional[MonthWindow] = None,
) -> Select:
    """Select the conferences for one page of the list, in display order."""
    sort_column = scopes.date_column(params.sort_field)

    stmt = select(Conference).where(
        *visibility_clauses(viewer),
        *filter_clauses(params.filter, params.sort, viewer, now),
        # Undated conferences are left out of the ordering entirely
        scopes.where_has_date(params.sort_field),
    )
    if window is not None:
        stmt = stmt.where(scopes.where_date_during(window.year, window.month, params.sort_field))

    return stmt.order_by(sort_column.asc(), Conference.id.asc())


def list_conferences(
    db: Session,
    params: ListingParams,
    viewer: Optional[User],
    now: datetime,
) -> ConferenceListing:
    window = params.window(now)
    stmt = build_listing_query(params, viewer, now, window).options(
        selectinload(Conference.favorited_by),
        selectinload(Conference.dismissed_by),
    )
    conferences = list(db.execute(stmt).scalars().all())
    refresh_open_issue_counts(db, conferences)
    return ConferenceListing(params=params, window=window, conferences=conferences)
