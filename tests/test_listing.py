from datetime import datetime, timedelta

import pytest

from conftest import NOW, cfp_dates, dates
from symposium.conferences.listing import (
    ConferenceFilter,
    ConferenceSort,
    Direction,
    ListingParams,
    MonthWindow,
    list_conferences,
)


def listed(db, viewer=None, **params):
    listing = list_conferences(db, ListingParams(**params), viewer, NOW)
    return [conference.id for conference in listing.conferences]


class TestMonthWindow:
    def test_next_wraps_into_january(self):
        assert MonthWindow(2023, 12).next() == MonthWindow(2024, 1)

    def test_previous_wraps_into_december(self):
        assert MonthWindow(2023, 1).previous() == MonthWindow(2022, 12)

    def test_bounds(self):
        window = MonthWindow(2023, 2)
        assert window.start == datetime(2023, 2, 1)
        assert window.end == datetime(2023, 3, 1)

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            MonthWindow(2023, 13)

    def test_last_month_with_a_following_month(self):
        assert MonthWindow(9999, 11).end == datetime(9999, 12, 1)
        with pytest.raises(ValueError):
            MonthWindow(9999, 11).next()


class TestWindowResolution:
    def test_calendar_view_starts_on_current_month(self):
        assert ListingParams().window(NOW) == MonthWindow(2023, 5)

    def test_other_filters_are_unwindowed_by_default(self):
        assert ListingParams(filter=ConferenceFilter.FUTURE).window(NOW) is None
        assert ListingParams(sort=ConferenceSort.CFP_CLOSING_NEXT).window(NOW) is None

    def test_explicit_month_with_direction(self):
        params = ListingParams(year=2023, month=12, direction=Direction.NEXT)
        assert params.window(NOW) == MonthWindow(2024, 1)

    def test_direction_without_month_pages_from_now(self):
        params = ListingParams(filter=ConferenceFilter.FUTURE, direction=Direction.PREVIOUS)
        assert params.window(NOW) == MonthWindow(2023, 4)


class TestMonthNavigation:
    def test_navigating_next_and_previous_months(self, db, factory):
        this_month = factory.conference(**dates(datetime(2023, 5, 20)))
        next_month = factory.conference(**dates(datetime(2023, 6, 5)))

        assert listed(db) == [this_month.id]
        assert listed(db, year=2023, month=5, direction=Direction.NEXT) == [next_month.id]
        assert listed(db, year=2023, month=6, direction=Direction.PREVIOUS) == [this_month.id]

    def test_window_follows_the_sort_field(self, db, factory):
        conference = factory.conference(
            **dates(datetime(2023, 9, 1)),
            **cfp_dates(datetime(2023, 5, 10), datetime(2023, 6, 10)),
        )

        assert listed(db, sort=ConferenceSort.CFP_OPENING_NEXT, year=2023, month=5) == [conference.id]
        assert listed(db, sort=ConferenceSort.CFP_CLOSING_NEXT, year=2023, month=5) == []
        assert listed(db, sort=ConferenceSort.CFP_CLOSING_NEXT, year=2023, month=6) == [conference.id]


class TestSorting:
    def test_sorting_by_event_date(self, db, factory):
        later = factory.conference(**dates(datetime(2023, 6, 10)))
        sooner = factory.conference(**dates(datetime(2023, 5, 10)))

        assert listed(db, filter=ConferenceFilter.FUTURE) == [sooner.id, later.id]

    def test_sorting_by_cfp_opening_date_excludes_undated(self, db, factory):
        later = factory.conference(**cfp_dates(datetime(2023, 6, 10), datetime(2023, 7, 1)))
        sooner = factory.conference(**cfp_dates(datetime(2023, 5, 10), datetime(2023, 7, 1)))
        factory.conference(has_cfp=False)

        assert listed(db, filter=ConferenceFilter.FUTURE, sort=ConferenceSort.CFP_OPENING_NEXT) == [
            sooner.id,
            later.id,
        ]

    def test_sorting_by_cfp_closing_date(self, db, factory):
        later = factory.conference(**cfp_dates(datetime(2023, 5, 10), datetime(2023, 8, 1)))
        sooner = factory.conference(**cfp_dates(datetime(2023, 5, 20), datetime(2023, 6, 1)))

        assert listed(db, filter=ConferenceFilter.FUTURE, sort=ConferenceSort.CFP_CLOSING_NEXT) == [
            sooner.id,
            later.id,
        ]

    def test_ties_break_on_id(self, db, factory):
        first = factory.conference(**dates(datetime(2023, 5, 20)))
        second = factory.conference(**dates(datetime(2023, 5, 20)))

        assert listed(db) == [first.id, second.id]


class TestFilters:
    def test_future_hides_past_conferences(self, db, factory):
        factory.conference(**dates(datetime(2023, 5, 1)))
        today = factory.conference(**dates(NOW))
        upcoming = factory.conference(**dates(datetime(2023, 8, 1)))

        assert listed(db, filter=ConferenceFilter.FUTURE) == [today.id, upcoming.id]

    def test_open_cfp(self, db, factory):
        open_cfp = factory.conference(
            **dates(datetime(2023, 7, 1)),
            **cfp_dates(datetime(2023, 5, 1), datetime(2023, 6, 1)),
        )
        factory.conference(
            **dates(datetime(2023, 8, 1)),
            **cfp_dates(datetime(2023, 6, 1), datetime(2023, 7, 1)),
        )
        factory.conference(
            **dates(datetime(2023, 4, 1)),
            **cfp_dates(datetime(2023, 3, 1), datetime(2023, 6, 1)),
        )

        assert listed(db, filter=ConferenceFilter.OPEN_CFP) == [open_cfp.id]

    def test_future_cfp(self, db, factory):
        factory.conference(**cfp_dates(datetime(2023, 5, 1), datetime(2023, 6, 1)))
        future_cfp = factory.conference(**cfp_dates(datetime(2023, 6, 1), datetime(2023, 7, 1)))

        assert listed(db, filter=ConferenceFilter.FUTURE_CFP) == [future_cfp.id]

    def test_unclosed_cfp(self, db, factory):
        factory.conference(**cfp_dates(datetime(2023, 4, 1), datetime(2023, 5, 1)))
        open_cfp = factory.conference(**cfp_dates(datetime(2023, 5, 1), datetime(2023, 6, 1)))
        future_cfp = factory.conference(**cfp_dates(datetime(2023, 6, 1), datetime(2023, 7, 1)))

        assert listed(db, filter=ConferenceFilter.UNCLOSED_CFP) == [open_cfp.id, future_cfp.id]

    def test_favorites(self, db, factory):
        user = factory.user()
        favorite = factory.conference(favorited_by=user)
        factory.conference()

        assert listed(db, user, filter=ConferenceFilter.FAVORITES) == [favorite.id]
        assert listed(db, None, filter=ConferenceFilter.FAVORITES) == []

    def test_dismissed(self, db, factory):
        user = factory.user()
        dismissed = factory.conference(dismissed_by=user)
        factory.conference()

        assert listed(db, user, filter=ConferenceFilter.DISMISSED) == [dismissed.id]
        assert listed(db, None, filter=ConferenceFilter.DISMISSED) == []

    def test_dismissed_conferences_are_hidden_elsewhere(self, db, factory):
        user = factory.user()
        dismissed = factory.conference(dismissed_by=user)
        kept = factory.conference()

        assert listed(db, user, filter=ConferenceFilter.FUTURE) == [kept.id]
        assert sorted(listed(db, None, filter=ConferenceFilter.FUTURE)) == sorted([dismissed.id, kept.id])

    def test_dismissed_favorite_is_hidden_from_favorites(self, db, factory):
        user = factory.user()
        conference = factory.conference(favorited_by=user)
        conference.dismissed_by.append(user)
        db.commit()

        assert listed(db, user, filter=ConferenceFilter.FAVORITES) == []


class TestVisibility:
    def test_unapproved_conferences_are_never_listed(self, db, factory):
        admin = factory.admin()
        factory.conference(approved=False)

        assert listed(db, None, filter=ConferenceFilter.FUTURE) == []
        assert listed(db, admin, filter=ConferenceFilter.FUTURE) == []

    def test_rejected_conferences_are_listed_for_admins_only(self, db, factory):
        admin = factory.admin()
        user = factory.user()
        rejected = factory.conference(rejected=True)

        assert listed(db, None, filter=ConferenceFilter.FUTURE) == []
        assert listed(db, user, filter=ConferenceFilter.FUTURE) == []
        assert listed(db, admin, filter=ConferenceFilter.FUTURE) == [rejected.id]

    def test_listing_refreshes_flags(self, db, factory):
        flagged = factory.conference(open_issue=True)

        listing = list_conferences(db, ListingParams(filter=ConferenceFilter.FUTURE), None, NOW)

        assert listing.conferences == [flagged]
        assert flagged.is_flagged()
