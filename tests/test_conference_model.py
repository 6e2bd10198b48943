"""Conference predicates and display helpers."""

from datetime import datetime, timedelta

from conftest import NOW, cfp_dates, dates
from symposium.conferences.issues import refresh_open_issue_counts
from symposium.conferences.models import Conference
from symposium.conferences.speaker_package import SpeakerPackage

YESTERDAY = NOW - timedelta(days=1)
TOMORROW = NOW + timedelta(days=1)


def make(**fields) -> Conference:
    return Conference(title="JediCon", description="", **fields)


class TestAcceptingProposals:
    def test_during_the_call_for_papers(self):
        conference = make(**cfp_dates(YESTERDAY, TOMORROW))
        assert conference.is_currently_accepting_proposals(NOW)

    def test_window_bounds_are_inclusive(self):
        conference = make(**cfp_dates(NOW, NOW + timedelta(days=5)))
        assert conference.is_currently_accepting_proposals(NOW)
        assert conference.is_currently_accepting_proposals(NOW + timedelta(days=5))

    def test_before_and_after_the_call_for_papers(self):
        upcoming = make(**cfp_dates(TOMORROW, TOMORROW + timedelta(days=1)))
        closed = make(**cfp_dates(YESTERDAY - timedelta(days=1), YESTERDAY))
        assert not upcoming.is_currently_accepting_proposals(NOW)
        assert not closed.is_currently_accepting_proposals(NOW)

    def test_unannounced_cfp_is_not_accepting(self):
        conference = make(has_cfp=True, cfp_starts_at=None, cfp_ends_at=None)
        assert not conference.is_currently_accepting_proposals(NOW)

    def test_conference_without_cfp_is_not_accepting(self):
        conference = make(has_cfp=False, cfp_starts_at=YESTERDAY, cfp_ends_at=TOMORROW)
        assert not conference.is_currently_accepting_proposals(NOW)


class TestRejection:
    def test_checking_whether_rejected(self):
        assert not make().is_rejected()
        assert make(rejected_at=NOW).is_rejected()

    def test_reject_then_restore_round_trips(self):
        conference = make()
        conference.reject(NOW)
        assert conference.rejected_at == NOW
        assert conference.is_rejected()

        conference.restore()
        assert conference.rejected_at is None
        assert not conference.is_rejected()

    def test_rejection_is_independent_of_approval(self):
        conference = make(approved_at=YESTERDAY, rejected_at=NOW)
        assert conference.is_approved()
        assert conference.is_rejected()

    def test_rejected_conferences_are_only_visible_to_admins(self, factory):
        conference = make(rejected_at=NOW)
        assert not conference.is_visible_to(None)
        assert not conference.is_visible_to(factory.user())
        assert conference.is_visible_to(factory.admin())


class TestSearchable:
    def test_past_conferences_are_not_searchable(self):
        assert not make(**dates(YESTERDAY)).should_be_searchable(NOW)
        assert make(**dates(TOMORROW)).should_be_searchable(NOW)

    def test_end_date_wins_over_start_date(self):
        running = make(starts_at=YESTERDAY, ends_at=TOMORROW)
        assert running.should_be_searchable(NOW)

    def test_start_date_is_used_without_end_date(self):
        assert make(starts_at=TOMORROW, ends_at=None).should_be_searchable(NOW)

    def test_undated_conferences_are_not_searchable(self):
        assert not make().should_be_searchable(NOW)

    def test_rejected_conferences_are_not_searchable(self):
        assert not make(rejected_at=NOW, **dates(TOMORROW)).should_be_searchable(NOW)
        assert make(rejected_at=None, **dates(TOMORROW)).should_be_searchable(NOW)


class TestFlagged:
    def test_unloaded_count_is_not_flagged(self):
        assert not make().is_flagged()

    def test_reported_issue_flags_after_refresh(self, db, factory):
        conference = factory.conference()
        refresh_open_issue_counts(db, [conference])
        assert not conference.is_flagged()

        factory.issue(conference)
        # Stale until explicitly recounted
        assert not conference.is_flagged()

        refresh_open_issue_counts(db, [conference])
        assert conference.open_issues_count == 1
        assert conference.is_flagged()

    def test_closed_issues_do_not_flag(self, db, factory):
        conference = factory.conference(closed_issue=True)
        refresh_open_issue_counts(db, [conference])
        assert not conference.is_flagged()

    def test_counts_only_open_issues(self, db, factory):
        conference = factory.conference(open_issue=True, closed_issue=True)
        factory.issue(conference)
        refresh_open_issue_counts(db, [conference])
        assert conference.open_issues_count == 2


class TestEventDatesDisplay:
    def test_no_dates(self):
        assert make(starts_at=None, ends_at=None).event_dates_display is None

    def test_start_date_without_end_date(self):
        conference = make(starts_at=datetime(2020, 1, 1, 9), ends_at=None)
        assert conference.event_dates_display == "January 1, 2020"

    def test_end_date_without_start_date(self):
        conference = make(starts_at=None, ends_at=datetime(2020, 1, 1, 9))
        assert conference.event_dates_display is None

    def test_same_start_and_end_day(self):
        conference = make(starts_at=datetime(2020, 1, 1, 9), ends_at=datetime(2020, 1, 1, 16))
        assert conference.event_dates_display == "January 1, 2020"

    def test_different_start_and_end_days(self):
        conference = make(starts_at=datetime(2020, 1, 1, 9), ends_at=datetime(2020, 1, 3, 16))
        assert conference.event_dates_display == "Jan 1 2020 - Jan 3 2020"


class TestSpeakerPackage:
    def test_amounts_are_stored_in_minor_units(self):
        package = SpeakerPackage(currency="USD", travel="10", food="10.50")
        assert package.to_database() == {"currency": "usd", "travel": 1000, "food": 1050}

    def test_reading_back_from_the_database(self):
        conference = make(speaker_package={"currency": "usd", "food": 10000})
        package = conference.package
        assert package.currency == "usd"
        assert str(package.food) == "100.00"
        assert package.count() == 1
        assert package.is_displayable()

    def test_missing_currency_is_not_displayable(self):
        package = SpeakerPackage(currency=None, food=100)
        assert not package.is_displayable()

    def test_empty_package(self):
        package = make(speaker_package=None).package
        assert package.currency is None
        assert package.count() == 0
