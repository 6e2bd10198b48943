"""pytest configuration and fixtures."""

import os

# Set required environment variables for testing before any imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime, timedelta  # noqa: E402
from typing import List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, select  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import main  # noqa: E402
from symposium.auth.models import User, UserRole, UserSocial  # noqa: E402
from symposium.auth.schemas import SocialIdentity  # noqa: E402
from symposium.auth.social import get_social_providers  # noqa: E402
from symposium.common.clock import get_now  # noqa: E402
from symposium.common.db import Base, get_db  # noqa: E402
from symposium.common.notifications import Notifier, get_notifier  # noqa: E402
from symposium.common.security import create_access_token  # noqa: E402
from symposium.conferences.models import Conference, ConferenceIssue, IssueReason  # noqa: E402
from symposium.talks.models import Submission, SubmissionResponse, Talk  # noqa: E402

NOW = datetime(2023, 5, 4)


def dates(starts_at, ends_at=None) -> dict:
    """Event dates; a single date means a one-day event."""
    return {"starts_at": starts_at, "ends_at": ends_at or starts_at}


def cfp_dates(starts_at, ends_at=None) -> dict:
    return {"has_cfp": True, "cfp_starts_at": starts_at, "cfp_ends_at": ends_at or starts_at}


def ids(db, *clauses) -> List[int]:
    """Ids of conferences matching every clause."""
    return list(db.execute(select(Conference.id).where(*clauses)).scalars().all())


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent = []

    def send(self, recipients, subject, body):
        self.sent.append({"recipients": list(recipients), "subject": subject, "body": body})


class FakeProvider:
    """Stands in for a login provider; hands back a fixed identity."""

    def __init__(self, name: str, identity: Optional[SocialIdentity] = None):
        self.name = name
        self.identity = identity
        self.codes = []

    def redirect_url(self) -> str:
        return f"https://{self.name}.com/login/oauth/authorize?client_id=test"

    def fetch_identity(self, code: str) -> SocialIdentity:
        self.codes.append(code)
        return self.identity


class Factory:
    """Builds persisted users, conferences, issues and talks for tests."""

    def __init__(self, db):
        self.db = db
        self.counter = 0

    def _next(self) -> int:
        self.counter += 1
        return self.counter

    def user(self, **fields) -> User:
        n = self._next()
        values = {"name": f"Speaker {n}", "email": f"speaker{n}@symposium.dev"}
        values.update(fields)
        user = User(**values)
        self.db.add(user)
        self.db.commit()
        return user

    def admin(self, **fields) -> User:
        return self.user(role=UserRole.ADMIN, **fields)

    def social(self, user: User, service: str, social_id: str) -> UserSocial:
        social = UserSocial(user_id=user.id, service=service, social_id=social_id)
        self.db.add(social)
        self.db.commit()
        return social

    def conference(
        self,
        approved: bool = True,
        rejected: bool = False,
        author: Optional[User] = None,
        favorited_by: Optional[User] = None,
        dismissed_by: Optional[User] = None,
        open_issue: bool = False,
        closed_issue: bool = False,
        **fields,
    ) -> Conference:
        n = self._next()
        values = {
            "title": f"Conference {n}",
            "description": f"Conference number {n}",
            "url": f"https://conference{n}.example",
            "location": "Chicago, IL",
        }
        values.update(dates(NOW + timedelta(days=10), NOW + timedelta(days=11)))
        values.update(fields)
        conference = Conference(**values)
        conference.approved_at = NOW - timedelta(days=30) if approved else None
        conference.rejected_at = NOW - timedelta(days=1) if rejected else None
        if author is not None:
            conference.author_id = author.id
        if favorited_by is not None:
            conference.favorited_by.append(favorited_by)
        if dismissed_by is not None:
            conference.dismissed_by.append(dismissed_by)
        self.db.add(conference)
        self.db.flush()
        if open_issue:
            self.issue(conference)
        if closed_issue:
            self.issue(conference, closed_at=NOW - timedelta(days=1))
        self.db.commit()
        return conference

    def issue(self, conference: Conference, **fields) -> ConferenceIssue:
        values = {"conference_id": conference.id, "reason": IssueReason.SPAM, "note": "Looks like spam"}
        values.update(fields)
        issue = ConferenceIssue(**values)
        self.db.add(issue)
        self.db.commit()
        return issue

    def talk(self, author: User, title: str = "My Talk") -> Talk:
        talk = Talk(author_id=author.id, title=title)
        self.db.add(talk)
        self.db.commit()
        return talk

    def submission(
        self,
        talk: Talk,
        conference: Conference,
        response: Optional[SubmissionResponse] = None,
    ) -> Submission:
        submission = Submission(talk_id=talk.id, conference_id=conference.id, response=response)
        self.db.add(submission)
        self.db.commit()
        return submission


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def providers():
    return {"github": FakeProvider("github")}


@pytest.fixture
def client(db, notifier, providers):
    def override_get_db():
        yield db

    main.app.dependency_overrides[get_db] = override_get_db
    main.app.dependency_overrides[get_now] = lambda: NOW
    main.app.dependency_overrides[get_notifier] = lambda: notifier
    main.app.dependency_overrides[get_social_providers] = lambda: providers
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(user.id), extra={'role': user.role.value})}"}
