"""Conference module models."""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from symposium.common.db import Base
from symposium.conferences.speaker_package import SpeakerPackage


conference_favorites = Table(
    "conference_favorites",
    Base.metadata,
    Column("conference_id", ForeignKey("conferences.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

conference_dismissals = Table(
    "conference_dismissals",
    Base.metadata,
    Column("conference_id", ForeignKey("conferences.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Conference(Base):
    """A listed conference, its call for papers and its moderation state."""

    __tablename__ = "conferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    author_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[Optional[str]] = mapped_column(String(500))
    cfp_url: Mapped[Optional[str]] = mapped_column(String(500))
    location: Mapped[Optional[str]] = mapped_column(String(255))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    starts_at: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    ends_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    has_cfp: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    cfp_starts_at: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    cfp_ends_at: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    speaker_package: Mapped[Optional[dict]] = mapped_column(JSON)
    is_shared: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    author: Mapped[Optional["User"]] = relationship("User", back_populates="conferences")
    issues: Mapped[List["ConferenceIssue"]] = relationship(
        "ConferenceIssue", back_populates="conference", cascade="all, delete-orphan"
    )
    favorited_by: Mapped[List["User"]] = relationship(
        "User", secondary=conference_favorites, back_populates="favorite_conferences"
    )
    dismissed_by: Mapped[List["User"]] = relationship(
        "User", secondary=conference_dismissals, back_populates="dismissed_conferences"
    )
    submissions: Mapped[List["Submission"]] = relationship(
        "Submission", back_populates="conference", cascade="all, delete-orphan"
    )

    # Filled in by refresh_open_issue_counts(); never recomputed implicitly.
    open_issues_count = None

    def is_currently_accepting_proposals(self, now: datetime) -> bool:
        if not self.has_cfp or self.cfp_starts_at is None or self.cfp_ends_at is None:
            return False
        return self.cfp_starts_at <= now <= self.cfp_ends_at

    def is_approved(self) -> bool:
        return self.approved_at is not None

    def is_rejected(self) -> bool:
        return self.rejected_at is not None

    def is_flagged(self) -> bool:
        return (self.open_issues_count or 0) > 0

    def should_be_searchable(self, now: datetime) -> bool:
        if self.is_rejected():
            return False
        last_day = self.ends_at or self.starts_at
        return last_day is not None and last_day > now

    def is_visible_to(self, viewer: Optional["User"]) -> bool:
        """Rejected conferences are hidden from everyone but admins."""
        if not self.is_rejected():
            return True
        return viewer is not None and viewer.is_admin()

    def is_owned_by(self, user: Optional["User"]) -> bool:
        return user is not None and self.author_id == user.id

    def is_favorited_by(self, user: "User") -> bool:
        return any(u.id == user.id for u in self.favorited_by)

    def is_dismissed_by(self, user: "User") -> bool:
        return any(u.id == user.id for u in self.dismissed_by)

    def approve(self, now: datetime) -> None:
        self.approved_at = now

    def reject(self, now: datetime) -> None:
        self.rejected_at = now

    def restore(self) -> None:
        self.rejected_at = None

    @property
    def package(self) -> SpeakerPackage:
        return SpeakerPackage.from_database(self.speaker_package)

    @property
    def event_dates_display(self) -> Optional[str]:
        if self.starts_at is None:
            return None
        start = self.starts_at
        end = self.ends_at
        if end is None or end.date() == start.date():
            return f"{start:%B} {start.day}, {start.year}"
        return f"{start:%b} {start.day} {start.year} - {end:%b} {end.day} {end.year}"


class IssueReason(str, enum.Enum):
    SPAM = "spam"
    DUPLICATE = "duplicate"
    INCORRECT_INFO = "incorrect_info"
    OTHER = "other"


class ConferenceIssue(Base):
    """A problem with a listing, reported by a user and resolved by an admin."""

    __tablename__ = "conference_issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    conference_id: Mapped[int] = mapped_column(
        ForeignKey("conferences.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    reason: Mapped[IssueReason] = mapped_column(Enum(IssueReason), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    closed_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    admin_note: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    conference: Mapped["Conference"] = relationship("Conference", back_populates="issues")
    reporter: Mapped[Optional["User"]] = relationship("User", foreign_keys=[user_id])
    closer: Mapped[Optional["User"]] = relationship("User", foreign_keys=[closed_by])

    def is_open(self) -> bool:
        return self.closed_at is None

    def close(self, user: "User", note: Optional[str], now: datetime) -> None:
        """Resolve the issue; callers guard against closing twice."""
        self.closed_at = now
        self.closed_by = user.id
        self.admin_note = note
