"""Talk and submission models."""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from symposium.common.db import Base


class SubmissionResponse(str, enum.Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Talk(Base):
    __tablename__ = "talks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    author: Mapped["User"] = relationship("User", back_populates="talks")
    submissions: Mapped[List["Submission"]] = relationship(
        "Submission", back_populates="talk", cascade="all, delete-orphan"
    )


class Submission(Base):
    """A talk proposed to a conference, and the conference's answer if any."""

    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    talk_id: Mapped[int] = mapped_column(ForeignKey("talks.id", ondelete="CASCADE"), nullable=False, index=True)
    conference_id: Mapped[int] = mapped_column(
        ForeignKey("conferences.id", ondelete="CASCADE"), nullable=False, index=True
    )
    response: Mapped[Optional[SubmissionResponse]] = mapped_column(Enum(SubmissionResponse), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("talk_id", "conference_id", name="uq_submission_talk_conference"),)

    talk: Mapped["Talk"] = relationship("Talk", back_populates="submissions")
    conference: Mapped["Conference"] = relationship("Conference", back_populates="submissions")

    def is_accepted(self) -> bool:
        return self.response == SubmissionResponse.ACCEPTED

    def is_rejected(self) -> bool:
        return self.response == SubmissionResponse.REJECTED
