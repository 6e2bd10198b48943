"""Talk service layer."""

from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from symposium.auth.models import User
from symposium.talks.models import Submission, SubmissionResponse, Talk
from symposium.talks.schemas import TalkCreate


class TalkService:
    """Service for a speaker's talks and where they were submitted."""

    def __init__(self, session: Session):
        self.session = session

    def list_talks(self, author: User) -> List[Talk]:
        stmt = select(Talk).where(Talk.author_id == author.id).order_by(Talk.id)
        return list(self.session.execute(stmt).scalars().all())

    def create_talk(self, author: User, data: TalkCreate) -> Talk:
        talk = Talk(author_id=author.id, title=data.title, description=data.description)
        self.session.add(talk)
        self.session.commit()
        self.session.refresh(talk)
        return talk

    def get_own_talk(self, author: User, talk_id: int) -> Talk:
        talk = self.session.get(Talk, talk_id)
        if not talk or talk.author_id != author.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Talk not found"
            )
        return talk

    def get_own_submission(self, author: User, submission_id: int) -> Submission:
        submission = self.session.get(Submission, submission_id)
        if not submission or submission.talk.author_id != author.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Submission not found"
            )
        return submission

    def submit(self, talk: Talk, conference_id: int) -> Submission:
        """Submit a talk to a conference; submitting twice returns the existing record."""
        existing = self.session.execute(
            select(Submission).where(
                Submission.talk_id == talk.id,
                Submission.conference_id == conference_id,
            )
        ).scalar_one_or_none()
        if existing:
            return existing

        submission = Submission(talk_id=talk.id, conference_id=conference_id)
        self.session.add(submission)
        self.session.commit()
        self.session.refresh(submission)
        return submission

    def record_response(self, submission: Submission, response: Optional[SubmissionResponse]) -> Submission:
        submission.response = response
        self.session.commit()
        self.session.refresh(submission)
        return submission

    def withdraw(self, submission: Submission) -> None:
        self.session.delete(submission)
        self.session.commit()
