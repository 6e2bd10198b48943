"""Talk router - a speaker's talks and their submissions."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from symposium.auth.models import User
from symposium.common.db import get_db
from symposium.common.schemas import Message
from symposium.common.security import get_current_user
from symposium.conferences.service import ConferenceService
from symposium.talks.schemas import (
    SubmissionCreate,
    SubmissionRead,
    SubmissionResponseUpdate,
    TalkCreate,
    TalkRead,
)
from symposium.talks.service import TalkService

router = APIRouter()


@router.get("/talks", response_model=List[TalkRead])
def list_talks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TalkService(db).list_talks(current_user)


@router.post("/talks", response_model=TalkRead, status_code=status.HTTP_201_CREATED)
def create_talk(
    payload: TalkCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TalkService(db).create_talk(current_user, payload)


@router.post("/talks/{talk_id}/submissions", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
def submit_talk(
    talk_id: int,
    payload: SubmissionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Submit one of your talks to a conference you can see."""
    service = TalkService(db)
    talk = service.get_own_talk(current_user, talk_id)
    conference = ConferenceService(db).get_visible_conference(payload.conference_id, current_user)
    return service.submit(talk, conference.id)


@router.put("/submissions/{submission_id}/response", response_model=SubmissionRead)
def record_submission_response(
    submission_id: int,
    payload: SubmissionResponseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record whether the conference accepted or rejected the talk."""
    service = TalkService(db)
    submission = service.get_own_submission(current_user, submission_id)
    return service.record_response(submission, payload.response)


@router.delete("/submissions/{submission_id}", response_model=Message)
def withdraw_submission(
    submission_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = TalkService(db)
    service.withdraw(service.get_own_submission(current_user, submission_id))
    return Message(message="Submission withdrawn")
