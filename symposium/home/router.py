"""Home page and dashboard."""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from symposium.auth.models import User
from symposium.auth.schemas import SpeakerRead
from symposium.common.clock import get_now
from symposium.common.db import get_db
from symposium.common.security import get_current_user
from symposium.conferences.schemas import ConferenceListItem
from symposium.conferences.service import ConferenceService, to_list_item

router = APIRouter()


class HomeResponse(BaseModel):
    featured_speakers: List[SpeakerRead]
    featured_conferences: List[ConferenceListItem]


class DashboardResponse(BaseModel):
    favorites: List[ConferenceListItem]
    submissions: List[ConferenceListItem]


@router.get("/", response_model=HomeResponse)
def home(
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    speakers = db.execute(
        select(User).where(User.is_featured.is_(True)).order_by(User.name)
    ).scalars().all()
    conferences = ConferenceService(db).featured_conferences()
    return HomeResponse(
        featured_speakers=[SpeakerRead.model_validate(speaker) for speaker in speakers],
        featured_conferences=[to_list_item(conference, None, now) for conference in conferences],
    )


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """The viewer's favorite conferences and the ones their talks went to."""
    service = ConferenceService(db)
    return DashboardResponse(
        favorites=[to_list_item(c, current_user, now) for c in service.favorited_by(current_user)],
        submissions=[to_list_item(c, current_user, now) for c in service.submitted_to_by(current_user)],
    )
