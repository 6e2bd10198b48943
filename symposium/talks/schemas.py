"""Pydantic schemas for talks and submissions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from symposium.talks.models import SubmissionResponse


class TalkCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)


class TalkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    title: str
    description: Optional[str] = None
    created_at: datetime


class SubmissionCreate(BaseModel):
    conference_id: int = Field(..., gt=0)


class SubmissionResponseUpdate(BaseModel):
    """The conference's answer; ``None`` puts the submission back to pending."""

    response: Optional[SubmissionResponse] = None


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    talk_id: int
    conference_id: int
    response: Optional[SubmissionResponse] = None
    created_at: datetime
