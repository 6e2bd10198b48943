"""Pydantic schemas for conference module."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from symposium.conferences.listing import ConferenceFilter, ConferenceSort
from symposium.conferences.models import IssueReason
from symposium.conferences.speaker_package import SpeakerPackage


def _check_end_after_start(value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
    starts_at = info.data.get("starts_at")
    if value is not None and starts_at is not None and value.date() < starts_at.date():
        raise ValueError("The end date must be on or after the start date")
    return value


# Conference Schemas
class ConferenceBase(BaseModel):
    """Base schema for conferences."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=10000)
    url: Optional[str] = Field(None, max_length=500)
    cfp_url: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    has_cfp: bool = False
    cfp_starts_at: Optional[datetime] = None
    cfp_ends_at: Optional[datetime] = None


class ConferenceCreate(ConferenceBase):
    """Create schema for conferences."""

    speaker_package: Optional[SpeakerPackage] = None

    @field_validator("ends_at")
    @classmethod
    def ends_on_or_after_start(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return _check_end_after_start(value, info)


class ConferenceUpdate(BaseModel):
    """Update schema for conferences; only fields that are sent are changed."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    url: Optional[str] = Field(None, max_length=500)
    cfp_url: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    has_cfp: Optional[bool] = None
    cfp_starts_at: Optional[datetime] = None
    cfp_ends_at: Optional[datetime] = None
    speaker_package: Optional[SpeakerPackage] = None

    @field_validator("title", "description", "has_cfp")
    @classmethod
    def not_null(cls, value):
        # May be omitted, but the column cannot be cleared
        if value is None:
            raise ValueError("This field cannot be null")
        return value

    @field_validator("ends_at")
    @classmethod
    def ends_on_or_after_start(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return _check_end_after_start(value, info)


class ConferenceListItem(BaseModel):
    """A conference as shown in the list."""

    id: int
    title: str
    location: Optional[str] = None
    url: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    has_cfp: bool
    cfp_starts_at: Optional[datetime] = None
    cfp_ends_at: Optional[datetime] = None
    event_dates_display: Optional[str] = None
    is_flagged: bool = False
    is_rejected: bool = False
    is_accepting_proposals: bool = False
    is_favorited: bool = False
    is_dismissed: bool = False


class ConferenceTalk(BaseModel):
    """One of the viewer's talks, as it relates to a conference."""

    id: int
    title: str
    submitted: bool
    accepted: bool
    rejected: bool


class ConferenceDetail(ConferenceListItem):
    description: str
    cfp_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    author_id: Optional[int] = None
    is_approved: bool = False
    is_owner: bool = False
    speaker_package: Optional[SpeakerPackage] = None
    talks: List[ConferenceTalk] = []


class MonthRead(BaseModel):
    year: int
    month: int


class ConferenceListResponse(BaseModel):
    filter: ConferenceFilter
    sort: ConferenceSort
    month: Optional[MonthRead] = None
    previous_month: Optional[MonthRead] = None
    next_month: Optional[MonthRead] = None
    conferences: List[ConferenceListItem]


class ToggleResponse(BaseModel):
    conference_id: int
    changed: bool
    is_favorited: bool
    is_dismissed: bool


# Issue Schemas
class IssueCreate(BaseModel):
    reason: IssueReason
    note: str = Field("", max_length=5000)


class IssueClose(BaseModel):
    admin_note: Optional[str] = Field(None, max_length=5000)


class IssueRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    conference_id: int
    user_id: Optional[int] = None
    reason: IssueReason
    note: str
    closed_at: Optional[datetime] = None
    closed_by: Optional[int] = None
    admin_note: Optional[str] = None
    created_at: datetime
