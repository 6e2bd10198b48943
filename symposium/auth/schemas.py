from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from symposium.auth.models import UserRole


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    exp: Optional[int] = None
    role: Optional[str] = None


class SocialIdentity(BaseModel):
    """What a login provider tells us about the person signing in."""

    id: str
    email: Optional[EmailStr] = None
    name: Optional[str] = None


class UserRead(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole
    is_featured: bool = False

    model_config = ConfigDict(from_attributes=True)


class SpeakerRead(BaseModel):
    id: int
    name: str
    profile_intro: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserSocialRead(BaseModel):
    service: str
    social_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
