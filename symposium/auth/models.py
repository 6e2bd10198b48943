import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from symposium.common.db import Base


class UserRole(str, enum.Enum):
    REGULAR = "regular"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.REGULAR, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    profile_intro: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    conferences: Mapped[List["Conference"]] = relationship("Conference", back_populates="author")
    talks: Mapped[List["Talk"]] = relationship("Talk", back_populates="author", cascade="all, delete-orphan")
    social: Mapped[List["UserSocial"]] = relationship(
        "UserSocial", back_populates="user", cascade="all, delete-orphan"
    )
    favorite_conferences: Mapped[List["Conference"]] = relationship(
        "Conference", secondary="conference_favorites", back_populates="favorited_by"
    )
    dismissed_conferences: Mapped[List["Conference"]] = relationship(
        "Conference", secondary="conference_dismissals", back_populates="dismissed_by"
    )

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserSocial(Base):
    """A user's identity at an external login provider."""

    __tablename__ = "user_social"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    service: Mapped[str] = mapped_column(String(50), nullable=False)
    social_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("service", "social_id", name="uq_user_social_service_id"),)

    user: Mapped["User"] = relationship("User", back_populates="social")
