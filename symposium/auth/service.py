"""Social login: resolve a provider identity to a local user."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from symposium.auth.models import User, UserSocial
from symposium.auth.schemas import SocialIdentity
from symposium.common.config import get_settings
from symposium.common.security import create_access_token

logger = logging.getLogger(__name__)


class SocialLoginService:
    """Service for social sign-in and account linking."""

    def __init__(self, session: Session):
        self.session = session

    def find_linked_user(self, service: str, social_id: str) -> Optional[User]:
        stmt = select(UserSocial).where(
            UserSocial.service == service,
            UserSocial.social_id == social_id,
        )
        social = self.session.execute(stmt).scalar_one_or_none()
        return social.user if social else None

    def resolve_user(self, service: str, identity: SocialIdentity) -> Optional[User]:
        """
        Find the local user behind a provider identity.

        1. A known (service, social_id) pair short-circuits everything.
        2. Otherwise a user with the same email gets the identity linked.
        3. Otherwise a new account is created, but only while signups are open.

        Returns ``None`` when nobody matches and signups are closed.
        """
        user = self.find_linked_user(service, identity.id)
        if user:
            logger.info(f"User {user.id} logged in with linked {service} identity")
            return user

        if identity.email:
            user = self.session.execute(
                select(User).where(User.email == identity.email)
            ).scalar_one_or_none()

        if not user:
            if not get_settings().allow_signups or not identity.email:
                logger.info(f"Refused {service} login for unknown user (signups closed)")
                return None
            user = User(name=identity.name or identity.email, email=identity.email)
            self.session.add(user)
            self.session.flush()
            logger.info(f"Created user {user.id} from {service} login")

        self.session.add(UserSocial(user_id=user.id, service=service, social_id=identity.id))
        self.session.commit()
        self.session.refresh(user)
        logger.info(f"Linked {service} identity to user {user.id}")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(str(user.id), extra={"role": user.role.value})
