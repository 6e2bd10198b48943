"""Social login router."""

import logging
from typing import Dict, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from symposium.auth import schemas as auth_schema
from symposium.auth.models import User
from symposium.auth.service import SocialLoginService
from symposium.auth.social import SocialProvider, get_social_providers
from symposium.common.config import get_settings
from symposium.common.db import get_db
from symposium.common.schemas import Message
from symposium.common.security import get_current_user, get_optional_user

logger = logging.getLogger(__name__)

router = APIRouter()

NO_SIGNUPS_MESSAGE = "No new signups. This project is closed to new accounts."


@router.get("/login/{service}")
def login(
    service: str,
    viewer: Optional[User] = Depends(get_optional_user),
    providers: Dict[str, SocialProvider] = Depends(get_social_providers),
):
    """Send the browser to the provider's consent screen."""
    settings = get_settings()
    if viewer is not None:
        return RedirectResponse(settings.dashboard_url, status_code=status.HTTP_302_FOUND)

    provider = providers.get(service)
    if provider is None:
        logger.warning(f"Login attempted with unknown service: {service}")
        return RedirectResponse(settings.home_url, status_code=status.HTTP_302_FOUND)

    return RedirectResponse(provider.redirect_url(), status_code=status.HTTP_302_FOUND)


@router.get("/login/{service}/callback")
def login_callback(
    service: str,
    code: str = Query(""),
    db: Session = Depends(get_db),
    providers: Dict[str, SocialProvider] = Depends(get_social_providers),
):
    """
    Finish a social login.

    Known users are redirected to the dashboard with an access token cookie.
    Unknown users get the "no new signups" message and nothing is created.
    """
    settings = get_settings()
    provider = providers.get(service)
    if provider is None:
        return RedirectResponse(settings.home_url, status_code=status.HTTP_302_FOUND)

    try:
        identity = provider.fetch_identity(code)
    except httpx.HTTPError as exc:
        logger.error(f"{service} identity exchange failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Login provider unavailable"
        ) from exc

    auth_service = SocialLoginService(db)
    user = auth_service.resolve_user(service, identity)
    if user is None:
        return JSONResponse(Message(message=NO_SIGNUPS_MESSAGE).model_dump(), status_code=status.HTTP_200_OK)

    token = auth_service.issue_token(user)
    response = RedirectResponse(settings.dashboard_url, status_code=status.HTTP_302_FOUND)
    response.headers["X-Access-Token"] = token
    response.set_cookie(
        settings.access_token_cookie,
        token,
        httponly=True,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return response


@router.post("/logout", response_model=Message)
def logout():
    response = JSONResponse(Message(message="Logged out").model_dump())
    response.delete_cookie(get_settings().access_token_cookie)
    return response


@router.get("/me", response_model=auth_schema.UserRead)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return auth_schema.UserRead.model_validate(current_user)


@router.get("/me/social", response_model=list[auth_schema.UserSocialRead])
def my_social_accounts(current_user: User = Depends(get_current_user)):
    return [auth_schema.UserSocialRead.model_validate(social) for social in current_user.social]
