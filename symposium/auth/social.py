"""Login providers for social sign-in.

Each provider knows its authorize URL and how to turn an authorization code
into a ``SocialIdentity``. Anything beyond that (account linking, tokens) lives
in ``symposium.auth.service``.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode

import httpx

from symposium.auth.schemas import SocialIdentity
from symposium.common.config import get_settings

logger = logging.getLogger(__name__)


class TokenExchangeError(httpx.HTTPError):
    """The provider answered, but did not hand out an access token."""


class SocialProvider:
    name: str = ""
    authorize_url: str = ""
    token_url: str = ""
    user_url: str = ""
    scope: str = ""

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self.transport = transport

    def redirect_url(self) -> str:
        query = {
            "client_id": self.client_id or "",
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "response_type": "code",
        }
        return f"{self.authorize_url}?{urlencode(query)}"

    def fetch_identity(self, code: str) -> SocialIdentity:
        """Exchange an authorization code for the signed-in identity."""
        with httpx.Client(
            timeout=self.timeout,
            headers={"Accept": "application/json"},
            transport=self.transport,
        ) as client:
            token_response = client.post(
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            token_response.raise_for_status()
            try:
                payload = token_response.json()
            except ValueError:
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            access_token = payload.get("access_token")
            if not access_token:
                # GitHub reports bad codes with a 200 and an "error" field
                error = payload.get("error", "no access token")
                raise TokenExchangeError(f"{self.name} token exchange failed: {error}")

            client.headers["Authorization"] = f"Bearer {access_token}"
            return self.identity_from_api(client)

    def identity_from_api(self, client: httpx.Client) -> SocialIdentity:
        raise NotImplementedError


class GitHubProvider(SocialProvider):
    name = "github"
    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    user_url = "https://api.github.com/user"
    scope = "user:email"

    def identity_from_api(self, client: httpx.Client) -> SocialIdentity:
        response = client.get(self.user_url)
        response.raise_for_status()
        data = response.json()

        email = data.get("email")
        if not email:
            # Private addresses only show up on the emails endpoint
            emails = client.get(f"{self.user_url}/emails")
            emails.raise_for_status()
            email = next(
                (entry["email"] for entry in emails.json() if entry.get("primary") and entry.get("verified")),
                None,
            )

        return SocialIdentity(id=str(data["id"]), email=email, name=data.get("name") or data.get("login"))


class GoogleProvider(SocialProvider):
    name = "google"
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    user_url = "https://openidconnect.googleapis.com/v1/userinfo"
    scope = "openid email profile"

    def identity_from_api(self, client: httpx.Client) -> SocialIdentity:
        response = client.get(self.user_url)
        response.raise_for_status()
        data = response.json()
        return SocialIdentity(id=str(data["sub"]), email=data.get("email"), name=data.get("name"))


def get_social_providers() -> Dict[str, SocialProvider]:
    """FastAPI dependency: the configured login providers by service name."""
    settings = get_settings()
    return {
        "github": GitHubProvider(
            settings.github_client_id,
            settings.github_client_secret,
            settings.github_redirect_uri,
        ),
        "google": GoogleProvider(
            settings.google_client_id,
            settings.google_client_secret,
            settings.google_redirect_uri,
        ),
    }
