from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    app_name: str = "Symposium"
    debug: bool = False
    database_url: str = "sqlite:///./symposium.db"
    secret_key: str = "change-this-secret"
    access_token_expire_minutes: int = 60 * 24 * 14
    algorithm: str = "HS256"
    access_token_cookie: str = "symposium_token"
    cors_origins: List[str] = ["*"]

    home_url: str = "/"
    dashboard_url: str = "/dashboard"

    # Closed for new accounts; only known emails may link a social identity
    allow_signups: bool = False

    # Social login providers
    github_client_id: Optional[str] = None
    github_client_secret: Optional[str] = None
    github_redirect_uri: str = "http://localhost:8000/login/github/callback"
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_redirect_uri: str = "http://localhost:8000/login/google/callback"

    # Pagination defaults
    default_page_size: int = 50

    # Recipients for reported conference issues
    admin_notification_emails: List[str] = []


@lru_cache
def get_settings() -> Settings:
    return Settings()
