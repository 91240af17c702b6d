"""Configuration settings for the Venty Auth service.

Loads settings from environment variables (and an optional .env file).
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Auth service configuration."""

    # Session signing
    jwt_secret: str = ""
    session_ttl_days: int = 7
    session_cookie_name: str = "venty_session"

    # User store
    users_file: str = "server/data/users.json"

    # Server configuration
    auth_service_port: int = 9001
    base_url: str = ""  # e.g., https://venty.app
    auth_cors_origins: str = ""  # Comma-separated list

    # OAuth configuration (optional)
    google_client_id: str = ""
    google_client_secret: str = ""
    apple_client_id: str = ""
    facebook_app_id: str = ""
    facebook_app_secret: str = ""

    # Hosting platform markers (set by Vercel behind its TLS proxy)
    vercel: str = ""
    vercel_env: str = ""

    # Upstream identity providers
    http_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    debug_requests: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def users_path(self) -> Path:
        """Path of the JSON user store."""
        return Path(self.users_file)

    @property
    def session_max_age(self) -> int:
        """Session lifetime in seconds (token expiry and cookie Max-Age)."""
        return self.session_ttl_days * 24 * 60 * 60

    @property
    def google_enabled(self) -> bool:
        """Check if the Google authorization-code flow is fully configured."""
        return bool(self.google_client_id and self.google_client_secret and self.base_url)

    @property
    def google_redirect_uri(self) -> str:
        """Callback URL registered with Google for the code flow."""
        return f"{self.base_url.rstrip('/')}/auth/google"

    @property
    def facebook_enabled(self) -> bool:
        """Check if Facebook login is configured."""
        return bool(self.facebook_app_id and self.facebook_app_secret)

    @property
    def on_hosting_platform(self) -> bool:
        """True when running on a platform that terminates TLS in front of us."""
        return bool(self.vercel or self.vercel_env)

    @property
    def cors_origins(self) -> list[str]:
        origins = [self.base_url] if self.base_url else []
        origins.extend(
            origin.strip()
            for origin in self.auth_cors_origins.split(",")
            if origin.strip()
        )
        return origins


Settings = AuthSettings


@lru_cache
def get_settings() -> AuthSettings:
    """Get cached settings instance."""
    return AuthSettings()
