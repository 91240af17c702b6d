"""Data models for the auth service."""

from venty_auth.models.user import ProviderLink, User, generate_user_id

__all__ = ["User", "ProviderLink", "generate_user_id"]
