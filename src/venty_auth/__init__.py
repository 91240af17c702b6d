"""Venty Auth - multi-provider sign-in and session service."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("venty-auth")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
