"""Configuration for cookie encoding."""

from .settings import CookieSettings, get_settings

__all__ = ["CookieSettings", "get_settings"]
