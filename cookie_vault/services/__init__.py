"""Service layer exported symbols."""

from .cookies import SignedCookieCodec

__all__ = ["SignedCookieCodec"]
