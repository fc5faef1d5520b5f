"""Signed cookie envelopes.

A signed value has three ``|`` separated fields::

    <urlsafe-b64 value>|<unix seconds>|<urlsafe-b64 hmac>

The MAC is keyed with the seed and covers the cookie name, the encoded value and
the timestamp, so a value cannot be replayed under another cookie name.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, NamedTuple

from .keys import seed_bytes

logger = logging.getLogger(__name__)

Digest = Callable[..., Any]

# The first algorithm signs new cookies; verification tries each in order.
# TODO: drop sha1 once cookies signed before the sha256 migration have expired.
SIGNATURE_ALGORITHMS: tuple[Digest, ...] = (hashlib.sha256, hashlib.sha1)

# Tolerated clock skew between the server that issued a cookie and the one reading it.
CLOCK_SKEW = timedelta(minutes=5)

FIELD_SEPARATOR = "|"

_URLSAFE_B64 = re.compile(r"[A-Za-z0-9_-]*={0,2}")
_TIMESTAMP = re.compile(r"[+-]?[0-9]+")


class ValidationResult(NamedTuple):
    value: bytes
    created_at: datetime | None
    ok: bool


_REJECTED = ValidationResult(b"", None, False)


def _urlsafe_b64decode(value: str) -> bytes:
    if not _URLSAFE_B64.fullmatch(value):
        raise binascii.Error("invalid url-safe base64")
    return base64.b64decode(value, altchars=b"-_", validate=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return _utcnow()
    if now.tzinfo is None:
        raise ValueError("now must be a timezone-aware datetime")
    return now


def cookie_signature(digestmod: Digest, seed: str | bytes, *parts: str) -> str:
    """Return the url-safe base64 HMAC of ``parts`` keyed with ``seed``."""
    mac = hmac.new(seed_bytes(seed), digestmod=digestmod)
    for part in parts:
        mac.update(part.encode("utf-8"))
    return base64.urlsafe_b64encode(mac.digest()).decode("ascii")


def check_hmac(candidate: str, expected: str) -> bool:
    """Compare two encoded MACs in constant time; undecodable input never matches."""
    try:
        candidate_mac = _urlsafe_b64decode(candidate)
        expected_mac = _urlsafe_b64decode(expected)
    except (binascii.Error, ValueError):
        return False
    return hmac.compare_digest(candidate_mac, expected_mac)


def check_signature(signature: str, seed: str | bytes, *parts: str) -> bool:
    for digestmod in SIGNATURE_ALGORITHMS:
        if check_hmac(signature, cookie_signature(digestmod, seed, *parts)):
            return True
    return False


def signed_value(seed: str | bytes, name: str, value: bytes, now: datetime | None = None) -> str:
    """Encode ``value`` as a signed envelope for the cookie ``name``."""
    moment = _resolve_now(now)
    encoded_value = base64.urlsafe_b64encode(value).decode("ascii")
    timestamp = str(int(moment.timestamp()))
    signature = cookie_signature(SIGNATURE_ALGORITHMS[0], seed, name, encoded_value, timestamp)
    return FIELD_SEPARATOR.join((encoded_value, timestamp, signature))


def validate(
    cookie_value: str,
    seed: str | bytes,
    name: str,
    expiration: timedelta,
    now: datetime | None = None,
) -> ValidationResult:
    """Check the signature and age of a signed envelope.

    Returns ``(value, created_at, True)`` for a genuine cookie created within
    ``expiration`` of ``now`` (and no more than :data:`CLOCK_SKEW` in the
    future). Anything else, forged or malformed, gives ``(b"", None, False)``.
    """
    moment = _resolve_now(now)
    parts = cookie_value.split(FIELD_SEPARATOR)
    if len(parts) != 3:
        logger.debug("cookie %s rejected: expected 3 fields, got %d", name, len(parts))
        return _REJECTED
    # Every well-formed field is ASCII; anything else is rejected before hashing.
    if not all(part.isascii() for part in parts):
        logger.debug("cookie %s rejected: non-ascii field", name)
        return _REJECTED
    encoded_value, timestamp, signature = parts

    if not check_signature(signature, seed, name, encoded_value, timestamp):
        logger.debug("cookie %s rejected: signature mismatch", name)
        return _REJECTED

    if not _TIMESTAMP.fullmatch(timestamp):
        logger.debug("cookie %s rejected: invalid timestamp", name)
        return _REJECTED
    try:
        created_at = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.debug("cookie %s rejected: timestamp out of range", name)
        return _REJECTED

    # Browsers don't send the cookie's expiry back, so the creation time has to
    # fall within [now - expiration, now + CLOCK_SKEW].
    if not moment - expiration <= created_at <= moment + CLOCK_SKEW:
        logger.debug("cookie %s rejected: created at %s outside validity window", name, created_at.isoformat())
        return _REJECTED

    try:
        value = _urlsafe_b64decode(encoded_value)
    except (binascii.Error, ValueError):
        logger.debug("cookie %s rejected: value is not url-safe base64", name)
        return _REJECTED
    return ValidationResult(value, created_at, True)


__all__ = [
    "CLOCK_SKEW",
    "SIGNATURE_ALGORITHMS",
    "ValidationResult",
    "check_hmac",
    "check_signature",
    "cookie_signature",
    "signed_value",
    "validate",
]
