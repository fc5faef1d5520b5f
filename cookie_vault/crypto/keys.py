"""Key material helpers."""

from __future__ import annotations

import base64
import binascii
import re

AES_KEY_SIZES = frozenset({16, 24, 32})

_RAW_URLSAFE_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def _raw_urlsafe_b64decode(value: str) -> bytes:
    if not _RAW_URLSAFE_ALPHABET.fullmatch(value) or len(value) % 4 == 1:
        raise binascii.Error("not unpadded url-safe base64")
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def secret_bytes(secret: str | bytes) -> bytes:
    """Return the key bytes for a configured secret.

    A secret that is URL-safe base64 (trailing ``=`` ignored) and decodes to a
    valid AES key length is used in decoded form. Anything else, including a
    base64 string of the wrong decoded length, is used as raw bytes.
    """
    if isinstance(secret, bytes):
        raw = bytes(secret)
        try:
            text = raw.decode("ascii")
        except UnicodeDecodeError:
            return raw
    else:
        text = secret
        raw = secret.encode("utf-8")

    try:
        decoded = _raw_urlsafe_b64decode(text.rstrip("="))
    except (binascii.Error, ValueError):
        return raw

    # Decoded lengths outside the AES sizes mean the raw string was the key.
    if len(decoded) in AES_KEY_SIZES:
        return decoded
    return raw


def seed_bytes(seed: str | bytes) -> bytes:
    if isinstance(seed, bytes):
        return bytes(seed)
    return seed.encode("utf-8")
