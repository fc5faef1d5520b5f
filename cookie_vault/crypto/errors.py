"""Exceptions raised by the cipher layer."""

from __future__ import annotations


class CipherError(Exception):
    """Base class for cipher failures."""


class InvalidKeyError(CipherError, ValueError):
    """Raised when key material has an unusable length."""


class EncryptionError(CipherError):
    """Raised when a value cannot be encrypted."""


class DecryptionError(CipherError):
    """Raised when a ciphertext is malformed, truncated or fails authentication."""
