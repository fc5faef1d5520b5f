"""Interchangeable value ciphers for cookie payloads.

Every cipher implements :class:`Cipher`: ``encrypt``/``decrypt`` over bytes plus
``encrypt_in_place``/``decrypt_in_place`` over an optional text value. Instances
hold only immutable key material and are safe to share between threads.
"""

from __future__ import annotations

import base64
import binascii
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Literal

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher as _AESCipher
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

try:
    from cryptography.hazmat.decrepit.ciphers.modes import CFB
except ImportError:  # cryptography releases before CFB moved to decrepit
    from cryptography.hazmat.primitives.ciphers.modes import CFB

from .errors import DecryptionError, EncryptionError, InvalidKeyError
from .keys import AES_KEY_SIZES

AES_BLOCK_SIZE = 16
GCM_NONCE_SIZE = 12

CipherMode = Literal["gcm", "cfb", "none"]
Codec = Callable[[bytes], bytes]


def _random_bytes(size: int, purpose: str) -> bytes:
    try:
        return os.urandom(size)
    except (OSError, NotImplementedError) as exc:
        raise EncryptionError(f"failed to create {purpose}: {exc}") from exc


def _check_key(secret: bytes) -> bytes:
    key = bytes(secret)
    if len(key) not in AES_KEY_SIZES:
        raise InvalidKeyError(f"invalid AES key size {len(key)}, must be 16, 24, or 32 bytes")
    return key


def apply_in_place(codec: Codec, value: str | None) -> str | None:
    """Run ``codec`` over a text value, leaving ``None`` and ``""`` untouched."""
    if not value:
        return value
    transformed = codec(value.encode("utf-8", "surrogateescape"))
    return transformed.decode("utf-8", "surrogateescape")


class Cipher(ABC):
    """Encrypt and decrypt opaque cookie values."""

    @abstractmethod
    def encrypt(self, value: bytes) -> bytes: ...

    @abstractmethod
    def decrypt(self, ciphertext: bytes) -> bytes: ...

    def encrypt_in_place(self, value: str | None) -> str | None:
        """Return ``value`` encrypted, or unchanged when absent or empty."""
        return apply_in_place(self.encrypt, value)

    def decrypt_in_place(self, value: str | None) -> str | None:
        """Return ``value`` decrypted, or unchanged when absent or empty."""
        return apply_in_place(self.decrypt, value)


class IdentityCipher(Cipher):
    """Pass values through unchanged."""

    def encrypt(self, value: bytes) -> bytes:
        return bytes(value)

    def decrypt(self, ciphertext: bytes) -> bytes:
        return bytes(ciphertext)

    def __repr__(self) -> str:
        return "IdentityCipher()"


@dataclass(frozen=True, eq=False)
class CFBCipher(Cipher):
    """AES in CFB mode; output is ``iv || ciphertext`` with no authentication."""

    key: bytes = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", _check_key(self.key))

    def encrypt(self, value: bytes) -> bytes:
        iv = _random_bytes(AES_BLOCK_SIZE, "initialization vector")
        encryptor = _AESCipher(algorithms.AES(self.key), CFB(iv)).encryptor()
        return iv + encryptor.update(value) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        if len(ciphertext) < AES_BLOCK_SIZE:
            raise DecryptionError(
                f"encrypted value should be at least {AES_BLOCK_SIZE} bytes, but is only {len(ciphertext)} bytes"
            )
        iv = ciphertext[:AES_BLOCK_SIZE]
        decryptor = _AESCipher(algorithms.AES(self.key), CFB(iv)).decryptor()
        return decryptor.update(ciphertext[AES_BLOCK_SIZE:]) + decryptor.finalize()


@dataclass(frozen=True, eq=False)
class GCMCipher(Cipher):
    """AES-GCM authenticated encryption; output is ``nonce || ciphertext || tag``."""

    key: bytes = field(repr=False)
    _aead: AESGCM = field(init=False, repr=False)

    NONCE_SIZE = GCM_NONCE_SIZE

    def __post_init__(self) -> None:
        key = _check_key(self.key)
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "_aead", AESGCM(key))

    def encrypt(self, value: bytes) -> bytes:
        nonce = _random_bytes(self.NONCE_SIZE, "nonce")
        return nonce + self._aead.encrypt(nonce, bytes(value), None)

    def decrypt(self, ciphertext: bytes) -> bytes:
        if len(ciphertext) < self.NONCE_SIZE:
            raise DecryptionError(
                f"encrypted value should be at least {self.NONCE_SIZE} bytes, but is only {len(ciphertext)} bytes"
            )
        nonce = ciphertext[: self.NONCE_SIZE]
        try:
            return self._aead.decrypt(nonce, bytes(ciphertext[self.NONCE_SIZE :]), None)
        except InvalidTag as exc:
            raise DecryptionError("message authentication failed") from exc


@dataclass(frozen=True, eq=False)
class Base64Cipher(Cipher):
    """Wrap another cipher so its output is standard base64 text."""

    cipher: Cipher

    def encrypt(self, value: bytes) -> bytes:
        return base64.b64encode(self.cipher.encrypt(value))

    def decrypt(self, ciphertext: bytes) -> bytes:
        try:
            encrypted = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecryptionError(f"failed to base64 decode value: {exc}") from exc
        return self.cipher.decrypt(encrypted)


def new_cfb_cipher(secret: bytes) -> Cipher:
    return CFBCipher(secret)


def new_gcm_cipher(secret: bytes) -> Cipher:
    return GCMCipher(secret)


def new_base64_cipher(init_cipher: Callable[[bytes], Cipher], secret: bytes) -> Cipher:
    """Build a cipher with ``init_cipher`` and wrap its output in base64."""
    return Base64Cipher(init_cipher(secret))


_FACTORIES: dict[str, Callable[[bytes], Cipher]] = {
    "gcm": new_gcm_cipher,
    "cfb": new_cfb_cipher,
}


def build_cipher(secret: bytes, mode: CipherMode = "gcm", *, base64_wrap: bool = True) -> Cipher:
    """Select a cipher by configuration name.

    ``"none"`` gives an :class:`IdentityCipher` (integrity-only cookies) and
    ignores ``base64_wrap``; the envelope already base64-encodes its value.
    """
    if mode == "none":
        return IdentityCipher()
    try:
        factory = _FACTORIES[mode]
    except KeyError:
        raise ValueError(f"unknown cipher mode {mode!r}") from None
    if base64_wrap:
        return new_base64_cipher(factory, secret)
    return factory(secret)


__all__ = [
    "AES_BLOCK_SIZE",
    "GCM_NONCE_SIZE",
    "Base64Cipher",
    "CFBCipher",
    "Cipher",
    "CipherMode",
    "GCMCipher",
    "IdentityCipher",
    "apply_in_place",
    "build_cipher",
    "new_base64_cipher",
    "new_cfb_cipher",
    "new_gcm_cipher",
]
