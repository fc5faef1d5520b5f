"""Encrypt-then-sign cookie values."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from cookie_vault.config.settings import CookieSettings
from cookie_vault.crypto import Cipher, DecryptionError, IdentityCipher, ValidationResult, build_cipher
from cookie_vault.crypto.signing import signed_value, validate

logger = logging.getLogger("cookie_vault.audit")


@dataclass(frozen=True)
class SignedCookieCodec:
    """Turn plaintext into a cookie value and back.

    Writing encrypts with ``cipher`` and signs the ciphertext; reading checks the
    signature and age before decrypting. With the default identity cipher the
    cookie is signed but readable by the client.
    """

    name: str
    seed: str | bytes = field(repr=False)
    expiration: timedelta
    cipher: Cipher = field(default_factory=IdentityCipher)

    @classmethod
    def from_settings(cls, settings: CookieSettings) -> "SignedCookieCodec":
        cipher = build_cipher(
            settings.decode_cookie_secret(),
            settings.cipher,
            base64_wrap=settings.base64_wrap,
        )
        return cls(
            name=settings.cookie_name,
            seed=settings.signing_seed(),
            expiration=settings.cookie_expire,
            cipher=cipher,
        )

    def encode(self, value: bytes, now: datetime | None = None) -> str:
        ciphertext = self.cipher.encrypt(value)
        return signed_value(self.seed, self.name, ciphertext, now)

    def decode(self, cookie_value: str, now: datetime | None = None) -> ValidationResult:
        """Return the plaintext of a cookie value.

        Forged, malformed and expired values give ``ok=False``. A correctly signed
        value that does not decrypt raises :class:`DecryptionError`.
        """
        result = validate(cookie_value, self.seed, self.name, self.expiration, now)
        if not result.ok:
            logger.info("cookie_rejected", extra={"cookie_name": self.name})
            return result

        try:
            plaintext = self.cipher.decrypt(result.value)
        except DecryptionError:
            logger.warning("cookie_decrypt_failed", extra={"cookie_name": self.name})
            raise
        return ValidationResult(plaintext, result.created_at, True)
