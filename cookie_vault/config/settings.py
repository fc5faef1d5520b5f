"""Application settings using Pydantic settings management."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cookie_vault.crypto.keys import AES_KEY_SIZES, secret_bytes


class CookieSettings(BaseSettings):
    """Environment configuration for signed cookie values."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="COOKIE_VAULT_")

    cookie_name: str = Field(default="_session", min_length=1)
    cookie_secret: str = Field(
        ...,
        description="Encryption secret; URL-safe base64 of a 16/24/32 byte key, or the raw key itself.",
    )
    cookie_seed: Optional[str] = Field(
        default=None,
        description="HMAC signing key. Defaults to the cookie secret when unset.",
    )
    cookie_expire: timedelta = Field(default=timedelta(hours=168))
    cipher: Literal["gcm", "cfb", "none"] = Field(
        default="gcm",
        description="Value cipher. 'none' gives signed but unencrypted cookies.",
    )
    base64_wrap: bool = Field(
        default=True,
        description="Base64 encode ciphertext before it is signed.",
    )

    def decode_cookie_secret(self) -> bytes:
        return secret_bytes(self.cookie_secret)

    def signing_seed(self) -> str:
        return self.cookie_seed or self.cookie_secret

    @model_validator(mode="after")
    def validate_cookie_material(self) -> "CookieSettings":
        if self.cipher != "none":
            secret_len = len(self.decode_cookie_secret())
            if secret_len not in AES_KEY_SIZES:
                raise ValueError(
                    f"COOKIE_VAULT_COOKIE_SECRET must be 16, 24, or 32 bytes to create an AES cipher, but is {secret_len} bytes."
                )

        if self.cookie_expire <= timedelta(0):
            raise ValueError("COOKIE_VAULT_COOKIE_EXPIRE must be positive.")

        return self


@lru_cache
def get_settings() -> CookieSettings:
    return CookieSettings()
