"""Test environment configuration."""
import base64
from datetime import timedelta

import pytest
from pydantic import ValidationError

from cookie_vault.config import CookieSettings, get_settings

SECRET = base64.urlsafe_b64encode(bytes(range(32))).decode()


def test_settings_from_environment(clean_env):
    clean_env.setenv("COOKIE_VAULT_COOKIE_SECRET", SECRET)
    clean_env.setenv("COOKIE_VAULT_CIPHER", "cfb")
    clean_env.setenv("COOKIE_VAULT_COOKIE_EXPIRE", "PT1H")
    clean_env.setenv("COOKIE_VAULT_BASE64_WRAP", "false")

    settings = CookieSettings()

    assert settings.cookie_name == "_session"
    assert settings.cipher == "cfb"
    assert settings.base64_wrap is False
    assert settings.cookie_expire == timedelta(hours=1)
    assert settings.decode_cookie_secret() == bytes(range(32))
    assert settings.signing_seed() == SECRET


def test_settings_from_env_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text(f"COOKIE_VAULT_COOKIE_SECRET={SECRET}\nCOOKIE_VAULT_COOKIE_SEED=seed\n")

    settings = CookieSettings()

    assert settings.signing_seed() == "seed"


def test_missing_secret_is_rejected(clean_env):
    with pytest.raises(ValidationError):
        CookieSettings()


def test_secret_must_be_an_aes_key(clean_env):
    with pytest.raises(ValidationError):
        CookieSettings(cookie_secret="too-short")

    # 16 raw characters are a valid AES-128 key
    assert len(CookieSettings(cookie_secret="0123456789abcdef").decode_cookie_secret()) == 16


def test_unencrypted_cookies_accept_any_secret(clean_env):
    assert CookieSettings(cookie_secret="x", cipher="none").decode_cookie_secret() == b"x"


def test_unknown_cipher_is_rejected(clean_env):
    with pytest.raises(ValidationError):
        CookieSettings(cookie_secret=SECRET, cipher="rot13")


def test_expiry_must_be_positive(clean_env):
    with pytest.raises(ValidationError):
        CookieSettings(cookie_secret=SECRET, cookie_expire=timedelta(0))


def test_get_settings_is_cached(clean_env):
    clean_env.setenv("COOKIE_VAULT_COOKIE_SECRET", SECRET)

    assert get_settings() is get_settings()
