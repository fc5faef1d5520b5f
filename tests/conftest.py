"""Shared fixtures."""
import os
from datetime import datetime, timedelta, timezone

import pytest

from cookie_vault.config import get_settings


@pytest.fixture
def now():
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def expiration():
    return timedelta(hours=1)


@pytest.fixture
def aes_key():
    return bytes(range(32))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    for key in list(os.environ):
        if key.startswith("COOKIE_VAULT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
