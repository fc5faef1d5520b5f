"""Test secret derivation."""
import base64

from cookie_vault.crypto import secret_bytes


def _unpadded(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def test_base64_secret_of_aes_length_is_decoded():
    """A 22 character url-safe base64 string of 16 bytes gives those bytes."""
    key = bytes(range(200, 216))
    encoded = _unpadded(key)
    assert len(encoded) == 22

    assert secret_bytes(encoded) == key


def test_padded_base64_secret_is_decoded():
    key = bytes(range(24))
    assert secret_bytes(base64.urlsafe_b64encode(key).decode()) == key


def test_all_aes_lengths_are_decoded():
    for size in (16, 24, 32):
        key = bytes([size]) * size
        assert secret_bytes(_unpadded(key)) == key


def test_base64_secret_of_other_length_uses_raw_string():
    """Base64 that decodes to 17 bytes is treated as the raw key."""
    encoded = _unpadded(bytes(17))
    assert secret_bytes(encoded) == encoded.encode()


def test_non_base64_secret_uses_raw_string():
    assert secret_bytes("not base64 at all!") == b"not base64 at all!"
    assert secret_bytes("abc+def/ghijklmnopqrstuv") == b"abc+def/ghijklmnopqrstuv"


def test_sixteen_character_secret_stays_raw():
    """A plain 16 character secret decodes to 12 bytes, so it is used as is."""
    assert secret_bytes("0123456789abcdef") == b"0123456789abcdef"


def test_empty_and_non_ascii_secrets_never_fail():
    assert secret_bytes("") == b""
    assert secret_bytes("clé-secrète") == "clé-secrète".encode()
    assert secret_bytes(b"\xff\xfe") == b"\xff\xfe"


def test_bytes_secret_follows_same_rule():
    key = bytes(range(32))
    assert secret_bytes(_unpadded(key).encode()) == key
    assert secret_bytes(b"raw-secret") == b"raw-secret"
