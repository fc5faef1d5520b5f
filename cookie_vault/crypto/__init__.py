"""Cryptographic helpers."""

from .ciphers import (
    Base64Cipher,
    CFBCipher,
    Cipher,
    GCMCipher,
    IdentityCipher,
    build_cipher,
    new_base64_cipher,
    new_cfb_cipher,
    new_gcm_cipher,
)
from .errors import CipherError, DecryptionError, EncryptionError, InvalidKeyError
from .keys import secret_bytes
from .signing import ValidationResult, check_hmac, signed_value, validate

__all__ = [
    "Base64Cipher",
    "CFBCipher",
    "Cipher",
    "CipherError",
    "DecryptionError",
    "EncryptionError",
    "GCMCipher",
    "IdentityCipher",
    "InvalidKeyError",
    "ValidationResult",
    "build_cipher",
    "check_hmac",
    "new_base64_cipher",
    "new_cfb_cipher",
    "new_gcm_cipher",
    "secret_bytes",
    "signed_value",
    "validate",
]
