"""Crypto module for TaskSeal field-level encryption.

This module provides client-side encryption utilities for protecting task content.
"""

from .cipher import (
    ENCRYPTED_PREFIX,
    decode_field,
    encode_field,
    is_encrypted,
    try_decode_field,
)
from .exceptions import (
    DecodeFailure,
    EncodeFailure,
    KeyDerivationError,
    MissingKeyIdentifier,
    TaskSealCryptoError,
)
from .keys import DerivedKey, clear_key_cache, derive_key, derive_key_cached

__all__ = [
    "ENCRYPTED_PREFIX",
    "DerivedKey",
    "derive_key",
    "derive_key_cached",
    "clear_key_cache",
    "encode_field",
    "decode_field",
    "try_decode_field",
    "is_encrypted",
    "TaskSealCryptoError",
    "MissingKeyIdentifier",
    "KeyDerivationError",
    "EncodeFailure",
    "DecodeFailure",
]
