"""Deterministic key derivation from user and family group identifiers."""

import hashlib
from dataclasses import dataclass, field
from functools import lru_cache

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import KeyDerivationError, MissingKeyIdentifier

# AES-256 requires 256-bit (32-byte) keys
KEY_SIZE = 32  # 256 bits

# PBKDF2 parameters
PBKDF2_ITERATIONS = 100_000

# Application-wide salt. Changing it makes every stored ciphertext unreadable.
ENCRYPTION_SALT = b"myezlist-task-encryption-v1"

KEY_CACHE_SIZE = 32


@dataclass(frozen=True)
class DerivedKey:
    """Opaque AES-256-GCM key handle.

    The raw key bytes are consumed by the cipher object and never kept on the
    handle, so there is nothing to export.
    """

    cipher: AESGCM = field(repr=False)

    def __repr__(self) -> str:
        """String representation (hides key material)."""
        return "DerivedKey(algorithm='AES-256-GCM')"


def derive_key(identifier: str | None) -> DerivedKey:
    """Derive an AES-256-GCM key from a user or group identifier.

    Args:
        identifier: Opaque user or family group identifier

    Returns:
        DerivedKey bound to AES-256-GCM

    Raises:
        MissingKeyIdentifier: If identifier is empty or None
        KeyDerivationError: If the KDF or cipher setup fails
    """
    if not identifier:
        raise MissingKeyIdentifier(
            "A user or group identifier is required for key derivation"
        )

    try:
        key_bytes = hashlib.pbkdf2_hmac(
            "sha256",
            identifier.encode("utf-8"),
            ENCRYPTION_SALT,
            PBKDF2_ITERATIONS,
            dklen=KEY_SIZE,
        )
        return DerivedKey(cipher=AESGCM(key_bytes))

    except Exception as e:
        raise KeyDerivationError(f"Key derivation failed: {type(e).__name__}") from e


@lru_cache(maxsize=KEY_CACHE_SIZE)
def derive_key_cached(identifier: str) -> DerivedKey:
    """Derive a key, memoised in process memory only."""
    return derive_key(identifier)


def clear_key_cache() -> None:
    """Drop every cached key handle."""
    derive_key_cached.cache_clear()
