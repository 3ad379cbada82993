"""AES-256-GCM field encoding and decoding.

Encoded fields are self-describing strings of the form
``ENC:<base64(nonce || ciphertext || tag)>``. Anything without the prefix is
treated as legacy plaintext and never decrypted.
"""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag

from taskseal.utils.logger import get_logger

from .exceptions import DecodeFailure, EncodeFailure
from .keys import DerivedKey

# Constants
NONCE_SIZE = 12  # 96 bits (recommended for GCM)
TAG_SIZE = 16  # 128 bits (authentication tag)
ENCRYPTED_PREFIX = "ENC:"


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def is_encrypted(value: object) -> bool:
    """Check whether a value carries the ciphertext prefix."""
    return isinstance(value, str) and value.startswith(ENCRYPTED_PREFIX)


def _encrypt(plaintext: str, key: DerivedKey) -> str:
    nonce = os.urandom(NONCE_SIZE)
    ciphertext_with_tag = key.cipher.encrypt(
        nonce, plaintext.encode("utf-8"), associated_data=None
    )
    payload = base64.b64encode(nonce + ciphertext_with_tag).decode("ascii")
    return ENCRYPTED_PREFIX + payload


def _decrypt(value: str, key: DerivedKey) -> str:
    try:
        combined = base64.b64decode(value[len(ENCRYPTED_PREFIX) :], validate=True)

        if len(combined) < NONCE_SIZE + TAG_SIZE:
            raise DecodeFailure(
                f"Encoded field too short: expected at least "
                f"{NONCE_SIZE + TAG_SIZE} bytes, got {len(combined)}"
            )

        nonce = combined[:NONCE_SIZE]
        ciphertext_with_tag = combined[NONCE_SIZE:]
        plaintext_bytes = key.cipher.decrypt(
            nonce, ciphertext_with_tag, associated_data=None
        )
        return plaintext_bytes.decode("utf-8")

    except DecodeFailure:
        raise
    except InvalidTag as e:
        raise DecodeFailure("Authentication failed (wrong key or tampered data)") from e
    except (binascii.Error, ValueError) as e:
        raise DecodeFailure(f"Malformed encoded field: {e}") from e


def encode_field(
    plaintext: str | None, key: DerivedKey, *, fail_closed: bool = False
) -> str | None:
    """Encrypt a single text value.

    Empty values and values that are already encrypted are returned
    unchanged. A fresh random nonce is generated on every call.

    Args:
        plaintext: Value to encrypt
        key: Key from ``derive_key``
        fail_closed: Raise EncodeFailure instead of returning the plaintext
            when the cipher fails

    Returns:
        Encoded field, or the original value when nothing had to be done or
        the cipher failed under the fail-soft policy

    Raises:
        EncodeFailure: If encryption fails and ``fail_closed`` is set
    """
    if _is_blank(plaintext) or is_encrypted(plaintext):
        return plaintext

    try:
        return _encrypt(plaintext, key)
    except Exception as e:
        if fail_closed:
            raise EncodeFailure(f"Encryption failed: {type(e).__name__}") from e
        get_logger().getChild("crypto").warning(
            "SECURITY: field encryption failed (%s), storing plaintext",
            type(e).__name__,
        )
        return plaintext


def decode_field(value: str | None, key: DerivedKey) -> str | None:
    """Decrypt a single encoded value.

    Untagged and empty values pass through untouched. When decryption fails
    the encoded value is returned as-is; callers should present a value that
    still carries the prefix as unavailable content.
    """
    if _is_blank(value) or not is_encrypted(value):
        return value

    try:
        return _decrypt(value, key)
    except DecodeFailure as e:
        get_logger().getChild("crypto").warning("Field decryption failed: %s", e)
        return value


def try_decode_field(value: str | None, key: DerivedKey) -> str | None:
    """Decrypt an encoded value, returning None instead of logging on failure.

    Non-encoded values are returned unchanged.
    """
    if _is_blank(value) or not is_encrypted(value):
        return value

    try:
        return _decrypt(value, key)
    except DecodeFailure:
        return None
