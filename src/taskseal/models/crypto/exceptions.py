"""Custom exceptions for TaskSeal crypto."""


class TaskSealCryptoError(Exception):
    """Base exception for all TaskSeal crypto errors."""


class MissingKeyIdentifier(TaskSealCryptoError):
    """Raised when a key is requested without a user or group identifier."""


class KeyDerivationError(TaskSealCryptoError):
    """Raised when key derivation fails."""


class EncodeFailure(TaskSealCryptoError):
    """Raised when a field cannot be encrypted and the fail-closed policy is on."""


class DecodeFailure(TaskSealCryptoError):
    """Raised when an encoded field cannot be decrypted (wrong key, corrupted or tampered data)."""
