"""Signer exceptions hierarchy."""

from typing import Any, Optional

__all__ = [
    "SignerError",
    "ValidationError",
    "DecodeError",
    "AuthenticationError",
    "StateError",
    "SerializationError",
    "TransactionDecodingError",
    "CryptoError",
    "UserRejected",
    "StorageError",
]


class SignerError(Exception):
    """Base exception for all signer errors."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[Any] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ValidationError(SignerError):
    """Raised when caller-supplied input is rejected."""
    pass


class DecodeError(ValidationError):
    """Raised when a textual encoding (base58, hex) cannot be decoded."""
    pass


class AuthenticationError(SignerError):
    """Raised when an encrypted blob fails to authenticate.

    Wrong password and corrupted data produce the same error.
    """

    def __init__(self, message: str = "Incorrect password or corrupted data") -> None:
        super().__init__(message)


class StateError(SignerError):
    """Raised when an operation is not allowed in the current wallet state."""
    pass


class SerializationError(SignerError):
    """Raised when serialization/deserialization fails."""
    pass


class TransactionDecodingError(SerializationError):
    """Raised when raw transaction bytes are truncated or malformed."""
    pass


class CryptoError(SignerError):
    """Raised when cryptographic operation fails."""
    pass


class UserRejected(SignerError):
    """Raised when the user declines a signing request."""

    def __init__(self, message: str = "User rejected transaction") -> None:
        super().__init__(message)


class StorageError(SignerError):
    """Raised when the persistence medium fails to read or write."""
    pass
