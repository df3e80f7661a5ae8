"""Validation utilities for caller-supplied wallet input."""

import re
from typing import Any, Optional, Sequence

from ..constants import MIN_PASSWORD_LENGTH, WIF_LENGTHS
from ..exceptions import ValidationError

__all__ = [
    "is_valid_password",
    "validate_password",
    "require_password",
    "is_valid_wif",
    "validate_wif",
    "validate_address",
    "validate_account_name",
    "validate_index",
    "validate_request_id",
    "is_valid_hex",
]

HEX_PATTERN = re.compile(r"^(?:[0-9a-fA-F]{2})*$")


def is_valid_password(password: Any) -> bool:
    """Check password meets the minimum length."""
    return isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH


def validate_password(password: Any) -> str:
    """
    Validate a wallet password.

    Raises:
        ValidationError: If password is shorter than the minimum
    """
    if not is_valid_password(password):
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return password


def require_password(password: Any) -> str:
    """Check a password was supplied, without the length rule used on creation."""
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")
    return password


def is_valid_wif(wif: Any) -> bool:
    """Check WIF has the length of an uncompressed or compressed key."""
    return isinstance(wif, str) and len(wif) in WIF_LENGTHS


def validate_wif(wif: Any) -> str:
    """
    Validate WIF private key format.

    Raises:
        ValidationError: If length is not 51 or 52 characters
    """
    if not is_valid_wif(wif):
        raise ValidationError("Invalid WIF private key format")
    return wif


def validate_address(address: Any) -> str:
    """
    Validate a caller-supplied address.

    Only presence is checked; imported addresses are trusted as given.
    """
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Bitcoin address is required")
    return address.strip()


def validate_account_name(name: Any) -> str:
    """
    Validate and normalize an account name.

    Returns:
        Name stripped of surrounding whitespace

    Raises:
        ValidationError: If name is empty after trimming
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Account name cannot be empty")
    return name.strip()


def validate_index(index: Any, items: Sequence, error: Optional[type] = None) -> int:
    """
    Validate a list index.

    Args:
        index: Candidate index
        items: Sequence the index refers to
        error: Exception class to raise (ValidationError by default)

    Returns:
        The index

    Raises:
        ValidationError: If index is not an int in range
    """
    error = error or ValidationError
    if isinstance(index, bool) or not isinstance(index, int):
        raise error(f"Invalid account index: {index!r}")
    if not 0 <= index < len(items):
        raise error(f"Invalid account index: {index}")
    return index


def validate_request_id(request_id: Any) -> str:
    """Validate signing request identifier."""
    if not isinstance(request_id, str) or not request_id:
        raise ValidationError("Request ID is required")
    return request_id


def is_valid_hex(value: Any) -> bool:
    """Check string is even-length hex."""
    return isinstance(value, str) and bool(HEX_PATTERN.match(value))
