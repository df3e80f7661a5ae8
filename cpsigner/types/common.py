"""Common type definitions for the signer."""

from typing import NewType

__all__ = [
    "HexStr",
    "Address",
    "WIF",
    "EncryptedBlob",
    "RequestId",
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "Signature",
]

# Basic types
HexStr = NewType("HexStr", str)
"""Hexadecimal string representation."""

Address = NewType("Address", str)
"""Bitcoin address string."""

WIF = NewType("WIF", str)
"""Wallet Import Format private key."""

EncryptedBlob = NewType("EncryptedBlob", str)
"""Base64 of salt || nonce || ciphertext+tag."""

RequestId = NewType("RequestId", str)
"""Caller-chosen signing request identifier."""

# Crypto types
PrivateKeyBytes = NewType("PrivateKeyBytes", bytes)
"""32-byte private key."""

PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""33 or 65 byte public key."""

Signature = NewType("Signature", bytes)
"""DER-encoded signature."""
