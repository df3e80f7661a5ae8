"""Password-based authenticated encryption of secrets at rest."""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..constants import KEY_SIZE, NONCE_SIZE, PBKDF2_ITERATIONS, SALT_SIZE
from ..exceptions import AuthenticationError, CryptoError
from ..types.common import EncryptedBlob

__all__ = ["derive_key", "encrypt", "decrypt"]

# GCM tag is 16 bytes, so even an empty plaintext produces this much
_MIN_BLOB_SIZE = SALT_SIZE + NONCE_SIZE + 16


def derive_key(password: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> bytes:
    """PBKDF2-HMAC-SHA256 a 256-bit key from ``password``."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt(plaintext: str, password: str, iterations: int = PBKDF2_ITERATIONS) -> EncryptedBlob:
    """
    Encrypt ``plaintext`` under ``password``.

    A fresh salt and nonce are drawn on every call, so encrypting the same
    plaintext twice yields different blobs.

    Args:
        plaintext: Secret to protect
        password: User password
        iterations: PBKDF2 iteration count

    Returns:
        base64(salt || nonce || ciphertext+tag)

    Raises:
        CryptoError: If the cipher fails
    """
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    try:
        key = derive_key(password, salt, iterations)
        ct = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    except Exception as e:
        raise CryptoError(f"Encryption failed: {e}") from e
    return EncryptedBlob(base64.b64encode(salt + nonce + ct).decode("ascii"))


def decrypt(blob: str, password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """
    Decrypt a blob produced by :func:`encrypt`.

    Raises:
        AuthenticationError: On wrong password or corrupted blob, without
            telling the two apart
    """
    try:
        raw = base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise AuthenticationError() from e

    if len(raw) < _MIN_BLOB_SIZE:
        raise AuthenticationError()

    salt = raw[:SALT_SIZE]
    nonce = raw[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
    ct = raw[SALT_SIZE + NONCE_SIZE:]

    key = derive_key(password, salt, iterations)
    try:
        plain = AESGCM(key).decrypt(nonce, ct, None)
        return plain.decode("utf-8")
    except (InvalidTag, UnicodeDecodeError) as e:
        raise AuthenticationError() from e
