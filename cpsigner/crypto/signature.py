"""ECDSA signing and DER signature encoding."""

from typing import Optional, Tuple

from coincurve import PrivateKey as SecpPrivateKey

from ..constants import CURVE_ORDER, HALF_CURVE_ORDER
from ..exceptions import CryptoError
from ..types.common import Signature
from ..utils.encoding import encode_der_integer

__all__ = [
    "sign_ecdsa",
    "normalize_s",
    "parse_der_signature",
    "encode_der_signature",
]


def normalize_s(s: int) -> int:
    """Return the low-s form of ``s`` (``n - s`` when ``s > n/2``)."""
    if s > HALF_CURVE_ORDER:
        return CURVE_ORDER - s
    return s


def sign_ecdsa(secret: bytes, message_hash: bytes) -> Signature:
    """
    Sign a 32-byte digest with secp256k1.

    Nonces are RFC 6979 deterministic, so the same key and digest always
    give the same signature. ``s`` is forced into the lower half of the
    curve order before DER encoding.

    Args:
        secret: 32-byte private key
        message_hash: 32-byte digest to sign

    Returns:
        DER-encoded signature without sighash type

    Raises:
        CryptoError: If the digest is malformed or signing fails
    """
    if len(message_hash) != 32:
        raise CryptoError("Message hash must be 32 bytes")

    try:
        compact = SecpPrivateKey(secret).sign_recoverable(message_hash, hasher=None)
    except Exception as e:
        raise CryptoError(f"Signing failed: {e}") from e

    r = int.from_bytes(compact[:32], "big")
    s = normalize_s(int.from_bytes(compact[32:64], "big"))

    return encode_der_signature(r, s)


def parse_der_signature(signature: bytes) -> Tuple[int, int, Optional[int]]:
    """
    Parse DER-encoded signature.

    Args:
        signature: DER-encoded signature (possibly with sighash type)

    Returns:
        Tuple of (r, s, sighash_type)

    Raises:
        CryptoError: If signature format is invalid
    """
    try:
        if signature[0] != 0x30:
            raise ValueError("missing sequence tag")

        length = signature[1]
        if length + 3 == len(signature):
            sighash_type: Optional[int] = signature[-1]
            signature = signature[:-1]
        elif length + 2 == len(signature):
            sighash_type = None
        else:
            raise ValueError("incorrect length")

        # Parse r value
        if signature[2] != 0x02:
            raise ValueError("missing r integer tag")

        r_length = signature[3]
        r = int.from_bytes(signature[4:4 + r_length], "big")

        # Parse s value
        s_offset = 4 + r_length
        if signature[s_offset] != 0x02:
            raise ValueError("missing s integer tag")

        s_length = signature[s_offset + 1]
        s_bytes = signature[s_offset + 2:s_offset + 2 + s_length]
        if len(s_bytes) != s_length:
            raise ValueError("truncated s value")
        s = int.from_bytes(s_bytes, "big")

        return r, s, sighash_type

    except (IndexError, ValueError) as e:
        raise CryptoError(f"Invalid DER signature: {e}") from e


def encode_der_signature(r: int, s: int, sighash_type: Optional[int] = None) -> Signature:
    """
    Encode signature as DER.

    Args:
        r: Signature r value
        s: Signature s value
        sighash_type: Optional sighash type to append

    Returns:
        DER-encoded signature
    """
    sequence = encode_der_integer(r) + encode_der_integer(s)
    result = b"\x30" + bytes([len(sequence)]) + sequence

    if sighash_type is not None:
        result += bytes([sighash_type])

    return Signature(result)
