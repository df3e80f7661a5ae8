"""Encoding and decoding utilities."""

from typing import List, Union

from ..constants import ADDRESS_PREFIXES, WIF_PREFIXES, Network
from ..exceptions import DecodeError, ValidationError
from ..types.common import Address, HexStr, PrivateKeyBytes
from ..utils.hashes import double_sha256

__all__ = [
    "hex_to_bytes",
    "bytes_to_hex",
    "int_to_bytes",
    "bytes_to_int",
    "encode_base58",
    "decode_base58",
    "encode_base58_check",
    "decode_wif",
    "encode_wif",
    "encode_p2pkh_address",
    "encode_der_integer",
    "serialize_script",
]

# Constants
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def hex_to_bytes(hex_str: Union[HexStr, str]) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_str: Hex string with or without 0x prefix

    Returns:
        Decoded bytes

    Raises:
        DecodeError: If hex string is invalid
    """
    try:
        if isinstance(hex_str, str) and hex_str.startswith("0x"):
            hex_str = hex_str[2:]
        return bytes.fromhex(hex_str)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Invalid hex string: {e}") from e


def bytes_to_hex(data: bytes, prefix: bool = False) -> HexStr:
    """Convert bytes to hex string."""
    hex_str = data.hex()
    if prefix:
        hex_str = f"0x{hex_str}"
    return HexStr(hex_str)


def int_to_bytes(
    value: int,
    length: int,
    byteorder: str = "big",
    signed: bool = False
) -> bytes:
    """
    Convert integer to bytes with specified length.

    Args:
        value: Integer value
        length: Number of bytes
        byteorder: 'big' or 'little' endian
        signed: Whether integer is signed

    Returns:
        Encoded bytes
    """
    return value.to_bytes(length, byteorder=byteorder, signed=signed)


def bytes_to_int(
    data: bytes,
    byteorder: str = "big",
    signed: bool = False
) -> int:
    """Convert bytes to integer."""
    return int.from_bytes(data, byteorder=byteorder, signed=signed)


def encode_base58(data: bytes) -> str:
    """
    Encode bytes as Base58 string.

    Args:
        data: Bytes to encode

    Returns:
        Base58 encoded string
    """
    n = bytes_to_int(data, byteorder="big")

    encoded = ""
    while n:
        n, remainder = divmod(n, 58)
        encoded = BASE58_ALPHABET[remainder] + encoded

    # Add leading zeros
    for byte in data:
        if byte == 0:
            encoded = "1" + encoded
        else:
            break

    return encoded


def decode_base58(string: str) -> bytes:
    """
    Decode Base58 string to bytes.

    Args:
        string: Base58 string

    Returns:
        Decoded bytes, minimal big-endian with one zero byte per leading '1'

    Raises:
        DecodeError: If string contains invalid characters
    """
    n = 0
    for char in string:
        index = BASE58_ALPHABET.find(char)
        if index < 0:
            raise DecodeError(f"Invalid Base58 character: {char!r}")
        n = n * 58 + index

    body = n.to_bytes((n.bit_length() + 7) // 8, "big")

    leading_zeros = len(string) - len(string.lstrip("1"))
    return b"\x00" * leading_zeros + body


def encode_base58_check(data: bytes) -> str:
    """Encode bytes as Base58Check (with checksum)."""
    checksum = double_sha256(data)[:4]
    return encode_base58(data + checksum)


def decode_wif(wif: str) -> PrivateKeyBytes:
    """
    Decode a WIF private key to its raw 32 bytes.

    The version byte and the 4-byte checksum are stripped without being
    checked. A trailing compression flag is dropped.

    Args:
        wif: Wallet Import Format string

    Returns:
        32-byte secret key

    Raises:
        ValidationError: If the payload is not 32 or 33 bytes
    """
    data = decode_base58(wif)
    payload = data[1:-4]

    if len(payload) == 33:
        payload = payload[:32]
    elif len(payload) != 32:
        raise ValidationError(f"Invalid WIF payload length: {len(payload)}")

    return PrivateKeyBytes(payload)


def encode_wif(
    secret: bytes,
    network: Network = Network.MAINNET,
    compressed: bool = True
) -> str:
    """
    Export private key in Wallet Import Format.

    Args:
        secret: 32-byte secret key
        network: Target network
        compressed: Append compression flag

    Returns:
        WIF encoded private key
    """
    data = WIF_PREFIXES[network] + secret
    if compressed:
        data += b"\x01"
    return encode_base58_check(data)


def encode_p2pkh_address(hash_bytes: bytes, network: Network = Network.MAINNET) -> Address:
    """
    Encode a public key hash as a P2PKH address.

    Raises:
        ValidationError: If hash is not 20 bytes
    """
    if len(hash_bytes) != 20:
        raise ValidationError("P2PKH requires 20-byte hash")
    prefix = ADDRESS_PREFIXES["p2pkh"][network]
    return Address(encode_base58_check(prefix + hash_bytes))


def encode_der_integer(value: int) -> bytes:
    """
    Encode a non-negative integer as a DER INTEGER.

    Args:
        value: Integer to encode

    Returns:
        0x02 || length || minimal big-endian bytes (0x00-prefixed if high bit set)
    """
    if value < 0:
        raise ValidationError("DER integer must be non-negative")

    body = value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")
    if body[0] & 0x80:
        body = b"\x00" + body
    return b"\x02" + bytes([len(body)]) + body


def serialize_script(script_ops: List[Union[int, bytes]]) -> bytes:
    """
    Serialize script operations to bytes.

    Args:
        script_ops: List of opcodes (int) and data pushes (bytes up to 75 bytes)

    Returns:
        Serialized script
    """
    result = bytearray()

    for op in script_ops:
        if isinstance(op, int):
            result.append(op)
        else:
            if len(op) > 75:
                raise ValidationError(f"Push of {len(op)} bytes needs OP_PUSHDATA")
            result.append(len(op))
            result.extend(op)

    return bytes(result)
