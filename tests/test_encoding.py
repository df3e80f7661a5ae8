import pytest

from cpsigner.constants import Network
from cpsigner.exceptions import DecodeError, ValidationError
from cpsigner.utils.encoding import (
    bytes_to_hex,
    decode_base58,
    decode_wif,
    encode_base58,
    encode_base58_check,
    encode_der_integer,
    encode_p2pkh_address,
    encode_wif,
    hex_to_bytes,
    serialize_script,
)

KEY_ONE = (1).to_bytes(32, "big")
KEY_ONE_WIF = "KwDiBf89QgGbjEhKnhXJuH7LrciVrZi3qYjgd9M7rFU73sVHnoWn"
UNCOMPRESSED_WIF = "5HueCGU8rMjxEXxiPuD5BDku4MkFqeZyd4dZ1jvhTVqvbTLvyTJ"
UNCOMPRESSED_SECRET = "0c28fca386c7a227600b2fe50b7cae11ec86d3bf1fbe471be89827e19d72aa1d"


def test_hex_bytes_roundtrip():
    data = b"\x00\x01deadbeef"
    hex_str = bytes_to_hex(data, prefix=True)
    assert hex_str.startswith("0x")
    assert hex_to_bytes(hex_str) == data
    with pytest.raises(DecodeError):
        hex_to_bytes("zzzz")


def test_decode_error_is_validation_error():
    with pytest.raises(ValidationError):
        hex_to_bytes("abc")


def test_base58_known_value():
    assert encode_base58(b"hello world") == "StV1DL6CwTryKyV"
    assert decode_base58("StV1DL6CwTryKyV") == b"hello world"


def test_base58_leading_zeros():
    assert encode_base58(b"\x00\x00\x01") == "112"
    assert decode_base58("112") == b"\x00\x00\x01"
    assert decode_base58("111") == b"\x00\x00\x00"
    assert decode_base58("") == b""


def test_base58_invalid_character():
    for bad in ("0abc", "Oabc", "Iabc", "labc"):
        with pytest.raises(DecodeError):
            decode_base58(bad)


def test_wif_compressed_vector():
    assert decode_wif(KEY_ONE_WIF) == KEY_ONE
    assert encode_wif(KEY_ONE, Network.MAINNET, compressed=True) == KEY_ONE_WIF


def test_wif_uncompressed_vector():
    assert decode_wif(UNCOMPRESSED_WIF).hex() == UNCOMPRESSED_SECRET
    secret = bytes.fromhex(UNCOMPRESSED_SECRET)
    assert encode_wif(secret, compressed=False) == UNCOMPRESSED_WIF


def test_wif_testnet_prefix():
    wif = encode_wif(KEY_ONE, Network.TESTNET, compressed=True)
    assert wif[0] == "c"
    assert decode_wif(wif) == KEY_ONE


def test_wif_bad_payload_length():
    with pytest.raises(ValidationError):
        decode_wif(encode_base58_check(b"\x80" + b"\x01" * 10))


def test_p2pkh_address():
    pubkey_hash = bytes.fromhex("751e76e8199196d454941c45d1b3a323f1433bd6")
    assert encode_p2pkh_address(pubkey_hash) == "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"
    assert encode_p2pkh_address(pubkey_hash, Network.TESTNET)[0] in "mn"
    with pytest.raises(ValidationError):
        encode_p2pkh_address(b"\x00" * 19)


def test_der_integer_minimal_and_padded():
    assert encode_der_integer(0) == b"\x02\x01\x00"
    assert encode_der_integer(0x7F) == b"\x02\x01\x7f"
    assert encode_der_integer(0x80) == b"\x02\x02\x00\x80"
    assert encode_der_integer(0x0100) == b"\x02\x02\x01\x00"
    with pytest.raises(ValidationError):
        encode_der_integer(-1)


def test_serialize_script_pushes():
    assert serialize_script([0x76, b"\xaa\xbb", 0xac]) == b"\x76\x02\xaa\xbb\xac"
    assert serialize_script([b"\x00" * 75])[0] == 75
    with pytest.raises(ValidationError):
        serialize_script([b"\x00" * 76])
