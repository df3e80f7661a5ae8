import pytest

from cpsigner.constants import CURVE_ORDER, HALF_CURVE_ORDER, Network
from cpsigner.crypto.keys import PrivateKey, PublicKey, derive_address, p2pkh_script
from cpsigner.crypto.signature import (
    encode_der_signature,
    normalize_s,
    parse_der_signature,
    sign_ecdsa,
)
from cpsigner.exceptions import CryptoError, ValidationError
from cpsigner.utils.hashes import sha256

KEY_ONE = (1).to_bytes(32, "big")
KEY_ONE_PUBKEY = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
KEY_ONE_ADDRESS = "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"


def test_public_key_of_key_one():
    key = PrivateKey(KEY_ONE)
    pub = key.public_key(compressed=True)
    assert pub.hex() == KEY_ONE_PUBKEY
    assert pub.compressed
    assert pub.hash160().hex() == "751e76e8199196d454941c45d1b3a323f1433bd6"
    assert key.address() == KEY_ONE_ADDRESS


def test_uncompressed_public_key():
    pub = PrivateKey(KEY_ONE).public_key(compressed=False)
    assert len(pub.point) == 65
    assert pub.point[0] == 0x04
    assert not pub.compressed


def test_derive_address():
    assert derive_address(KEY_ONE) == KEY_ONE_ADDRESS
    assert derive_address(KEY_ONE, Network.TESTNET)[0] in "mn"


def test_private_key_wif_roundtrip():
    key = PrivateKey.create()
    wif = key.wif(Network.MAINNET, compressed=True)
    assert PrivateKey.from_wif(wif) == key
    assert PrivateKey.from_wif(key.wif(compressed=False)) == key


def test_private_key_range():
    with pytest.raises(ValidationError):
        PrivateKey(b"\x00" * 32)
    with pytest.raises(ValidationError):
        PrivateKey(CURVE_ORDER.to_bytes(32, "big"))
    with pytest.raises(ValidationError):
        PrivateKey(b"\x01" * 31)


def test_private_key_repr_masks_secret():
    key = PrivateKey.create()
    assert key.hex() not in repr(key)


def test_sign_low_s_and_verify():
    key = PrivateKey(KEY_ONE)
    digest = sha256(b"message")
    sig = key.sign(digest)
    r, s, sighash = parse_der_signature(sig)
    assert sighash is None
    assert 0 < s <= HALF_CURVE_ORDER
    assert key.public_key().verify(sig, digest)
    assert not key.public_key().verify(sig, sha256(b"other"))


def test_signing_is_deterministic():
    digest = sha256(b"message")
    assert sign_ecdsa(KEY_ONE, digest) == sign_ecdsa(KEY_ONE, digest)


def test_sign_rejects_bad_digest():
    with pytest.raises(CryptoError):
        sign_ecdsa(KEY_ONE, b"\x00" * 31)


def test_normalize_s():
    assert normalize_s(1) == 1
    assert normalize_s(HALF_CURVE_ORDER) == HALF_CURVE_ORDER
    assert normalize_s(CURVE_ORDER - 1) == 1


def test_der_signature_roundtrip():
    sig = encode_der_signature(1, 2)
    assert sig.hex() == "3006020101020102"
    assert parse_der_signature(sig) == (1, 2, None)
    assert parse_der_signature(encode_der_signature(1, 2, 0x01)) == (1, 2, 0x01)


def test_der_signature_high_bit_padding():
    sig = encode_der_signature(0x80, 0xFF)
    assert sig.hex() == "3008020200800202" + "00ff"
    assert parse_der_signature(sig)[:2] == (0x80, 0xFF)


def test_parse_der_rejects_garbage():
    with pytest.raises(CryptoError):
        parse_der_signature(b"\x31\x06\x02\x01\x01\x02\x01\x02")
    with pytest.raises(CryptoError):
        parse_der_signature(b"\x30\x09\x02")


def test_public_key_rejects_invalid_point():
    with pytest.raises(ValidationError):
        PublicKey(b"\x02" + b"\x00" * 31)


def test_p2pkh_script_layout():
    script = p2pkh_script(b"\x11" * 20)
    assert script.hex() == "76a914" + "11" * 20 + "88ac"
