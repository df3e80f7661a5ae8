import hashlib

import pytest

from cpsigner.crypto.keys import PrivateKey, p2pkh_script
from cpsigner.crypto.signature import parse_der_signature
from cpsigner.crypto.transaction_signing import (
    parse_transaction,
    serialize_transaction,
    signature_hash,
    sign_transaction,
    verify_input,
)
from cpsigner.exceptions import (
    SerializationError,
    StateError,
    TransactionDecodingError,
    ValidationError,
)
from cpsigner.types.transaction import Transaction, TxInput, TxOutput

KEY_ONE_WIF = "KwDiBf89QgGbjEhKnhXJuH7LrciVrZi3qYjgd9M7rFU73sVHnoWn"
KEY_ONE = PrivateKey.from_wif(KEY_ONE_WIF)


def build_unsigned(n_inputs=2):
    pubkey_hash = KEY_ONE.public_key().hash160()
    return Transaction(
        version=1,
        inputs=[TxInput(bytes([i + 1]) * 32, i) for i in range(n_inputs)],
        outputs=[
            TxOutput(50_000, p2pkh_script(b"\x22" * 20)),
            TxOutput(12_345, p2pkh_script(pubkey_hash)),
        ],
        locktime=0,
    )


def test_minimal_serialization():
    tx = Transaction(inputs=[TxInput(b"\x00" * 32, 0)], outputs=[TxOutput(1)])
    expected = (
        "01000000"
        "01" + "00" * 32 + "00000000" + "00" + "ffffffff"
        "01" + "0100000000000000" + "00"
        "00000000"
    )
    assert serialize_transaction(tx) == expected


def test_parse_serialize_roundtrip():
    tx_hex = serialize_transaction(build_unsigned())
    tx = parse_transaction(tx_hex)
    assert len(tx.inputs) == 2
    assert tx.inputs[1].previous_index == 1
    assert tx.inputs[0].sequence == 0xFFFFFFFF
    assert tx.total_output_value == 62_345
    assert serialize_transaction(tx) == tx_hex


def test_txid_display_order():
    tx_input = TxInput(bytes(range(32)), 0)
    assert tx_input.txid == bytes(range(32))[::-1].hex()


def test_truncated_transaction():
    tx_hex = serialize_transaction(build_unsigned())
    for cut in (2, 10, 80):
        with pytest.raises(TransactionDecodingError):
            parse_transaction(tx_hex[:-cut])


def test_invalid_hex():
    with pytest.raises(TransactionDecodingError):
        parse_transaction("zz")
    with pytest.raises(TransactionDecodingError):
        parse_transaction("")


def test_trailing_bytes_ignored():
    tx_hex = serialize_transaction(build_unsigned())
    assert parse_transaction(tx_hex + "deadbeef") == parse_transaction(tx_hex)


def test_single_byte_count_limits():
    tx = build_unsigned()
    tx.inputs = [TxInput(b"\x01" * 32, i) for i in range(256)]
    with pytest.raises(SerializationError):
        serialize_transaction(tx)

    tx = build_unsigned()
    tx.outputs[0].script = b"\x00" * 256
    with pytest.raises(SerializationError):
        serialize_transaction(tx)


def test_signature_hash_index_range():
    tx = build_unsigned()
    with pytest.raises(ValidationError):
        signature_hash(tx, 2, b"")
    assert signature_hash(tx, 0, b"") == signature_hash(tx, 1, b"")

    script_pubkey = KEY_ONE.public_key().p2pkh_script()
    assert signature_hash(tx, 0, script_pubkey) != signature_hash(tx, 1, script_pubkey)


def test_signature_hash_preimage_layout():
    tx = Transaction(
        inputs=[TxInput(b"\x01" * 32, 0), TxInput(b"\x02" * 32, 1)],
        outputs=[TxOutput(1000, b"\x51")],
    )
    script_pubkey = p2pkh_script(b"\x11" * 20)
    preimage = bytes.fromhex(
        "01000000"
        "02"
        + "01" * 32 + "00000000" + "00" + "ffffffff"
        + "02" * 32 + "01000000" + "19" + "76a914" + "11" * 20 + "88ac" + "ffffffff"
        + "01" + "e803000000000000" + "01" + "51"
        + "00000000"
        + "01000000"
    )
    expected = hashlib.sha256(hashlib.sha256(preimage).digest()).digest()
    assert signature_hash(tx, 1, script_pubkey) == expected


def test_sign_transaction_inputs_verify():
    unsigned_hex = serialize_transaction(build_unsigned())
    signed = parse_transaction(sign_transaction(KEY_ONE_WIF, unsigned_hex))
    unsigned = parse_transaction(unsigned_hex)

    assert signed.is_fully_signed
    assert signed.outputs == unsigned.outputs
    assert signed.locktime == unsigned.locktime
    for i, tx_input in enumerate(signed.inputs):
        assert verify_input(unsigned, i, tx_input.script)


def test_script_sig_layout():
    unsigned_hex = serialize_transaction(build_unsigned(1))
    script = parse_transaction(sign_transaction(KEY_ONE_WIF, unsigned_hex)).inputs[0].script

    sig_len = script[0]
    sig = script[1:1 + sig_len]
    assert sig[-1] == 0x01
    assert parse_der_signature(sig)[2] == 0x01
    assert script[1 + sig_len] == 33
    assert script[2 + sig_len:] == KEY_ONE.public_key().point


def test_signing_is_deterministic():
    unsigned_hex = serialize_transaction(build_unsigned())
    assert sign_transaction(KEY_ONE_WIF, unsigned_hex) == sign_transaction(
        KEY_ONE_WIF, unsigned_hex
    )


def test_signature_bound_to_input():
    unsigned_hex = serialize_transaction(build_unsigned())
    signed = parse_transaction(sign_transaction(KEY_ONE_WIF, unsigned_hex))
    unsigned = parse_transaction(unsigned_hex)
    assert not verify_input(unsigned, 1, signed.inputs[0].script)
    assert not verify_input(unsigned, 0, b"\x05\x00")


def test_sign_requires_secret():
    unsigned_hex = serialize_transaction(build_unsigned())
    with pytest.raises(StateError, match="locked"):
        sign_transaction(None, unsigned_hex)


def test_sign_malformed_transaction():
    with pytest.raises(TransactionDecodingError):
        sign_transaction(KEY_ONE_WIF, "0100")
