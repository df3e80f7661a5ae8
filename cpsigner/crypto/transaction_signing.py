"""Legacy P2PKH transaction parsing, signing and serialization.

Input/output counts and script lengths are encoded as a single byte rather
than a Bitcoin CompactSize, so only transactions with at most 255 inputs,
255 outputs and 255-byte scripts are representable.
"""

import logging
from typing import Optional

from ..constants import MAX_COMPACT_SIZE, SIGHASH_ALL
from ..crypto.keys import PrivateKey, PublicKey
from ..crypto.signature import parse_der_signature
from ..exceptions import (
    CryptoError,
    DecodeError,
    SerializationError,
    StateError,
    TransactionDecodingError,
    ValidationError,
)
from ..types.common import HexStr
from ..types.transaction import SigHashType, Transaction, TxInput, TxOutput
from ..utils.encoding import (
    bytes_to_hex,
    bytes_to_int,
    hex_to_bytes,
    int_to_bytes,
    serialize_script,
)
from ..utils.hashes import double_sha256

__all__ = [
    "parse_transaction",
    "serialize_transaction",
    "signature_hash",
    "sign_input",
    "sign_transaction",
    "verify_input",
]

logger = logging.getLogger(__name__)


class _Reader:
    """Bounds-checked cursor over raw transaction bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.offset = 0

    def read(self, n: int, what: str) -> bytes:
        end = self.offset + n
        if end > len(self._data):
            raise TransactionDecodingError(
                f"Transaction truncated reading {what} at offset {self.offset}"
            )
        chunk = self._data[self.offset:end]
        self.offset = end
        return chunk

    def read_u8(self, what: str) -> int:
        return self.read(1, what)[0]

    def read_u32(self, what: str) -> int:
        return bytes_to_int(self.read(4, what), "little")

    def read_u64(self, what: str) -> int:
        return bytes_to_int(self.read(8, what), "little")

    @property
    def remaining(self) -> int:
        return len(self._data) - self.offset


def parse_transaction(tx_hex: str) -> Transaction:
    """
    Parse raw transaction hex.

    Args:
        tx_hex: Unsigned (or partially signed) transaction hex

    Returns:
        Parsed Transaction

    Raises:
        TransactionDecodingError: If hex is invalid or bytes run out
    """
    try:
        data = hex_to_bytes(tx_hex)
    except DecodeError as e:
        raise TransactionDecodingError(f"Invalid transaction hex: {e}") from e

    reader = _Reader(data)
    version = reader.read_u32("version")

    inputs = []
    for i in range(reader.read_u8("input count")):
        previous_hash = reader.read(32, f"input {i} previous hash")
        previous_index = reader.read_u32(f"input {i} previous index")
        script = reader.read(reader.read_u8(f"input {i} script length"), f"input {i} script")
        sequence = reader.read_u32(f"input {i} sequence")
        inputs.append(TxInput(previous_hash, previous_index, script, sequence))

    outputs = []
    for i in range(reader.read_u8("output count")):
        value = reader.read_u64(f"output {i} value")
        script = reader.read(reader.read_u8(f"output {i} script length"), f"output {i} script")
        outputs.append(TxOutput(value, script))

    locktime = reader.read_u32("locktime")

    if reader.remaining:
        logger.debug(f"Ignoring {reader.remaining} trailing bytes after locktime")

    return Transaction(version=version, inputs=inputs, outputs=outputs, locktime=locktime)


def _compact(n: int, what: str) -> int:
    if not 0 <= n <= MAX_COMPACT_SIZE:
        raise SerializationError(f"{what} {n} does not fit in one byte")
    return n


def _serialize(
    tx: Transaction,
    script_for_input: Optional[int] = None,
    script_override: bytes = b""
) -> bytes:
    """
    Serialize ``tx``.

    With ``script_for_input`` set, builds the signing preimage body: that
    input carries ``script_override`` and every other input an empty script.
    """
    s = bytearray()

    s.extend(int_to_bytes(tx.version, 4, "little"))

    s.append(_compact(len(tx.inputs), "Input count"))
    for i, inp in enumerate(tx.inputs):
        if len(inp.previous_hash) != 32:
            raise SerializationError(f"Input {i} previous hash must be 32 bytes")
        s.extend(inp.previous_hash)
        s.extend(int_to_bytes(inp.previous_index, 4, "little"))

        if script_for_input is None:
            script = inp.script
        elif i == script_for_input:
            script = script_override
        else:
            script = b""
        s.append(_compact(len(script), f"Input {i} script length"))
        s.extend(script)

        s.extend(int_to_bytes(inp.sequence, 4, "little"))

    s.append(_compact(len(tx.outputs), "Output count"))
    for i, out in enumerate(tx.outputs):
        s.extend(int_to_bytes(out.value, 8, "little"))
        s.append(_compact(len(out.script), f"Output {i} script length"))
        s.extend(out.script)

    s.extend(int_to_bytes(tx.locktime, 4, "little"))

    return bytes(s)


def serialize_transaction(tx: Transaction) -> HexStr:
    """
    Serialize transaction to hex.

    Raises:
        SerializationError: If a count or script length exceeds one byte
    """
    return bytes_to_hex(_serialize(tx))


def signature_hash(tx: Transaction, input_index: int, script_pubkey: bytes) -> bytes:
    """
    Compute the legacy SIGHASH_ALL digest for one input.

    Args:
        tx: Transaction being signed
        input_index: Input whose signature is being produced
        script_pubkey: Locking script of the output that input spends

    Returns:
        32-byte double-SHA256 digest
    """
    if not 0 <= input_index < len(tx.inputs):
        raise ValidationError(f"Input index {input_index} out of range")

    preimage = _serialize(tx, input_index, script_pubkey)
    preimage += int_to_bytes(SigHashType.ALL, 4, "little")
    return double_sha256(preimage)


def sign_input(tx: Transaction, input_index: int, private_key: PrivateKey) -> None:
    """
    Sign one input in place with a P2PKH scriptSig.

    Args:
        tx: Transaction to mutate
        input_index: Input to sign
        private_key: Key controlling the spent output
    """
    public_key = private_key.public_key(compressed=True)
    script_pubkey = public_key.p2pkh_script()

    sighash = signature_hash(tx, input_index, script_pubkey)
    signature = private_key.sign(sighash) + bytes([SIGHASH_ALL])

    tx.inputs[input_index].script = serialize_script([signature, public_key.point])


def sign_transaction(wif: Optional[str], unsigned_hex: str) -> HexStr:
    """
    Sign every input of ``unsigned_hex`` with the key in ``wif``.

    The key is used only for the duration of the call.

    Args:
        wif: Unlocked account secret, or None when the wallet is locked
        unsigned_hex: Transaction to sign

    Returns:
        Signed transaction hex

    Raises:
        StateError: If no secret is available
        TransactionDecodingError: If the transaction is malformed
        CryptoError: If a primitive fails
    """
    if not wif:
        raise StateError("Wallet is locked. Please unlock first.")

    private_key = PrivateKey.from_wif(wif)
    tx = parse_transaction(unsigned_hex)
    logger.info(f"Signing transaction with {len(tx.inputs)} inputs")

    for i in range(len(tx.inputs)):
        sign_input(tx, i, private_key)

    signed = serialize_transaction(tx)
    logger.info(f"Transaction signed ({len(signed) // 2} bytes)")
    return signed


def verify_input(unsigned: Transaction, input_index: int, script_sig: bytes) -> bool:
    """
    Check a P2PKH scriptSig against the unsigned transaction.

    Args:
        unsigned: Transaction as it was before signing
        input_index: Input the scriptSig belongs to
        script_sig: push(signature || hashtype) push(pubkey)

    Returns:
        True if the signature is valid for the embedded public key
    """
    try:
        sig_len = script_sig[0]
        sig_with_type = script_sig[1:1 + sig_len]
        key_len = script_sig[1 + sig_len]
        pubkey = PublicKey(script_sig[2 + sig_len:2 + sig_len + key_len])
        _, _, hash_type = parse_der_signature(sig_with_type)
    except (IndexError, ValidationError, CryptoError) as e:
        logger.debug(f"Malformed scriptSig on input {input_index}: {e}")
        return False

    if hash_type != SIGHASH_ALL:
        return False

    sighash = signature_hash(unsigned, input_index, pubkey.p2pkh_script())
    return pubkey.verify(sig_with_type[:-1], sighash)
