"""Cryptographic utilities."""

from ..crypto.keys import PrivateKey, PublicKey, derive_address, p2pkh_script
from ..crypto.signature import (
    sign_ecdsa,
    normalize_s,
    parse_der_signature,
    encode_der_signature,
)
from ..crypto.transaction_signing import (
    parse_transaction,
    serialize_transaction,
    signature_hash,
    sign_input,
    sign_transaction,
    verify_input,
)
from ..crypto import vault

__all__ = [
    # Keys
    "PrivateKey",
    "PublicKey",
    "derive_address",
    "p2pkh_script",

    # Signatures
    "sign_ecdsa",
    "normalize_s",
    "parse_der_signature",
    "encode_der_signature",

    # Transactions
    "parse_transaction",
    "serialize_transaction",
    "signature_hash",
    "sign_input",
    "sign_transaction",
    "verify_input",

    # Vault
    "vault",
]
