"""Type definitions for the signer."""

# Common types
from ..types.common import (
    HexStr,
    Address,
    WIF,
    EncryptedBlob,
    RequestId,
    PrivateKeyBytes,
    PublicKeyBytes,
    Signature,
)

# Transaction types
from ..types.transaction import (
    SigHashType,
    TxInput,
    TxOutput,
    Transaction,
)

# Wallet types
from ..types.account import Account, WalletState
from ..types.request import RequestState, SignRequest

__all__ = [
    # Common
    "HexStr",
    "Address",
    "WIF",
    "EncryptedBlob",
    "RequestId",
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "Signature",

    # Transaction
    "SigHashType",
    "TxInput",
    "TxOutput",
    "Transaction",

    # Wallet
    "Account",
    "WalletState",
    "RequestState",
    "SignRequest",
]
