"""
cpsigner

Local Bitcoin signer: keeps encrypted P2PKH accounts, signs legacy
transactions after explicit user approval, and answers a small
message-based command protocol.
"""

from .client import Signer
from .constants import Network
from .exceptions import (
    SignerError,
    ValidationError,
    DecodeError,
    AuthenticationError,
    StateError,
    SerializationError,
    TransactionDecodingError,
    CryptoError,
    UserRejected,
    StorageError,
)
from .storage import BaseStorage, JSONFileStorage, MemoryStorage
from .crypto import PrivateKey, PublicKey, sign_transaction
from .modules import ApprovalSurface
from .types import Account, Transaction

__version__ = "1.0.0"

__all__ = [
    # Main client
    "Signer",

    # Network
    "Network",

    # Storage
    "BaseStorage",
    "JSONFileStorage",
    "MemoryStorage",

    # Exceptions
    "SignerError",
    "ValidationError",
    "DecodeError",
    "AuthenticationError",
    "StateError",
    "SerializationError",
    "TransactionDecodingError",
    "CryptoError",
    "UserRejected",
    "StorageError",

    # Crypto
    "PrivateKey",
    "PublicKey",
    "sign_transaction",

    # Approval
    "ApprovalSurface",

    # Types
    "Account",
    "Transaction",
]


def connect(path=None, network: Network = Network.MAINNET, **kwargs) -> Signer:
    """
    Create a signer backed by a JSON file, or by memory if no path is given.

    Args:
        path: Location of the wallet file
        network: Network for generated addresses and WIFs
        **kwargs: Additional Signer arguments

    Returns:
        Signer instance (call ``await signer.load()`` before use)

    Example:
        >>> signer = cpsigner.connect("wallet.json")
        >>> signer = cpsigner.connect(network=Network.TESTNET)
    """
    storage = JSONFileStorage(path) if path is not None else MemoryStorage()
    return Signer(storage=storage, network=network, **kwargs)
