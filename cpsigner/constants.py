"""Constants and defaults for the signer."""

from enum import Enum

__all__ = [
    "Network",
    "ADDRESS_PREFIXES",
    "WIF_PREFIXES",
    "CURVE_ORDER",
    "HALF_CURVE_ORDER",
    "SIGHASH_ALL",
    "OP_DUP",
    "OP_HASH160",
    "OP_EQUALVERIFY",
    "OP_CHECKSIG",
    "PBKDF2_ITERATIONS",
    "SALT_SIZE",
    "NONCE_SIZE",
    "KEY_SIZE",
    "MIN_PASSWORD_LENGTH",
    "WIF_LENGTHS",
    "MAX_COMPACT_SIZE",
    "STORAGE_ACCOUNTS_KEY",
    "STORAGE_INDEX_KEY",
    "LEGACY_SECRET_KEYS",
    "LEGACY_ADDRESS_KEY",
]


class Network(Enum):
    """Bitcoin networks."""
    MAINNET = "mainnet"
    TESTNET = "testnet"


ADDRESS_PREFIXES = {
    "p2pkh": {
        Network.MAINNET: b"\x00",
        Network.TESTNET: b"\x6f",
    },
}

WIF_PREFIXES = {
    Network.MAINNET: b"\x80",
    Network.TESTNET: b"\xef",
}

# secp256k1
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HALF_CURVE_ORDER = CURVE_ORDER // 2

# Script
SIGHASH_ALL = 0x01
OP_DUP = 0x76
OP_HASH160 = 0xa9
OP_EQUALVERIFY = 0x88
OP_CHECKSIG = 0xac

# Vault
PBKDF2_ITERATIONS = 100_000
SALT_SIZE = 16
NONCE_SIZE = 12
KEY_SIZE = 32

# Accounts
MIN_PASSWORD_LENGTH = 8
WIF_LENGTHS = (51, 52)

# Counts and script lengths are a single byte on the wire
MAX_COMPACT_SIZE = 0xff

# Storage layout
STORAGE_ACCOUNTS_KEY = "accounts"
STORAGE_INDEX_KEY = "currentAccountIndex"
LEGACY_SECRET_KEYS = ("encryptedSecret", "encryptedPrivateKey")
LEGACY_ADDRESS_KEY = "address"
