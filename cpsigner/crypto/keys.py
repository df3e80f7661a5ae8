"""Key management."""

import secrets
from typing import Optional, Union

from coincurve import PublicKey as SecpPublicKey

from ..constants import (
    CURVE_ORDER,
    Network,
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUALVERIFY,
    OP_HASH160,
)
from ..crypto.signature import sign_ecdsa
from ..exceptions import CryptoError, ValidationError
from ..types.common import Address, PrivateKeyBytes, PublicKeyBytes, Signature
from ..utils.encoding import (
    decode_wif,
    encode_p2pkh_address,
    encode_wif,
    hex_to_bytes,
    serialize_script,
)
from ..utils.hashes import hash160

__all__ = ["PrivateKey", "PublicKey", "p2pkh_script", "derive_address"]


def p2pkh_script(pubkey_hash: bytes) -> bytes:
    """
    Build a Pay-to-PubKey-Hash locking script.

    Args:
        pubkey_hash: 20-byte hash160 of the public key

    Returns:
        OP_DUP OP_HASH160 <hash> OP_EQUALVERIFY OP_CHECKSIG
    """
    if len(pubkey_hash) != 20:
        raise ValidationError("P2PKH requires 20-byte hash")
    return serialize_script([OP_DUP, OP_HASH160, pubkey_hash, OP_EQUALVERIFY, OP_CHECKSIG])


def _validate_secret(key: Union[bytes, str]) -> PrivateKeyBytes:
    if isinstance(key, str):
        key = hex_to_bytes(key)
    if len(key) != 32:
        raise ValidationError(f"Private key must be 32 bytes, got {len(key)}")
    if not 0 < int.from_bytes(key, "big") < CURVE_ORDER:
        raise ValidationError("Private key out of range")
    return PrivateKeyBytes(bytes(key))


class PrivateKey:
    """
    Bitcoin private key wrapper.

    Handles signing, public key derivation and WIF export.
    """

    def __init__(self, key: Union[bytes, str, "PrivateKey"]) -> None:
        """
        Initialize private key.

        Args:
            key: Private key as 32 bytes, hex string, or another PrivateKey

        Raises:
            ValidationError: If key format is invalid
        """
        if isinstance(key, PrivateKey):
            self._secret = key._secret
            return

        self._secret = _validate_secret(key)

    @classmethod
    def create(cls) -> "PrivateKey":
        """
        Create new random private key.

        Returns:
            New PrivateKey instance
        """
        while True:
            key_bytes = secrets.token_bytes(32)
            try:
                return cls(key_bytes)
            except ValidationError:
                # Outside [1, n), try again
                continue

    @classmethod
    def from_wif(cls, wif: str) -> "PrivateKey":
        """
        Import private key from WIF.

        Raises:
            ValidationError: If WIF is invalid
        """
        return cls(decode_wif(wif))

    @property
    def secret(self) -> PrivateKeyBytes:
        """Get private key as bytes."""
        return self._secret

    def hex(self) -> str:
        """Get private key as hex string."""
        return self._secret.hex()

    def wif(self, network: Network = Network.MAINNET, compressed: bool = True) -> str:
        """Export private key in Wallet Import Format."""
        return encode_wif(self._secret, network, compressed)

    def public_key(self, compressed: bool = True) -> "PublicKey":
        """
        Get corresponding public key.

        Raises:
            CryptoError: If the curve library rejects the key
        """
        try:
            point = SecpPublicKey.from_secret(self._secret).format(compressed=compressed)
        except Exception as e:
            raise CryptoError(f"Public key derivation failed: {e}") from e
        return PublicKey(point)

    def address(self, network: Network = Network.MAINNET) -> Address:
        """P2PKH address of the compressed public key."""
        return self.public_key(compressed=True).p2pkh_address(network)

    def sign(self, message_hash: bytes) -> Signature:
        """
        Sign 32-byte message hash.

        Returns:
            DER-encoded low-s signature
        """
        return sign_ecdsa(self._secret, message_hash)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return False
        return self._secret == other._secret

    def __repr__(self) -> str:
        # Show first and last 4 chars of hex for security
        hex_str = self.hex()
        masked = f"{hex_str[:4]}...{hex_str[-4:]}"
        return f"PrivateKey({masked})"


class PublicKey:
    """Bitcoin public key wrapper."""

    def __init__(self, key: Union[bytes, str, "PublicKey"]) -> None:
        """
        Initialize public key.

        Args:
            key: SEC-encoded public key as bytes or hex

        Raises:
            ValidationError: If key format is invalid
        """
        if isinstance(key, PublicKey):
            self._point = key._point
            self._key = key._key
            return

        if isinstance(key, str):
            key = hex_to_bytes(key)
        try:
            self._key = SecpPublicKey(bytes(key))
        except Exception as e:
            raise ValidationError(f"Invalid public key: {e}") from e
        self._point = PublicKeyBytes(bytes(key))

    @property
    def point(self) -> PublicKeyBytes:
        """Get public key as bytes."""
        return self._point

    @property
    def compressed(self) -> bool:
        return len(self._point) == 33

    def hex(self) -> str:
        """Get public key as hex string."""
        return self._point.hex()

    def hash160(self) -> bytes:
        """Get HASH160 of public key."""
        return hash160(self._point)

    def p2pkh_script(self) -> bytes:
        """Locking script paying to this key."""
        return p2pkh_script(self.hash160())

    def p2pkh_address(self, network: Network = Network.MAINNET) -> Address:
        """Get Pay-to-PubKey-Hash address."""
        return encode_p2pkh_address(self.hash160(), network)

    def verify(self, signature: bytes, message_hash: bytes) -> bool:
        """
        Verify signature.

        Args:
            signature: DER-encoded signature
            message_hash: 32-byte message hash

        Returns:
            True if signature is valid
        """
        if len(message_hash) != 32:
            return False

        try:
            return self._key.verify(signature, message_hash, hasher=None)
        except Exception:
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return False
        return self._point == other._point

    def __repr__(self) -> str:
        return f"PublicKey({self.p2pkh_address()})"


def derive_address(secret: bytes, network: Optional[Network] = None) -> Address:
    """Pure derivation of the P2PKH address for a raw secret."""
    return PrivateKey(secret).address(network or Network.MAINNET)
