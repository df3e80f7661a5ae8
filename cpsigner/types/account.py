"""Account and wallet state type definitions."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..constants import STORAGE_ACCOUNTS_KEY, STORAGE_INDEX_KEY
from ..exceptions import StorageError
from ..types.common import Address, EncryptedBlob

__all__ = ["Account", "WalletState"]


@dataclass(frozen=True)
class Account:
    """Stored account: a label, a public address and the encrypted secret."""

    name: str
    address: Address
    encrypted_secret: EncryptedBlob

    def renamed(self, name: str) -> "Account":
        """Return a copy carrying a new name."""
        return replace(self, name=name)

    def to_dict(self) -> Dict[str, str]:
        """Export in storage layout."""
        return {
            "name": self.name,
            "address": self.address,
            "encryptedSecret": self.encrypted_secret,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        """Load from storage layout."""
        try:
            return cls(
                name=str(data["name"]),
                address=Address(str(data["address"])),
                encrypted_secret=EncryptedBlob(str(data["encryptedSecret"])),
            )
        except (KeyError, TypeError) as e:
            raise StorageError(f"Malformed stored account: {e}") from e


@dataclass
class WalletState:
    """
    Process-wide wallet state.

    ``current_secret`` holds the WIF of the selected account while unlocked
    and is the only place raw key material lives. It is never persisted.
    """

    accounts: List[Account] = field(default_factory=list)
    current_account_index: int = 0
    current_secret: Optional[str] = field(default=None, repr=False)

    @property
    def is_unlocked(self) -> bool:
        return self.current_secret is not None

    @property
    def has_wallet(self) -> bool:
        return len(self.accounts) > 0

    @property
    def current_account(self) -> Optional[Account]:
        if not self.accounts:
            return None
        return self.accounts[self.current_account_index]

    def persisted(self) -> Dict[str, Any]:
        """Storage subset of the state."""
        return {
            STORAGE_ACCOUNTS_KEY: [account.to_dict() for account in self.accounts],
            STORAGE_INDEX_KEY: self.current_account_index,
        }
