"""Account management: creation, import, lock state and selection."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..constants import (
    LEGACY_ADDRESS_KEY,
    LEGACY_SECRET_KEYS,
    PBKDF2_ITERATIONS,
    STORAGE_ACCOUNTS_KEY,
    STORAGE_INDEX_KEY,
    Network,
)
from ..crypto import vault
from ..crypto.keys import PrivateKey
from ..exceptions import SignerError, StateError, StorageError, ValidationError
from ..storage.base import BaseStorage
from ..storage.memory import MemoryStorage
from ..types.account import Account, WalletState
from ..types.common import Address
from ..utils.validation import (
    validate_account_name,
    validate_address,
    validate_index,
    require_password,
    validate_password,
    validate_wif,
)

__all__ = ["AccountManager"]

logger = logging.getLogger(__name__)


class AccountManager:
    """
    Owner of the wallet state.

    Holds the account list and the single unlocked slot. Every mutation is
    written to storage before it is adopted in memory, so a failed write
    leaves the in-memory state untouched.

    Callers must not run two mutating coroutines concurrently; the
    :class:`~cpsigner.client.Signer` serializes them.
    """

    def __init__(
        self,
        storage: Optional[BaseStorage] = None,
        network: Network = Network.MAINNET,
        iterations: int = PBKDF2_ITERATIONS,
    ) -> None:
        """
        Initialize account manager.

        Args:
            storage: Persistence medium (in-memory if omitted)
            network: Network for generated addresses and WIFs
            iterations: PBKDF2 iteration count for the vault
        """
        self._storage = storage if storage is not None else MemoryStorage()
        self.network = network
        self._iterations = iterations
        self._state = WalletState()
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def has_wallet(self) -> bool:
        return self._state.has_wallet

    @property
    def is_unlocked(self) -> bool:
        return self._state.is_unlocked

    @property
    def current_index(self) -> int:
        return self._state.current_account_index

    @property
    def current_account(self) -> Optional[Account]:
        return self._state.current_account

    @property
    def accounts(self) -> List[Account]:
        return list(self._state.accounts)

    def current_secret(self) -> str:
        """
        WIF of the unlocked account.

        Raises:
            StateError: If the wallet is locked
        """
        if self._state.current_secret is None:
            raise StateError("Wallet is locked. Please unlock first.")
        return self._state.current_secret

    def status(self) -> Dict[str, Any]:
        """Wallet status as reported to the bridge."""
        account = self.current_account
        return {
            "hasWallet": self.has_wallet,
            "isUnlocked": self.is_unlocked,
            "address": account.address if account else None,
            "accountName": account.name if account else None,
            "currentIndex": self.current_index,
            "totalAccounts": len(self._state.accounts),
        }

    def list_accounts(self) -> List[Dict[str, Any]]:
        """All accounts with their index and selection flag."""
        return [
            {
                "index": i,
                "name": account.name,
                "address": account.address,
                "isCurrent": i == self.current_index,
            }
            for i, account in enumerate(self._state.accounts)
        ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """
        Load persisted accounts.

        A legacy single-account layout is migrated to the account list and
        the legacy keys are removed.
        """
        keys = [STORAGE_ACCOUNTS_KEY, STORAGE_INDEX_KEY, LEGACY_ADDRESS_KEY, *LEGACY_SECRET_KEYS]
        data = await self._read(keys)
        legacy_keys = [k for k in (*LEGACY_SECRET_KEYS, LEGACY_ADDRESS_KEY) if k in data]

        if STORAGE_ACCOUNTS_KEY in data:
            raw_accounts = data[STORAGE_ACCOUNTS_KEY]
            if not isinstance(raw_accounts, list):
                raise StorageError("Stored accounts must be a list")
            accounts = [Account.from_dict(item) for item in raw_accounts]
            index = data.get(STORAGE_INDEX_KEY, 0)
            if legacy_keys:
                # Migration already ran; only the cleanup was interrupted
                await self._remove(legacy_keys)
        else:
            accounts = self._migrate_legacy(data)
            index = 0
            if accounts:
                await self._write(WalletState(accounts, 0).persisted())
                await self._remove(legacy_keys)
                self._logger.info(f"Migrated legacy wallet {accounts[0].address}")

        if not isinstance(index, int) or not 0 <= index < max(len(accounts), 1):
            self._logger.warning(f"Stored account index {index!r} out of range, resetting")
            index = 0

        self._state = WalletState(accounts, index)
        self._logger.info(f"Loaded {len(accounts)} accounts")

    @staticmethod
    def _migrate_legacy(data: Dict[str, Any]) -> List[Account]:
        secret = next((data[k] for k in LEGACY_SECRET_KEYS if data.get(k)), None)
        address = data.get(LEGACY_ADDRESS_KEY)
        if not secret or not address:
            return []
        return [Account.from_dict({
            "name": "Account 1",
            "address": address,
            "encryptedSecret": secret,
        })]

    async def _read(self, keys: List[str]) -> Dict[str, Any]:
        try:
            return await self._storage.get(keys)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read wallet from storage: {e}") from e

    async def _write(self, items: Dict[str, Any]) -> None:
        try:
            await self._storage.set(items)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save wallet to storage: {e}") from e

    async def _remove(self, keys: List[str]) -> None:
        try:
            await self._storage.remove(keys)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update storage: {e}") from e

    async def _commit(
        self,
        accounts: List[Account],
        index: int,
        secret: Optional[str]
    ) -> None:
        """Persist then adopt a new state."""
        new_state = WalletState(list(accounts), index, secret)
        await self._write(new_state.persisted())
        self._state = new_state

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_account(self, password: str) -> Account:
        """
        Create a new account with a random key, select and unlock it.

        Args:
            password: Encryption password (at least 8 characters)

        Returns:
            New Account
        """
        validate_password(password)

        private_key = PrivateKey.create()
        wif = private_key.wif(self.network, compressed=True)
        address = private_key.address(self.network)

        blob = await asyncio.to_thread(vault.encrypt, wif, password, self._iterations)

        accounts = self._state.accounts + [
            Account(f"Account {len(self._state.accounts) + 1}", address, blob)
        ]
        await self._commit(accounts, len(accounts) - 1, wif)

        self._logger.info(f"Created account: {address}")
        return accounts[-1]

    async def import_account(self, address: str, wif: str, password: str) -> Account:
        """
        Import an account from a WIF key, select and unlock it.

        The supplied address is stored as given; it is not re-derived from
        the key.

        Raises:
            ValidationError: On short password, malformed WIF or duplicate address
        """
        validate_password(password)
        validate_wif(wif)
        address = Address(validate_address(address))

        if any(account.address == address for account in self._state.accounts):
            raise ValidationError("Account already exists")

        try:
            PrivateKey.from_wif(wif)
        except SignerError as e:
            raise ValidationError(f"Invalid WIF private key: {e.message}") from e

        blob = await asyncio.to_thread(vault.encrypt, wif, password, self._iterations)

        accounts = self._state.accounts + [
            Account(f"Account {len(self._state.accounts) + 1}", address, blob)
        ]
        await self._commit(accounts, len(accounts) - 1, wif)

        self._logger.info(f"Imported account: {address}")
        return accounts[-1]

    async def unlock(self, password: str) -> Account:
        """
        Decrypt the current account's secret into the unlocked slot.

        Raises:
            StateError: If no account exists
            AuthenticationError: On wrong password or corrupted blob
        """
        account = self.current_account
        if account is None:
            raise StateError("No wallet found")
        require_password(password)

        secret = await asyncio.to_thread(
            vault.decrypt, account.encrypted_secret, password, self._iterations
        )
        self._state.current_secret = secret

        self._logger.info(f"Unlocked account: {account.address}")
        return account

    def lock(self) -> None:
        """Forget the unlocked secret. Idempotent."""
        if self._state.current_secret is not None:
            self._logger.info("Wallet locked")
        self._state.current_secret = None

    async def switch_account(self, index: int, password: Optional[str] = None) -> Account:
        """
        Select another account.

        With a password the account is unlocked as well; without one it is
        selected locked.

        Raises:
            StateError: If index is out of range
            AuthenticationError: If the password does not decrypt it
        """
        validate_index(index, self._state.accounts, StateError)
        account = self._state.accounts[index]

        secret = None
        if password is not None:
            require_password(password)
            secret = await asyncio.to_thread(
                vault.decrypt, account.encrypted_secret, password, self._iterations
            )

        await self._commit(self._state.accounts, index, secret)

        self._logger.info(
            f"Switched to account {index} ({'unlocked' if secret else 'locked'})"
        )
        return account

    async def rename_account(self, index: int, new_name: str) -> Account:
        """
        Rename an account.

        Raises:
            ValidationError: If index is invalid or the name is blank
        """
        validate_index(index, self._state.accounts)
        name = validate_account_name(new_name)

        accounts = list(self._state.accounts)
        accounts[index] = accounts[index].renamed(name)
        await self._commit(accounts, self.current_index, self._state.current_secret)

        self._logger.info(f"Renamed account {index}")
        return accounts[index]

    async def delete_account(self, index: int) -> None:
        """
        Delete an account and lock the wallet.

        Raises:
            ValidationError: If it is the last account or index is invalid
        """
        if len(self._state.accounts) <= 1:
            raise ValidationError("Cannot delete the last account")
        validate_index(index, self._state.accounts)

        accounts = list(self._state.accounts)
        removed = accounts.pop(index)

        current = self.current_index
        if index <= current:
            current = max(0, current - 1)

        await self._commit(accounts, current, None)

        self._logger.info(f"Deleted account: {removed.address}")
