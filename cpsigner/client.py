"""Main signer client."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from .api_types import (
    COMMAND_TYPES,
    ApproveSigning,
    Command,
    CreateWallet,
    DeleteAccount,
    GetAccounts,
    GetSignRequest,
    GetStatus,
    ImportWallet,
    Lock,
    RejectSigning,
    RenameAccount,
    Response,
    SignTransaction,
    SwitchAccount,
    Unlock,
    parse_command,
)
from .constants import PBKDF2_ITERATIONS, Network
from .exceptions import SignerError
from .modules.accounts import AccountManager
from .modules.approval import ApprovalSurface
from .modules.coordinator import RequestCoordinator
from .storage.base import BaseStorage

__all__ = ["Signer"]

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


class Signer:
    """
    Command surface of the signer.

    Accepts commands from the bridge and replies with ``{success, data}`` or
    ``{success: false, error}``. Commands that change wallet state run one at
    a time; a signing request waits for the user's decision without holding
    up other commands.
    """

    def __init__(
        self,
        storage: Optional[BaseStorage] = None,
        network: Network = Network.MAINNET,
        iterations: int = PBKDF2_ITERATIONS,
        approval: Optional[ApprovalSurface] = None,
    ) -> None:
        """
        Initialize signer.

        Args:
            storage: Persistence medium (in-memory if omitted)
            network: Network for generated addresses and WIFs
            iterations: PBKDF2 iteration count for the vault
            approval: Surface that displays signing requests
        """
        self._accounts = AccountManager(storage, network=network, iterations=iterations)
        self._requests = RequestCoordinator(self._accounts, approval)
        self._network = network

        self._mutex = asyncio.Lock()
        self._loaded = False

        self._handlers: Dict[type, Handler] = {
            GetStatus: self._get_status,
            CreateWallet: self._create_wallet,
            ImportWallet: self._import_wallet,
            Unlock: self._unlock,
            Lock: self._lock,
            SwitchAccount: self._switch_account,
            GetAccounts: self._get_accounts,
            RenameAccount: self._rename_account,
            DeleteAccount: self._delete_account,
            SignTransaction: self._sign_transaction,
            ApproveSigning: self._approve_signing,
            RejectSigning: self._reject_signing,
            GetSignRequest: self._get_sign_request,
        }
        missing = set(COMMAND_TYPES) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for {sorted(t.__name__ for t in missing)}")

        logger.info(f"Initialized signer for {network.value}")

    @property
    def accounts(self) -> AccountManager:
        """Get account manager."""
        return self._accounts

    @property
    def requests(self) -> RequestCoordinator:
        """Get request coordinator."""
        return self._requests

    @property
    def network(self) -> Network:
        """Get current network."""
        return self._network

    async def load(self) -> None:
        """Load persisted accounts (runs legacy migration once)."""
        async with self._mutex:
            if self._loaded:
                return
            await self._accounts.load()
            self._loaded = True

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def handle(self, command: Command) -> Response:
        """
        Execute a command.

        Errors never escape: they are reported in the response.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            return Response.fail("Unknown message type")

        try:
            await self._ensure_loaded()
            data = await handler(command)
        except SignerError as e:
            logger.warning(f"{type(command).__name__} failed: {e}")
            return Response.fail(e.message)
        except Exception as e:
            logger.exception(f"{type(command).__name__} failed unexpectedly")
            return Response.fail(f"Unexpected error: {e}")

        return Response.ok(data)

    async def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute a raw bridge message.

        Args:
            message: ``{"type": "...", "data": {...}}``

        Returns:
            Response dict
        """
        try:
            command = parse_command(message)
        except SignerError as e:
            return Response.fail(e.message).to_dict()
        response = await self.handle(command)
        return response.to_dict()

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _get_status(self, command: GetStatus) -> Dict[str, Any]:
        return self._accounts.status()

    async def _get_accounts(self, command: GetAccounts) -> Dict[str, Any]:
        return {
            "accounts": self._accounts.list_accounts(),
            "currentIndex": self._accounts.current_index,
        }

    async def _create_wallet(self, command: CreateWallet) -> Dict[str, Any]:
        async with self._mutex:
            account = await self._accounts.create_account(command.password)
        return {"address": account.address, "accountName": account.name}

    async def _import_wallet(self, command: ImportWallet) -> Dict[str, Any]:
        async with self._mutex:
            account = await self._accounts.import_account(
                command.address, command.wif_secret, command.password
            )
        return {"address": account.address, "accountName": account.name}

    async def _unlock(self, command: Unlock) -> Dict[str, Any]:
        async with self._mutex:
            account = await self._accounts.unlock(command.password)
        return {"address": account.address}

    async def _lock(self, command: Lock) -> Dict[str, Any]:
        async with self._mutex:
            self._accounts.lock()
        return {}

    async def _switch_account(self, command: SwitchAccount) -> Dict[str, Any]:
        async with self._mutex:
            account = await self._accounts.switch_account(command.index, command.password)
        return {"address": account.address, "accountName": account.name}

    async def _rename_account(self, command: RenameAccount) -> Dict[str, Any]:
        async with self._mutex:
            await self._accounts.rename_account(command.index, command.new_name)
        return {}

    async def _delete_account(self, command: DeleteAccount) -> Dict[str, Any]:
        async with self._mutex:
            await self._accounts.delete_account(command.index)
        return {}

    async def _sign_transaction(self, command: SignTransaction) -> Dict[str, Any]:
        async with self._mutex:
            future = self._requests.submit(
                command.request_id, command.unsigned_tx, command.details
            )
        # Waits for the user without holding the mutex
        signed = await asyncio.shield(future)
        return {"signedTx": signed}

    async def _approve_signing(self, command: ApproveSigning) -> Dict[str, Any]:
        # Entry removal and secret read happen before the first await;
        # signing itself runs off the loop.
        await self._requests.approve(command.request_id)
        return {}

    async def _reject_signing(self, command: RejectSigning) -> Dict[str, Any]:
        self._requests.reject(command.request_id)
        return {}

    async def _get_sign_request(self, command: GetSignRequest) -> Dict[str, Any]:
        return self._requests.get_request(command.request_id)
