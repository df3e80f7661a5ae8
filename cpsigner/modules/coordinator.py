"""Signing request coordinator.

A request moves PENDING -> APPROVED or PENDING -> REJECTED and is removed
from the pending table on the same step that completes its future, so each
request is signed at most once.
"""

import asyncio
import functools
import logging
from typing import Any, Dict, List, Optional, Set

from ..crypto.transaction_signing import sign_transaction
from ..exceptions import CryptoError, SignerError, StateError, UserRejected, ValidationError
from ..modules.accounts import AccountManager
from ..modules.approval import ApprovalSurface, LoggingApprovalSurface
from ..types.common import HexStr, RequestId
from ..types.request import RequestState, SignRequest
from ..utils.validation import is_valid_hex, validate_request_id

__all__ = ["RequestCoordinator"]


class RequestCoordinator:
    """
    Tracks signing requests awaiting user approval.

    Requests are independent: any number may be pending at once, and
    approving one does not wait on the others.
    """

    def __init__(
        self,
        accounts: AccountManager,
        approval: Optional[ApprovalSurface] = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            accounts: Source of the unlocked secret
            approval: Surface that displays new requests
        """
        self._accounts = accounts
        self._approval = approval or LoggingApprovalSurface()
        self._pending: Dict[str, SignRequest] = {}
        self._signing: Set["asyncio.Task[str]"] = set()
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def pending_ids(self) -> List[str]:
        """Identifiers of requests still awaiting a decision."""
        return list(self._pending)

    def get_request(self, request_id: str) -> Dict[str, Any]:
        """
        Display data for a pending request.

        Raises:
            StateError: If the request is unknown
        """
        entry = self._pending.get(request_id)
        if entry is None:
            raise StateError("Request not found")
        return entry.to_display()

    def submit(
        self,
        request_id: str,
        unsigned_tx: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "asyncio.Future[str]":
        """
        Register a signing request and show it for approval.

        Returns:
            Future resolved with the signed hex, or failed with the error

        Raises:
            StateError: If the wallet is locked (no entry is created)
            ValidationError: On missing or non-hex fields, or a duplicate live id
        """
        validate_request_id(request_id)
        if not self._accounts.is_unlocked:
            raise StateError("Wallet is locked. Please unlock it first.")
        if not isinstance(unsigned_tx, str) or not unsigned_tx:
            raise ValidationError("Missing unsignedTx parameter")
        if not is_valid_hex(unsigned_tx):
            raise ValidationError("unsignedTx must be a hex string")
        if request_id in self._pending:
            raise ValidationError(f"Request {request_id} is already pending")

        future: "asyncio.Future[str]" = asyncio.get_running_loop().create_future()
        entry = SignRequest(
            request_id=RequestId(request_id),
            unsigned_tx=HexStr(unsigned_tx),
            details=details,
            future=future,
        )
        self._pending[request_id] = entry

        try:
            self._approval.show_request(entry.to_display())
        except Exception:
            del self._pending[request_id]
            raise

        self._logger.info(f"Request {request_id} pending ({len(self._pending)} outstanding)")
        return future

    async def request(
        self,
        request_id: str,
        unsigned_tx: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Submit a request and wait for the user's decision.

        Cancelling the caller does not cancel a signing already started.

        Returns:
            Signed transaction hex

        Raises:
            UserRejected: If the user declines
        """
        future = self.submit(request_id, unsigned_tx, details)
        return await asyncio.shield(future)

    async def approve(self, request_id: str) -> str:
        """
        Sign a pending request with the unlocked account.

        The entry is removed before signing starts. Signing runs as its own
        task that completes the request's future with the result or the
        error, so cancelling the approver does not leave the request
        unresolved.

        Returns:
            Signed transaction hex

        Raises:
            StateError: If the request is unknown or the wallet is locked
        """
        entry = self._pending.pop(request_id, None)
        if entry is None:
            raise StateError("Request not found")
        entry.state = RequestState.APPROVED

        try:
            secret = self._accounts.current_secret()
        except SignerError as e:
            self._logger.warning(f"Request {request_id} failed to sign: {e}")
            self._complete(entry, error=e)
            raise

        task = asyncio.ensure_future(self._sign(entry, secret))
        self._signing.add(task)
        task.add_done_callback(functools.partial(self._forget, entry))
        return await asyncio.shield(task)

    async def _sign(self, entry: SignRequest, secret: str) -> str:
        request_id = entry.request_id
        try:
            signed = await asyncio.to_thread(sign_transaction, secret, entry.unsigned_tx)
        except SignerError as e:
            self._logger.warning(f"Request {request_id} failed to sign: {e}")
            self._complete(entry, error=e)
            raise
        except Exception as e:
            self._logger.exception(f"Request {request_id} failed to sign")
            error = CryptoError(f"Failed to sign transaction locally: {e}")
            self._complete(entry, error=error)
            raise error from e

        self._complete(entry, result=signed)
        self._logger.info(f"Request {request_id} approved and signed")
        return signed

    def _forget(self, entry: SignRequest, task: "asyncio.Task[str]") -> None:
        self._signing.discard(task)
        if task.cancelled():
            self._complete(entry, error=CryptoError("Signing was cancelled"))
        else:
            # Outcome already delivered through the request's future
            task.exception()

    def reject(self, request_id: str) -> None:
        """Decline a pending request. Unknown ids are ignored."""
        entry = self._pending.pop(request_id, None)
        if entry is None:
            return
        entry.state = RequestState.REJECTED
        self._complete(entry, error=UserRejected())
        self._logger.info(f"Request {request_id} rejected")

    @staticmethod
    def _complete(
        entry: SignRequest,
        result: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if entry.future.done():
            return
        if error is not None:
            entry.future.set_exception(error)
        else:
            entry.future.set_result(result)
