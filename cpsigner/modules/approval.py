"""Approval surface interface.

The approval surface is whatever shows a pending signing request to the
user (a popup window, a terminal prompt). It only displays; the user's
decision comes back through ``APPROVE_SIGNING`` / ``REJECT_SIGNING``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
import logging

__all__ = ["ApprovalSurface", "LoggingApprovalSurface"]

logger = logging.getLogger(__name__)


class ApprovalSurface(ABC):
    """Displays pending signing requests."""

    @abstractmethod
    def show_request(self, request: Dict[str, Any]) -> None:
        """
        Surface a new pending request.

        Args:
            request: ``{"requestId", "unsignedTx", "details"}``
        """
        raise NotImplementedError


class LoggingApprovalSurface(ApprovalSurface):
    """Records requests and logs them; used when no UI is attached."""

    def __init__(self) -> None:
        self.shown: List[Dict[str, Any]] = []

    def show_request(self, request: Dict[str, Any]) -> None:
        self.shown.append(request)
        details = request.get("details") or {}
        kind = details.get("type") or details.get("transactionType") or "unknown"
        logger.info(f"Signing request {request['requestId']} awaiting approval ({kind})")
