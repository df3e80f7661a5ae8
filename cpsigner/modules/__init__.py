"""Signer service modules."""

from ..modules.accounts import AccountManager
from ..modules.approval import ApprovalSurface, LoggingApprovalSurface
from ..modules.coordinator import RequestCoordinator

__all__ = [
    "AccountManager",
    "ApprovalSurface",
    "LoggingApprovalSurface",
    "RequestCoordinator",
]
