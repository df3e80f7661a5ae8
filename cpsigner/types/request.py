"""Signing request type definitions."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..types.common import HexStr, RequestId

__all__ = ["RequestState", "SignRequest"]


class RequestState(str, Enum):
    """Signing request lifecycle."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class SignRequest:
    """A signing request waiting for user approval."""

    request_id: RequestId
    unsigned_tx: HexStr
    details: Optional[Dict[str, Any]]
    future: "asyncio.Future[str]" = field(repr=False)
    state: RequestState = RequestState.PENDING

    def to_display(self) -> Dict[str, Any]:
        """Data shown by the approval window."""
        return {
            "requestId": self.request_id,
            "unsignedTx": self.unsigned_tx,
            "details": self.details,
        }
