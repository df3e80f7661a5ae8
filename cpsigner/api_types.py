"""Command and response types for the bridge-facing command surface."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type, Union

from .exceptions import ValidationError

__all__ = [
    "GetStatus",
    "CreateWallet",
    "ImportWallet",
    "Unlock",
    "Lock",
    "SwitchAccount",
    "GetAccounts",
    "RenameAccount",
    "DeleteAccount",
    "SignTransaction",
    "ApproveSigning",
    "RejectSigning",
    "GetSignRequest",
    "Command",
    "COMMAND_TYPES",
    "MESSAGE_TYPES",
    "Response",
    "parse_command",
]


@dataclass(frozen=True)
class GetStatus:
    """Wallet status."""

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "GetStatus":
        return cls()


@dataclass(frozen=True)
class CreateWallet:
    """Create a new random account."""
    password: str = field(repr=False)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "CreateWallet":
        return cls(password=data.get("password"))


@dataclass(frozen=True)
class ImportWallet:
    """Import an account from a WIF key."""
    address: str
    wif_secret: str = field(repr=False)
    password: str = field(repr=False)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ImportWallet":
        return cls(
            address=data.get("address"),
            wif_secret=data.get("wifSecret", data.get("privateKey")),
            password=data.get("password"),
        )


@dataclass(frozen=True)
class Unlock:
    """Unlock the current account."""
    password: str = field(repr=False)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "Unlock":
        return cls(password=data.get("password"))


@dataclass(frozen=True)
class Lock:
    """Lock the wallet."""

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "Lock":
        return cls()


@dataclass(frozen=True)
class SwitchAccount:
    """Select another account, unlocking it if a password is given."""
    index: int
    password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "SwitchAccount":
        return cls(index=data.get("index"), password=data.get("password"))


@dataclass(frozen=True)
class GetAccounts:
    """List accounts."""

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "GetAccounts":
        return cls()


@dataclass(frozen=True)
class RenameAccount:
    """Rename an account."""
    index: int
    new_name: str

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "RenameAccount":
        return cls(index=data.get("index"), new_name=data.get("newName"))


@dataclass(frozen=True)
class DeleteAccount:
    """Delete an account."""
    index: int

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "DeleteAccount":
        return cls(index=data.get("index"))


@dataclass(frozen=True)
class SignTransaction:
    """Ask the user to sign a transaction. Resolves after approve/reject."""
    unsigned_tx: str
    request_id: str
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "SignTransaction":
        return cls(
            unsigned_tx=data.get("unsignedTx"),
            request_id=data.get("requestId"),
            details=data.get("details"),
        )


@dataclass(frozen=True)
class ApproveSigning:
    """User approved a pending request."""
    request_id: str

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ApproveSigning":
        return cls(request_id=data.get("requestId"))


@dataclass(frozen=True)
class RejectSigning:
    """User rejected a pending request."""
    request_id: str

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "RejectSigning":
        return cls(request_id=data.get("requestId"))


@dataclass(frozen=True)
class GetSignRequest:
    """Fetch a pending request for display."""
    request_id: str

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "GetSignRequest":
        return cls(request_id=data.get("requestId"))


Command = Union[
    GetStatus,
    CreateWallet,
    ImportWallet,
    Unlock,
    Lock,
    SwitchAccount,
    GetAccounts,
    RenameAccount,
    DeleteAccount,
    SignTransaction,
    ApproveSigning,
    RejectSigning,
    GetSignRequest,
]

COMMAND_TYPES = Command.__args__

MESSAGE_TYPES: Dict[str, Type] = {
    "GET_STATUS": GetStatus,
    "CREATE_WALLET": CreateWallet,
    "IMPORT_WALLET": ImportWallet,
    "UNLOCK": Unlock,
    "LOCK": Lock,
    "SWITCH_ACCOUNT": SwitchAccount,
    "GET_ACCOUNTS": GetAccounts,
    "RENAME_ACCOUNT": RenameAccount,
    "DELETE_ACCOUNT": DeleteAccount,
    "SIGN_TRANSACTION": SignTransaction,
    "APPROVE_SIGNING": ApproveSigning,
    "REJECT_SIGNING": RejectSigning,
    "GET_SIGN_REQUEST": GetSignRequest,
    # Older message names
    "GET_WALLET_STATUS": GetStatus,
    "UNLOCK_WALLET": Unlock,
    "LOCK_WALLET": Lock,
}


def parse_command(message: Dict[str, Any]) -> Command:
    """
    Build a command from a bridge message ``{"type": ..., "data": {...}}``.

    Raises:
        ValidationError: If the type is unknown or the payload is not an object
    """
    if not isinstance(message, dict):
        raise ValidationError("Message must be an object")

    command_type = MESSAGE_TYPES.get(message.get("type"))
    if command_type is None:
        raise ValidationError("Unknown message type")

    data = message.get("data") or {}
    if not isinstance(data, dict):
        raise ValidationError("Message data must be an object")

    return command_type.from_data(data)


@dataclass
class Response:
    """Uniform reply: ``{success, data}`` or ``{success: false, error}``."""
    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "Response":
        return cls(success=True, data={} if data is None else data)

    @classmethod
    def fail(cls, error: str) -> "Response":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
