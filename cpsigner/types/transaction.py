"""Transaction-related type definitions."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

__all__ = [
    "SigHashType",
    "TxInput",
    "TxOutput",
    "Transaction",
]


class SigHashType(IntEnum):
    """Signature hash types."""
    ALL = 0x01
    NONE = 0x02
    SINGLE = 0x03
    ANYONECANPAY = 0x80


@dataclass
class TxInput:
    """Transaction input.

    ``previous_hash`` is kept in wire byte order.
    """

    previous_hash: bytes
    previous_index: int
    script: bytes = b""
    sequence: int = 0xFFFFFFFF

    @property
    def txid(self) -> str:
        """Get previous transaction ID in display (big-endian) order."""
        return self.previous_hash[::-1].hex()

    @property
    def is_signed(self) -> bool:
        """Check if input carries a scriptSig."""
        return len(self.script) > 0


@dataclass
class TxOutput:
    """Transaction output."""

    value: int
    script: bytes = b""


@dataclass
class Transaction:
    """Legacy (pre-segwit) transaction being signed."""

    version: int = 1
    inputs: List[TxInput] = field(default_factory=list)
    outputs: List[TxOutput] = field(default_factory=list)
    locktime: int = 0

    @property
    def total_output_value(self) -> int:
        """Calculate total output value."""
        return sum(out.value for out in self.outputs)

    @property
    def is_fully_signed(self) -> bool:
        """Check if every input carries a scriptSig."""
        return all(inp.is_signed for inp in self.inputs)
