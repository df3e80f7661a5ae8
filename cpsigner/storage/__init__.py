"""Storage implementations for persisted wallet state."""

from ..storage.base import BaseStorage
from ..storage.file import JSONFileStorage
from ..storage.memory import MemoryStorage

__all__ = [
    "BaseStorage",
    "JSONFileStorage",
    "MemoryStorage",
]
