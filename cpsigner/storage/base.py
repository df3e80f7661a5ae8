"""Base storage interface for persisted wallet state."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable
import logging

__all__ = ["BaseStorage"]


class BaseStorage(ABC):
    """
    Abstract key-value store holding the persisted wallet subset.

    Values must be JSON-compatible. Implementations raise
    :class:`~cpsigner.exceptions.StorageError` on failure.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        """
        Read ``keys``.

        Returns:
            Mapping containing only the keys that are present
        """
        raise NotImplementedError

    @abstractmethod
    async def set(self, items: Dict[str, Any]) -> None:
        """Write all ``items`` at once."""
        raise NotImplementedError

    @abstractmethod
    async def remove(self, keys: Iterable[str]) -> None:
        """Delete ``keys``; missing keys are ignored."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
