"""In-process storage."""

import copy
from typing import Any, Dict, Iterable, Optional

from ..storage.base import BaseStorage

__all__ = ["MemoryStorage"]


class MemoryStorage(BaseStorage):
    """Dictionary-backed storage. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        super().__init__()
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        return {k: copy.deepcopy(self._data[k]) for k in keys if k in self._data}

    async def set(self, items: Dict[str, Any]) -> None:
        self._data.update(copy.deepcopy(items))

    async def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    def snapshot(self) -> Dict[str, Any]:
        """Copy of everything stored."""
        return copy.deepcopy(self._data)
