"""JSON file storage."""

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Union

from ..exceptions import StorageError
from ..storage.base import BaseStorage

__all__ = ["JSONFileStorage"]


class JSONFileStorage(BaseStorage):
    """
    Storage backed by a single JSON document.

    Every write replaces the file atomically, so a crash mid-write leaves
    the previous contents intact.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected storage root in {self.path}")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def _update(self, items: Dict[str, Any]) -> None:
        data = self._read()
        data.update(items)
        self._write(data)

    def _delete(self, keys: Iterable[str]) -> None:
        data = self._read()
        for key in keys:
            data.pop(key, None)
        self._write(data)

    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        data = await asyncio.to_thread(self._read)
        return {k: data[k] for k in keys if k in data}

    async def set(self, items: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._update, dict(items))
        self._logger.debug(f"Wrote {sorted(items)} to {self.path}")

    async def remove(self, keys: Iterable[str]) -> None:
        await asyncio.to_thread(self._delete, list(keys))

    def __repr__(self) -> str:
        return f"JSONFileStorage(path={str(self.path)!r})"
