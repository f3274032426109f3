"""JSON-file storage driver."""

import copy
import json
import os
import tempfile
from typing import Any

from .base import StoreDriver


class JsonFile(StoreDriver):
    """Driver persisting one JSON object per namespace.

    The file ``<directory>/<name>_<store_name>.json`` maps keys to
    values. It is loaded once on construction and rewritten in full
    after every mutation, replacing the old file atomically.
    """

    def __init__(self, name: str, store_name: str, directory: str) -> None:
        super().__init__(name, store_name)
        os.makedirs(directory, exist_ok=True)
        self.path = os.path.join(directory, f"{name}_{store_name}.json")
        self._data: dict[str, Any] = {}
        if os.path.exists(self.path):
            with open(self.path, encoding="utf-8") as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError(f"Expected a JSON object in {self.path}")
            self._data = loaded

    def _flush(self) -> None:
        fd, tmp = tempfile.mkstemp(
            dir=os.path.dirname(self.path), suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    async def set_item(self, key: str, value: Any) -> Any:
        # Round-trip through JSON so unsupported values fail before the write
        self._data[key] = json.loads(json.dumps(value))
        self._flush()
        return value

    async def get_item(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def get_items(self) -> list[Any]:
        return [copy.deepcopy(v) for v in self._data.values()]

    async def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    async def clear(self) -> None:
        self._data = {}
        self._flush()
