"""Disk-backed storage driver using diskcache."""

import os
from typing import Any

from .base import StoreDriver

ONE_GB = 1024 * 1024 * 1024


class Disk(StoreDriver):
    """Driver backed by diskcache (SQLite + mmap).

    Each namespace gets its own cache directory,
    ``<directory>/<name>_<store_name>``. Keys are iterated in the
    cache's sort order.
    """

    def __init__(
        self,
        name: str,
        store_name: str,
        directory: str,
        size_limit: int = ONE_GB,
    ) -> None:
        from diskcache import Cache as DiskCache

        super().__init__(name, store_name)
        self.directory = os.path.join(directory, f"{name}_{store_name}")
        self.store = DiskCache(self.directory, size_limit=size_limit)

    async def set_item(self, key: str, value: Any) -> Any:
        self.store[key] = value
        return value

    async def get_item(self, key: str) -> Any | None:
        return self.store.get(key)

    async def get_items(self) -> list[Any]:
        items = []
        for key in self.store.iterkeys():
            value = self.store.get(key)
            if value is not None:
                items.append(value)
        return items

    async def remove_item(self, key: str) -> None:
        self.store.delete(key, retry=False)

    async def clear(self) -> None:
        self.store.clear()

    def close(self) -> None:
        """Close the underlying cache connection."""
        self.store.close()
