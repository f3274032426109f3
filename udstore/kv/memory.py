"""In-memory storage driver."""

import copy
from typing import Any

from .base import StoreDriver


class Memory(StoreDriver):
    """A memory-backed driver.

    Values are deep-copied on the way in and out, so callers never
    share mutable state with the stored copy. Iteration follows
    insertion order.
    """

    def __init__(self, name: str = "", store_name: str = "") -> None:
        super().__init__(name, store_name)
        self.memory: dict[str, Any] = {}

    async def set_item(self, key: str, value: Any) -> Any:
        self.memory[key] = copy.deepcopy(value)
        return value

    async def get_item(self, key: str) -> Any | None:
        value = self.memory.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def get_items(self) -> list[Any]:
        return [copy.deepcopy(v) for v in self.memory.values()]

    async def remove_item(self, key: str) -> None:
        self.memory.pop(key, None)

    async def clear(self) -> None:
        self.memory.clear()
