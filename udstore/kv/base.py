"""Abstract storage driver interface."""

from abc import ABC, abstractmethod
from typing import Any


class StoreDriver(ABC):
    """Asynchronous key-value driver holding JSON-compatible values.

    Drivers are constructed with a ``name`` and a ``store_name``; together
    they identify one namespace. Serialization of records is handled at
    higher layers (e.g., UserDataStore).
    """

    def __init__(self, name: str, store_name: str) -> None:
        self.name = name
        self.store_name = store_name

    @abstractmethod
    async def set_item(self, key: str, value: Any) -> Any:
        """Store value under key and return the stored value."""

    @abstractmethod
    async def get_item(self, key: str) -> Any | None:
        """Get the value for key, or None if not found."""

    @abstractmethod
    async def get_items(self) -> list[Any]:
        """All values in the namespace, in driver order."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key if present."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove all items from the namespace."""

    def close(self) -> None:
        """Release any resources held by the driver."""
