"""Storage drivers."""

from .base import StoreDriver
from .disk import Disk
from .json_file import JsonFile
from .memory import Memory

__all__ = ["Disk", "JsonFile", "Memory", "StoreDriver"]
