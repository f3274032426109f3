"""udstore: Versioned user data store with snapshot backups."""

from .errors import (
    BackupNotFoundError,
    DownloadSinkError,
    DownloadSinkUnconfiguredError,
    DriverError,
    FormatError,
    ItemFormatError,
    ParseError,
    RestoreError,
    StoreError,
    TypeValidationError,
)
from .hashing import ContentHash, ProvideKey, md5_hex, provide_key
from .kv.base import StoreDriver
from .records import BackupData, DataContainer, is_data_container
from .sinks import DownloadJsonFile, file_sink
from .store import store
from .versioned import ImportResult, UserDataStore

__all__ = [
    "BackupData",
    "BackupNotFoundError",
    "ContentHash",
    "DataContainer",
    "DownloadJsonFile",
    "DownloadSinkError",
    "DownloadSinkUnconfiguredError",
    "DriverError",
    "FormatError",
    "ImportResult",
    "ItemFormatError",
    "ParseError",
    "ProvideKey",
    "RestoreError",
    "StoreDriver",
    "StoreError",
    "TypeValidationError",
    "UserDataStore",
    "file_sink",
    "is_data_container",
    "md5_hex",
    "provide_key",
    "store",
]
