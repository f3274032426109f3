"""Versioned user data: typed records over a driver, with snapshots."""

import json
import logging
from typing import Any, Callable

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
from .hashing import ContentHash, ProvideKey, md5_hex
from .hashing import provide_key as default_provide_key
from .kv.base import StoreDriver
from .records import BackupData, Clock, DataContainer, is_data_container, parse_timestamp
from .sinks import DownloadJsonFile

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = "_bak"

ImportResult = tuple[str, StoreError | None]
"""(backup_key, error): the key restores the state before the import."""

SetItemHook = Callable[[str, DataContainer | StoreError], None]
GetItemHook = Callable[[str, DataContainer | None], None]
GetItemsHook = Callable[[list[DataContainer]], None]
KeyHook = Callable[[str], None]
ImportHook = Callable[[ImportResult], None]


class UserDataStore:
    """Typed records in a live namespace, with snapshot backups.

    Two driver instances are built from ``driver``: one for live
    records (``store_name``) and one for snapshots
    (``store_name + "_bak"``). Every ``import_json`` first snapshots
    the live set, so any import can be undone with ``restore``.

    Failures are returned as ``StoreError`` values, not raised.

    Args:
        driver: A ``StoreDriver`` subclass, or any callable taking
            ``name``, ``store_name`` and the ``driver_options`` keywords.
        name: Database name passed to both drivers.
        store_name: Live namespace name; also prefixes export files.
        driver_options: Extra keyword arguments for the driver.
        download: Sink used by ``export_json_file``.
        confirm_type: Predicate that every stored value must satisfy.
        provide_key: Key derivation used when ``set_item`` gets no key.
        content_hash: Hash of snapshot JSON, used as the backup key.
    """

    def __init__(
        self,
        driver: Callable[..., StoreDriver],
        *,
        name: str,
        store_name: str,
        driver_options: dict[str, Any] | None = None,
        download: DownloadJsonFile | None = None,
        confirm_type: Callable[[Any], bool] | None = None,
        provide_key: ProvideKey | None = None,
        content_hash: ContentHash | None = None,
    ) -> None:
        options = driver_options or {}
        self._name = name
        self._store_name = store_name
        self._store = driver(name=name, store_name=store_name, **options)
        self._backup_store = driver(
            name=name, store_name=store_name + BACKUP_SUFFIX, **options
        )
        self._download = download
        self._confirm_type = confirm_type
        self._provide_key = provide_key or default_provide_key
        self._content_hash = content_hash or md5_hex
        self._clock = Clock()

        self._on_set_item: SetItemHook | None = None
        self._on_get_item: GetItemHook | None = None
        self._on_get_items: GetItemsHook | None = None
        self._on_remove_item: KeyHook | None = None
        self._on_clear: Callable[[], None] | None = None
        self._on_import_json: ImportHook | None = None
        self._on_export_json: Callable[[str], None] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def store_name(self) -> str:
        return self._store_name

    def close(self) -> None:
        """Close the live and backup drivers."""
        self._store.close()
        self._backup_store.close()

    async def __aenter__(self) -> "UserDataStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # -- Hooks --

    @property
    def on_set_item(self) -> SetItemHook | None:
        """Called with ``(key, result)`` after every ``set_item``."""
        return self._on_set_item

    @on_set_item.setter
    def on_set_item(self, handler: SetItemHook | None) -> None:
        self._on_set_item = handler

    @property
    def on_get_item(self) -> GetItemHook | None:
        """Called with ``(key, record_or_None)`` after every ``get_item``."""
        return self._on_get_item

    @on_get_item.setter
    def on_get_item(self, handler: GetItemHook | None) -> None:
        self._on_get_item = handler

    @property
    def on_get_items(self) -> GetItemsHook | None:
        """Called with the record list after every ``get_items``."""
        return self._on_get_items

    @on_get_items.setter
    def on_get_items(self, handler: GetItemsHook | None) -> None:
        self._on_get_items = handler

    @property
    def on_remove_item(self) -> KeyHook | None:
        """Called with the key after every ``remove_item``."""
        return self._on_remove_item

    @on_remove_item.setter
    def on_remove_item(self, handler: KeyHook | None) -> None:
        self._on_remove_item = handler

    @property
    def on_clear(self) -> Callable[[], None] | None:
        """Called after every ``clear``, including the one inside imports."""
        return self._on_clear

    @on_clear.setter
    def on_clear(self, handler: Callable[[], None] | None) -> None:
        self._on_clear = handler

    @property
    def on_import_json(self) -> ImportHook | None:
        """Called once with the ``(backup_key, error)`` of each import."""
        return self._on_import_json

    @on_import_json.setter
    def on_import_json(self, handler: ImportHook | None) -> None:
        self._on_import_json = handler

    @property
    def on_export_json(self) -> Callable[[str], None] | None:
        """Called with the JSON text after every ``export_json``."""
        return self._on_export_json

    @on_export_json.setter
    def on_export_json(self, handler: Callable[[str], None] | None) -> None:
        self._on_export_json = handler

    # -- Record access --

    async def set_item(
        self, value: Any, key: str | None = None
    ) -> DataContainer | StoreError:
        """Store value, stamped with the current time.

        Args:
            value: The value to store.
            key: Record key. Derived with ``provide_key`` when omitted.

        Returns:
            The stored record, or ``TypeValidationError`` /
            ``DriverError``. Values rejected by ``confirm_type`` are
            rejected before the key is derived.
        """
        result: DataContainer | StoreError
        real_key = key if key is not None else ""
        if self._confirm_type is not None and not self._confirm_type(value):
            logger.warning("Rejected value for key %r: type check failed", real_key)
            result = TypeValidationError(real_key)
        else:
            error = None
            if key is None:
                real_key, error = self._derive_key(value)
            if error is not None:
                result = error
            else:
                record = DataContainer(
                    key=real_key, stored_at=self._clock.timestamp(), data=value
                )
                result = await self._set_item_core(record)
        if self._on_set_item is not None:
            self._on_set_item(real_key, result)
        return result

    def _derive_key(self, value: Any) -> tuple[str, StoreError | None]:
        """Run provide_key, turning encoding failures into an error value."""
        try:
            return self._provide_key(value), None
        except (TypeError, ValueError) as e:
            logger.warning("Cannot derive a key for value: %s", e)
            error = TypeValidationError("", f"no key can be derived ({e})")
            error.__cause__ = e
            return "", error

    async def _set_item_core(
        self, record: DataContainer
    ) -> DataContainer | StoreError:
        """Type-check and write a record without touching its timestamp.

        Records must encode as JSON so that later exports (and the
        backup taken by every import) cannot fail on them.
        """
        if self._confirm_type is not None and not self._confirm_type(record.data):
            logger.warning("Rejected value for key %r: type check failed", record.key)
            return TypeValidationError(record.key)
        try:
            json.dumps(record.to_dict())
        except (TypeError, ValueError) as e:
            logger.warning("Rejected value for key %r: %s", record.key, e)
            error = TypeValidationError(record.key, f"not JSON encodable ({e})")
            error.__cause__ = e
            return error
        try:
            await self._store.set_item(record.key, record.to_dict())
        except Exception as e:
            error = DriverError(f"Failed to store {record.key!r}: {e}")
            error.__cause__ = e
            return error
        return record

    async def get_item(self, key: str) -> DataContainer | None:
        raw = await self._store.get_item(key)
        result = DataContainer.from_dict(raw) if raw is not None else None
        if self._on_get_item is not None:
            self._on_get_item(key, result)
        return result

    async def get_items(self) -> list[DataContainer]:
        """All live records, in the driver's order."""
        result = [DataContainer.from_dict(raw) for raw in await self._store.get_items()]
        if self._on_get_items is not None:
            self._on_get_items(result)
        return result

    async def remove_item(self, key: str) -> None:
        await self._store.remove_item(key)
        if self._on_remove_item is not None:
            self._on_remove_item(key)

    async def clear(self) -> None:
        await self._store.clear()
        if self._on_clear is not None:
            self._on_clear()

    # -- Snapshots --

    async def backup(self, json_text: str) -> str:
        """Store a snapshot of json_text and return its content key.

        Backing up identical content again overwrites the earlier
        snapshot (and its timestamp) under the same key.
        """
        backup_key = self._content_hash(json_text)
        snapshot = BackupData(
            key=backup_key, stored_at=self._clock.timestamp(), json=json_text
        )
        await self._backup_store.set_item(backup_key, snapshot.to_dict())
        logger.debug("Stored backup %s (%d bytes)", backup_key, len(json_text))
        return backup_key

    async def restore(self, backup_key: str) -> ImportResult:
        """Replace the live set with the snapshot stored under backup_key.

        Returns:
            ``(new_backup_key, error)``. The new key holds the live set
            as it was before the restore. When the snapshot is missing
            nothing changes and the key is ``""``.
        """
        snapshot = await self.get_backup(backup_key)
        if snapshot is None:
            logger.warning("Restore failed: no backup %r", backup_key)
            return "", BackupNotFoundError(backup_key)

        new_key, error = await self.import_json(snapshot.json)
        if error is not None:
            return new_key, RestoreError(backup_key, error)
        return new_key, None

    async def get_all_backup(self) -> list[BackupData]:
        return [BackupData.from_dict(raw) for raw in await self._backup_store.get_items()]

    async def get_backup(self, key: str) -> BackupData | None:
        raw = await self._backup_store.get_item(key)
        return BackupData.from_dict(raw) if raw is not None else None

    async def get_latest_backup_key(self) -> str:
        """Key of the most recently stored snapshot, or ``""`` if none.

        Snapshots with equal timestamps keep driver order; the first
        one wins.
        """
        backups = await self.get_all_backup()
        if not backups:
            return ""
        backups.sort(key=lambda b: parse_timestamp(b.stored_at), reverse=True)
        return backups[0].key

    # -- Import / export --

    async def export_json(self) -> str:
        """Serialize the live records as a JSON array."""
        records = [record.to_dict() for record in await self.get_items()]
        json_text = json.dumps(records, ensure_ascii=False, separators=(",", ":"))
        if self._on_export_json is not None:
            self._on_export_json(json_text)
        return json_text

    async def export_json_file(self, file_name: str | None = None) -> str | StoreError:
        """Hand the exported JSON to the download sink.

        Args:
            file_name: Defaults to ``<store_name>_<content hash>.json``.

        Returns:
            The file name used, or a ``StoreError``.
        """
        if self._download is None:
            return DownloadSinkUnconfiguredError("No download sink is configured")

        json_text = await self.export_json()
        if file_name is None:
            file_name = f"{self._store_name}_{self._content_hash(json_text)}.json"
        try:
            result = await self._download(file_name, json_text)
        except Exception as e:
            result = e
        if isinstance(result, Exception):
            logger.warning("Export of %s failed: %s", file_name, result)
            error = DownloadSinkError(f"Failed to export {file_name}: {result}")
            error.__cause__ = result
            return error
        return file_name

    async def import_json(self, json_text: str, *, atomic: bool = False) -> ImportResult:
        """Overwrite the live set with the records in json_text.

        The live set is backed up before anything else happens, so the
        returned key always restores the pre-import state::

            backup_key, error = await uds.import_json(text)
            if error is not None:
                await uds.restore(backup_key)

        Elements are written in order and the first bad one stops the
        import. Elements written before it stay in the store unless
        ``atomic`` is set, in which case everything is validated first
        and a failed import leaves the live set untouched.

        Args:
            json_text: JSON array of records, as made by ``export_json``.
            atomic: Validate the whole payload before clearing.

        Returns:
            ``(backup_key, error)``; error is None on success.
        """
        backup_key = await self.backup(await self.export_json())

        if atomic:
            result = await self._import_atomic(backup_key, json_text)
        else:
            await self.clear()
            result = await self._import_partial(backup_key, json_text)

        if result[1] is not None:
            logger.warning("Import failed (backup %s): %s", backup_key, result[1])
        else:
            logger.debug("Import succeeded (backup %s)", backup_key)
        if self._on_import_json is not None:
            self._on_import_json(result)
        return result

    async def _import_partial(self, backup_key: str, json_text: str) -> ImportResult:
        parsed = _parse_records(json_text)
        if isinstance(parsed, StoreError):
            return backup_key, parsed

        for index, item in enumerate(parsed):
            if not is_data_container(item):
                return backup_key, ItemFormatError(index)
            result = await self._set_item_core(DataContainer.from_dict(item))
            if isinstance(result, StoreError):
                return backup_key, result
        return backup_key, None

    async def _import_atomic(self, backup_key: str, json_text: str) -> ImportResult:
        parsed = _parse_records(json_text)
        if isinstance(parsed, StoreError):
            return backup_key, parsed

        records: list[DataContainer] = []
        for index, item in enumerate(parsed):
            if not is_data_container(item):
                return backup_key, ItemFormatError(index)
            record = DataContainer.from_dict(item)
            if self._confirm_type is not None and not self._confirm_type(record.data):
                return backup_key, TypeValidationError(record.key)
            records.append(record)

        await self.clear()
        for record in records:
            result = await self._set_item_core(record)
            if isinstance(result, StoreError):
                return backup_key, result
        return backup_key, None


def _parse_records(json_text: str) -> list[Any] | StoreError:
    """Parse an import payload into a list, or return the failure."""
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        error = ParseError(f"Invalid JSON: {e}")
        error.__cause__ = e
        return error
    if not isinstance(parsed, list):
        return FormatError(
            f"Expected a JSON array of records, got {type(parsed).__name__}"
        )
    return parsed
