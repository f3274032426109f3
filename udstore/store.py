"""Store factory function."""

from typing import Any, Callable, Literal

from .hashing import ContentHash, ProvideKey
from .sinks import DownloadJsonFile
from .versioned import UserDataStore


def store(
    storage: Literal["memory", "disk", "json"] = "memory",
    *,
    name: str = "udstore",
    store_name: str = "default",
    path: str | None = None,
    confirm_type: Callable[[Any], bool] | None = None,
    provide_key: ProvideKey | None = None,
    content_hash: ContentHash | None = None,
    download: DownloadJsonFile | None = None,
) -> UserDataStore:
    """Create a UserDataStore with sensible defaults.

    Args:
        storage: ``"memory"`` (default), ``"disk"`` (diskcache) or
            ``"json"`` (one JSON file per namespace).
        name: Database name shared by the live and backup namespaces.
        store_name: Live namespace name.
        path: Required when ``storage`` is ``"disk"`` or ``"json"``.
            Directory the driver keeps its files in.
        confirm_type: Predicate every stored value must satisfy.
        provide_key: Key derivation (default: hash of the JSON value).
        content_hash: Snapshot hash (default: MD5 hex digest).
        download: Sink for ``export_json_file``.

    Returns:
        A ``UserDataStore`` instance.
    """
    # Pick driver
    driver_options: dict[str, Any] = {}
    if storage == "memory":
        from .kv.memory import Memory

        driver = Memory
    elif storage in ("disk", "json"):
        if path is None:
            raise ValueError(f"path is required when storage={storage!r}")
        if storage == "disk":
            from .kv.disk import Disk

            driver = Disk
        else:
            from .kv.json_file import JsonFile

            driver = JsonFile
        driver_options["directory"] = path
    else:
        raise ValueError(f"Unknown storage: {storage!r}")

    return UserDataStore(
        driver,
        name=name,
        store_name=store_name,
        driver_options=driver_options,
        download=download,
        confirm_type=confirm_type,
        provide_key=provide_key,
        content_hash=content_hash,
    )
