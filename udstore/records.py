"""Record and snapshot types, plus ISO-8601 timestamp helpers."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class DataContainer:
    """A live record: a value with its key and capture time."""

    key: str
    stored_at: str
    data: Any

    def to_dict(self) -> dict[str, Any]:
        """Wire form, as stored by drivers and written by export_json."""
        return {"key": self.key, "storedAt": self.stored_at, "data": self.data}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "DataContainer":
        return cls(key=raw["key"], stored_at=raw["storedAt"], data=raw["data"])


@dataclass(frozen=True)
class BackupData:
    """A snapshot of the whole live record set.

    ``key`` is the content hash of ``json``, so identical snapshots
    share a key.
    """

    key: str
    stored_at: str
    json: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "storedAt": self.stored_at, "json": self.json}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "BackupData":
        return cls(key=raw["key"], stored_at=raw["storedAt"], json=raw["json"])


def is_data_container(obj: Any) -> bool:
    """True if obj has the wire shape of a record.

    ``key`` and ``storedAt`` must be strings and ``data`` must be
    present; a JSON null ``data`` counts as present.
    """
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("key"), str)
        and isinstance(obj.get("storedAt"), str)
        and "data" in obj
    )


def format_timestamp(dt: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class Clock:
    """Millisecond clock that never repeats or goes backwards.

    If the wall clock has not advanced past the last stamp, the next
    stamp is the last one plus a millisecond.
    """

    def __init__(self) -> None:
        self._last: datetime | None = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        current = current.replace(microsecond=current.microsecond // 1000 * 1000)
        if self._last is not None and current <= self._last:
            current = self._last + ONE_MS
        self._last = current
        return current

    def timestamp(self) -> str:
        return format_timestamp(self.now())
