"""udstore error types.

Store operations return these as values instead of raising them, so
callers branch on ``isinstance(result, StoreError)``.
"""


class StoreError(Exception):
    """Base class for every error value a store operation can return."""


class TypeValidationError(StoreError):
    """A value failed the store's type predicate or is not JSON encodable.

    Attributes:
        key: The record key the value was to be stored under, or ""
            when no key could be derived from the value.
        reason: What was wrong with the value.
    """

    def __init__(self, key: str, reason: str = "type check failed") -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Value for key {key!r} failed type validation: {reason}")


class ParseError(StoreError):
    """Imported text is not valid JSON."""


class FormatError(StoreError):
    """Imported JSON is not an array of records."""


class ItemFormatError(StoreError):
    """An imported array element does not look like a record.

    Attributes:
        index: Position of the offending element in the array.
    """

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Element {index} is not a valid record")


class BackupNotFoundError(StoreError):
    """No snapshot is stored under the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No backup with key {key!r}")


class RestoreError(StoreError):
    """Importing a snapshot failed part way.

    The snapshot's JSON could not be applied cleanly. The backup key
    returned alongside this error undoes whatever was written.

    Attributes:
        cause: The error returned by the underlying import.
    """

    def __init__(self, backup_key: str, cause: StoreError) -> None:
        self.backup_key = backup_key
        self.cause = cause
        super().__init__(f"Backup restore failed for {backup_key!r}: {cause}")


class DownloadSinkUnconfiguredError(StoreError):
    """export_json_file was called on a store without a download sink."""


class DownloadSinkError(StoreError):
    """The download sink reported a failure."""


class DriverError(StoreError):
    """The storage driver raised during a write.

    The driver's exception is chained as ``__cause__``.
    """
