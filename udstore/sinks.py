"""Export sinks for export_json_file."""

import logging
import os
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

DownloadJsonFile = Callable[[str, str], Awaitable[Exception | None]]
"""Download sink: (file_name, text) -> None, or an exception on failure."""


def file_sink(directory: str) -> DownloadJsonFile:
    """A sink that writes each export into ``directory``.

    The directory is created on first use. File names containing a
    path separator are rejected.
    """

    async def write(file_name: str, text: str) -> Exception | None:
        if os.path.basename(file_name) != file_name or file_name in ("", ".", ".."):
            return ValueError(f"Invalid export file name: {file_name!r}")
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, file_name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.debug("Exported %d bytes to %s", len(text), path)
        return None

    return write
