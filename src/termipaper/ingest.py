"""File ingestion: copy an external file into a category directory.

The stored copy is named after the paper identifier, keeping the source's
extension: ``paper.pdf`` ingested as ``smith2020`` becomes ``smith2020.pdf``;
``paper`` (no extension) becomes ``smith2020``. The source is never moved
or deleted.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from termipaper.errors import SourceFileNotFound, StorageIoError
from termipaper.models import Entry
from termipaper.paths import INDEX_FILENAME, INDEX_TMP_FILENAME
from termipaper.validate import is_plain_name

logger = logging.getLogger(__name__)

# The index and its temp file share the category directory with stored copies
RESERVED_NAMES = frozenset({INDEX_FILENAME, INDEX_TMP_FILENAME})


def stored_name(identifier: str, source: Path) -> str:
    """Name of the stored copy of *source* for *identifier*."""
    # Only the last suffix is kept: 'paper.tar.gz' -> '<id>.gz'
    if source.suffix:
        return f"{identifier}{source.suffix}"
    return identifier


def ingest_file(
    directory: Path,
    source: str | Path | None,
    identifier: str,
    entry: Entry,
) -> Path | None:
    """Copy *source* into *directory* and record the stored name on *entry*.

    No-op when *source* is None or empty: entries may exist without a file.

    Args:
        directory: The category directory (must exist).
        source: External file path, relative to the working directory or absolute.
        identifier: Paper identifier, used to name the stored copy.
        entry: Entry to annotate; ``entry.file`` is set only on success.

    Returns:
        Path of the stored copy, or None if nothing was ingested.

    Raises:
        SourceFileNotFound: If *source* does not exist or is not a file.
        StorageIoError: If the stored name is reserved or the copy fails.
    """
    if not source:
        return None

    src = Path(source).expanduser()
    if not src.is_file():
        raise SourceFileNotFound(str(source))

    name = stored_name(identifier, src)
    dest = directory / name
    if name in RESERVED_NAMES or not is_plain_name(name):
        raise StorageIoError(
            "copy file into",
            str(dest),
            "this name is reserved by the catalog; choose another identifier",
        )

    try:
        same = dest.exists() and src.resolve() == dest.resolve()
        if not same:
            shutil.copyfile(src, dest)
    except OSError as e:
        raise StorageIoError("copy file into", str(dest), str(e)) from e

    entry.file = dest.name
    logger.debug("Ingested %s as %s", src, dest)
    return dest
