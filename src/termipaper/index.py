"""Load and save a category's index.termipaper.yml.

The index is a full snapshot of the category: every save rewrites the whole
file. Writes are atomic (write to .tmp, rename) so a crash mid-write leaves
either the old or the new index, never a truncated one.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from termipaper.errors import IndexLoadError, IndexParseError, StorageIoError
from termipaper.models import Index
from termipaper.paths import INDEX_TMP_FILENAME, index_path

logger = logging.getLogger(__name__)


def load_index(directory: Path) -> Index:
    """Load the index of a category directory.

    Returns an empty Index if the file doesn't exist (a fresh directory).

    Raises:
        IndexLoadError: If the file exists but cannot be read.
        IndexParseError: If the file is not valid YAML or has the wrong shape.
    """
    p = index_path(directory)
    if not p.exists():
        logger.debug("No index at %s, starting empty", p)
        return Index()

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IndexLoadError(str(p), str(e)) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise IndexParseError(str(p), str(e)) from e

    try:
        index = Index.from_dict(data)
    except ValueError as e:
        raise IndexParseError(str(p), str(e)) from e

    logger.debug("Loaded %d papers from %s", len(index.papers), p)
    return index


def dump_index(index: Index) -> str:
    """Render an Index as YAML text."""
    return yaml.safe_dump(
        index.to_dict(),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


def save_index(directory: Path, index: Index) -> Path:
    """Write the index atomically, replacing any previous one.

    Returns:
        The index file path.

    Raises:
        StorageIoError: If the temp file cannot be written or renamed.
    """
    p = index_path(directory)
    tmp = p.with_name(INDEX_TMP_FILENAME)
    try:
        tmp.write_text(dump_index(index), encoding="utf-8")
        tmp.replace(p)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise StorageIoError("write index", str(p), str(e)) from e

    logger.debug("Saved %d papers to %s", len(index.papers), p)
    return p
