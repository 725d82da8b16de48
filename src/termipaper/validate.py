"""Identifier validation.

Identifiers become file names inside the category directory, so anything
that could split the name or escape the directory is rejected.
"""

from __future__ import annotations

from pathlib import PurePath

from termipaper.errors import InvalidIdentifier


def validate_identifier(identifier: str) -> str:
    """Validate a paper identifier for use as a stored file name.

    Args:
        identifier: The candidate identifier.

    Returns:
        The identifier (unchanged) if valid.

    Raises:
        InvalidIdentifier: If empty, or containing whitespace, '/' or '\\'.
    """
    if not identifier:
        raise InvalidIdentifier(identifier, "identifier must not be empty")

    if any(ch.isspace() for ch in identifier):
        raise InvalidIdentifier(identifier, "contains whitespace")

    if "/" in identifier or "\\" in identifier:
        raise InvalidIdentifier(identifier, "contains path separator")

    return identifier


def is_plain_name(name: str) -> bool:
    """True if *name* is a single path component inside its directory.

    Rejects empty names, '.', '..', absolute paths and anything with a
    separator. Used for names read back from an index (stored files,
    sub-categories) and for the stored name chosen at ingestion.
    """
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\0" in name:
        return False
    return not PurePath(name).is_absolute()
