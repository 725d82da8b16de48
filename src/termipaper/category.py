"""Category: one directory of the catalog, its entries and its index.

Mutations follow one order: check, ingest the file, persist the new index
snapshot, then commit the new entry map in memory. A failed save therefore
leaves the in-memory map as it was. Files already copied by a failed
operation stay in the directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from termipaper.errors import DuplicateIdentifier, EntryNotFound, StorageIoError
from termipaper.index import load_index, save_index
from termipaper.ingest import ingest_file
from termipaper.models import Entry, Index

logger = logging.getLogger(__name__)


class Category:
    """A node of the catalog tree, backed by one directory."""

    def __init__(
        self,
        directory: Path,
        relative_path: tuple[str, ...] = (),
        entries: dict[str, Entry] | None = None,
        sub_categories: list[str] | None = None,
    ):
        self.directory = Path(directory)
        self.relative_path = tuple(relative_path)
        self.entries: dict[str, Entry] = dict(entries or {})
        self.sub_categories: list[str] = list(sub_categories or [])

    @classmethod
    def load(cls, directory: Path, relative_path: tuple[str, ...] = ()) -> Category:
        """Reconstruct a category from its index (empty if there is none)."""
        index = load_index(Path(directory))
        return cls(
            directory,
            relative_path=relative_path,
            entries=index.papers,
            sub_categories=index.sub_categories,
        )

    def __repr__(self) -> str:
        return (
            f"Category(directory={str(self.directory)!r}, "
            f"relative_path={self.relative_path!r}, entries={len(self.entries)})"
        )

    def __contains__(self, identifier: str) -> bool:
        return identifier in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, identifier: str) -> Entry:
        try:
            return self.entries[identifier]
        except KeyError:
            raise EntryNotFound(identifier) from None

    def file_path(self, identifier: str) -> Path | None:
        """Full path of an entry's stored file, or None if it has none."""
        entry = self.get(identifier)
        if not entry.file:
            return None
        return self.directory / entry.file

    def snapshot(self) -> Index:
        return Index(papers=dict(self.entries), sub_categories=list(self.sub_categories))

    def save(self) -> Path:
        """Persist the current state to the index file."""
        return save_index(self.directory, self.snapshot())

    def _commit(self, papers: dict[str, Entry]) -> None:
        save_index(self.directory, Index(papers=papers, sub_categories=list(self.sub_categories)))
        self.entries = papers

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, identifier: str, entry: Entry, force: bool = False) -> Entry:
        """Add a paper entry, ingesting ``entry.file`` if it is set.

        With *force*, an existing entry is overwritten. Its stored file is
        kept on disk unless the new copy has the same name.

        Returns:
            The stored entry.

        Raises:
            DuplicateIdentifier: If the identifier exists and *force* is False.
            SourceFileNotFound: If ``entry.file`` does not exist.
            StorageIoError: If the copy or the index write fails.
        """
        previous = self.entries.get(identifier)
        if previous is not None and not force:
            raise DuplicateIdentifier(identifier)

        stored = entry.copy()
        source, stored.file = stored.file, None
        ingest_file(self.directory, source, identifier, stored)

        if previous is not None and previous.file and previous.file != stored.file:
            logger.warning(
                "Overwrote '%s'; previous file %s left in %s",
                identifier,
                previous.file,
                self.directory,
            )

        papers = dict(self.entries)
        papers[identifier] = stored
        self._commit(papers)
        logger.info("Added '%s' to %s", identifier, self.directory)
        return stored

    def edit(self, identifier: str, partial: Entry) -> Entry:
        """Merge *partial* into an existing entry.

        ``partial.file``, when set, is ingested and replaces the stored file
        reference. Fields left as None keep their current values.

        Raises:
            EntryNotFound: If the identifier is not in this category.
            SourceFileNotFound: If ``partial.file`` does not exist.
            StorageIoError: If the copy or the index write fails.
        """
        existing = self.get(identifier)

        updated = existing.copy()
        ingest_file(self.directory, partial.file, identifier, updated)
        updated.update_metadata(partial)

        if existing.file and existing.file != updated.file:
            logger.warning(
                "Replaced file of '%s'; previous file %s left in %s",
                identifier,
                existing.file,
                self.directory,
            )

        papers = dict(self.entries)
        papers[identifier] = updated
        self._commit(papers)
        logger.info("Edited '%s' in %s", identifier, self.directory)
        return updated

    def remove(self, identifier: str) -> Entry:
        """Remove an entry and delete its stored file.

        The entry is removed from the index and from memory before the file
        is deleted; a failed deletion is reported but not rolled back.

        Returns:
            The removed entry.

        Raises:
            EntryNotFound: If the identifier is not in this category.
            StorageIoError: If the index write or the file deletion fails.
        """
        entry = self.get(identifier)

        papers = {k: v for k, v in self.entries.items() if k != identifier}
        self._commit(papers)
        logger.info("Removed '%s' from %s", identifier, self.directory)

        if entry.file:
            path = self.directory / entry.file
            try:
                path.unlink()
            except OSError as e:
                raise StorageIoError("delete", str(path), str(e)) from e
            logger.debug("Deleted %s", path)
        return entry
