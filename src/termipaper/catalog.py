"""Catalog: the entry point collaborators use.

A catalog owns a root directory and an arena of Category nodes keyed by
relative path. The top-level category has the empty path ``()``. Entry
operations validate the identifier, then go to the top-level category;
sub-categories are listed in the index and loaded on demand by
:meth:`Catalog.category`, but are not routed to yet.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from termipaper.category import Category
from termipaper.errors import CategoryNotFound, StorageIoError
from termipaper.models import Entry
from termipaper.paths import index_path
from termipaper.validate import is_plain_name, validate_identifier

logger = logging.getLogger(__name__)

TOP = ()


class Catalog:
    """A paper catalog rooted at one directory."""

    def __init__(self, root: Path, top: Category | None = None):
        self.root = Path(root)
        top = top if top is not None else Category(self.root)
        self._categories: dict[tuple[str, ...], Category] = {TOP: top}

    @property
    def top(self) -> Category:
        return self._categories[TOP]

    @property
    def entries(self) -> dict[str, Entry]:
        return self.top.entries

    @property
    def index_file(self) -> Path:
        return index_path(self.root)

    def category(self, relative_path: tuple[str, ...] | list[str] = TOP) -> Category:
        """Return the category node at *relative_path*, loading it if needed.

        Raises:
            CategoryNotFound: If a path component is not a listed sub-category.
        """
        path = tuple(relative_path)
        node = self._categories.get(path)
        if node is not None:
            return node

        parent = self.category(path[:-1])
        name = path[-1]
        if not is_plain_name(name) or name not in parent.sub_categories:
            raise CategoryNotFound(path)

        node = Category.load(parent.directory / name, relative_path=path)
        self._categories[path] = node
        return node

    # ------------------------------------------------------------------
    # Entry operations (always the top-level category for now)
    # ------------------------------------------------------------------

    def add(self, identifier: str, entry: Entry, force: bool = False) -> Entry:
        validate_identifier(identifier)
        return self.top.add(identifier, entry, force=force)

    def edit(self, identifier: str, entry: Entry) -> Entry:
        validate_identifier(identifier)
        return self.top.edit(identifier, entry)

    def remove(self, identifier: str) -> Entry:
        validate_identifier(identifier)
        return self.top.remove(identifier)

    def get(self, identifier: str) -> Entry:
        return self.top.get(identifier)

    def file_path(self, identifier: str) -> Path | None:
        return self.top.file_path(identifier)

    def info(self) -> dict[str, Any]:
        """Summary of the top-level category."""
        entries = self.top.entries
        return {
            "root": str(self.root),
            "index_file": str(self.index_file),
            "index_exists": self.index_file.exists(),
            "papers": len(entries),
            "files": sum(1 for e in entries.values() if e.file),
            "sub_categories": list(self.top.sub_categories),
        }


def open_catalog(root: Path | str) -> Catalog:
    """Load an existing catalog directory without creating anything.

    Raises:
        IndexLoadError: If the index exists but cannot be read or parsed.
    """
    root = Path(root).expanduser()
    return Catalog(root, Category.load(root))


def open_or_create(root: Path | str) -> Catalog:
    """Open the catalog at *root*, creating the directory if it is missing.

    The index file is not written until the first mutation (or :func:`init`).

    Raises:
        StorageIoError: If the directory cannot be created.
        IndexLoadError: If the index exists but cannot be read or parsed.
    """
    root = Path(root).expanduser()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageIoError("create directory", str(root), str(e)) from e
    return open_catalog(root)


def init(root: Path | str) -> Catalog:
    """Open or create the catalog at *root* and make sure its index file exists."""
    catalog = open_or_create(root)
    if not catalog.index_file.exists():
        catalog.top.save()
        logger.info("Initialized catalog at %s", catalog.root)
    return catalog
