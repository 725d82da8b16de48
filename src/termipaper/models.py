"""Entry and Index data types.

An Entry is the metadata record for one paper. Its ``file`` field has two
roles: on an incoming payload it is the external path to ingest; on a stored
entry it is the base name of the copy inside the category directory.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, fields
from typing import Any

from termipaper.validate import is_plain_name

# Fields merged by update_metadata. ``file`` only changes through ingestion.
METADATA_FIELDS = ("title", "authors", "year", "doi")


@dataclass
class Entry:
    """Paper metadata plus an optional stored-file name."""

    title: str | None = None
    authors: list[str] | None = None
    year: int | None = None
    doi: str | None = None
    file: str | None = None

    def update_metadata(self, other: Entry) -> None:
        """Merge present fields of *other* into this entry (mutates self).

        A field set on *other* overwrites; a field left as None preserves
        the current value.
        """
        for name in METADATA_FIELDS:
            value = getattr(other, name)
            if value is not None:
                setattr(self, name, deepcopy(value))

    def copy(self) -> Entry:
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting unset fields."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.name] = list(value) if f.name == "authors" else value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Entry:
        """Deserialize from a mapping. Unknown keys are ignored.

        Raises:
            ValueError: If a known field has the wrong type.
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"entry must be a mapping, got {type(data).__name__}")

        for name in ("title", "doi", "file"):
            value = data.get(name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"'{name}' must be a string, got {type(value).__name__}")

        stored = data.get("file")
        if stored is not None and not is_plain_name(stored):
            raise ValueError(f"'file' must be a bare file name in the category, got {stored!r}")

        authors = data.get("authors")
        if authors is not None:
            if not isinstance(authors, list) or not all(isinstance(a, str) for a in authors):
                raise ValueError("'authors' must be a list of strings")
            authors = list(authors)

        year = data.get("year")
        if year is not None:
            # bool is an int subclass; YAML 'yes'/'true' must not pass as a year
            if isinstance(year, bool) or not isinstance(year, int) or year < 0:
                raise ValueError(f"'year' must be a non-negative integer, got {year!r}")

        return cls(
            title=data.get("title"),
            authors=authors,
            year=year,
            doi=data.get("doi"),
            file=data.get("file"),
        )


@dataclass
class Index:
    """Serialized snapshot of one category: its entries and sub-category names."""

    papers: dict[str, Entry] = field(default_factory=dict)
    sub_categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "papers": {key: entry.to_dict() for key, entry in self.papers.items()},
            "sub_categories": list(self.sub_categories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Index:
        """Deserialize from the parsed index document.

        Missing sections default to empty. Raises ValueError on wrong types.
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping at top level, got {type(data).__name__}")

        raw_papers = data.get("papers") or {}
        if not isinstance(raw_papers, dict):
            raise ValueError(f"'papers' must be a mapping, got {type(raw_papers).__name__}")
        papers: dict[str, Entry] = {}
        for key, raw in raw_papers.items():
            try:
                papers[str(key)] = Entry.from_dict(raw)
            except ValueError as e:
                raise ValueError(f"paper '{key}': {e}") from e

        raw_subs = data.get("sub_categories") or []
        if not isinstance(raw_subs, list):
            raise ValueError(
                f"'sub_categories' must be a list, got {type(raw_subs).__name__}"
            )

        sub_categories = [str(s) for s in raw_subs]
        for name in sub_categories:
            if not is_plain_name(name):
                raise ValueError(f"sub-category {name!r} must be a bare directory name")

        return cls(papers=papers, sub_categories=sub_categories)
