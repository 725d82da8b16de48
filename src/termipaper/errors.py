"""Exception hierarchy for TermiPaper.

Every error message includes: what happened, why, and what to do next.
The command line prints the message as-is and exits with status 1.
"""

from __future__ import annotations


class TermiPaperError(Exception):
    """Base class for all TermiPaper errors."""


class InvalidIdentifier(TermiPaperError):
    """Paper identifier is empty or contains unsafe characters."""

    def __init__(self, identifier: str, reason: str):
        super().__init__(
            f"Invalid paper identifier '{identifier}': {reason}. "
            f"Identifiers must be non-empty and contain no whitespace, '/' or '\\' "
            f"(e.g. 'smith2020')."
        )
        self.identifier = identifier
        self.reason = reason


class DuplicateIdentifier(TermiPaperError):
    """Identifier already exists in the category."""

    def __init__(self, identifier: str):
        super().__init__(
            f"Paper '{identifier}' already exists in the catalog. "
            f"Use edit to update it, add --force to overwrite it, "
            f"or choose a different identifier (e.g. '{identifier}a')."
        )
        self.identifier = identifier


class EntryNotFound(TermiPaperError):
    """Identifier not in the category."""

    def __init__(self, identifier: str):
        super().__init__(
            f"No paper with identifier '{identifier}' in the catalog. "
            f"Use list to see available identifiers, or add to create one."
        )
        self.identifier = identifier


class NoStoredFile(TermiPaperError):
    """The entry exists but has no file to open."""

    def __init__(self, identifier: str):
        super().__init__(
            f"Paper '{identifier}' has no stored file. "
            f"Attach one with: edit {identifier} --file PATH"
        )
        self.identifier = identifier


class SourceFileNotFound(TermiPaperError):
    """The external file to ingest does not exist."""

    def __init__(self, path: str):
        super().__init__(
            f"File '{path}' does not exist. "
            f"Check the path (relative paths are resolved from the current directory). "
            f"The catalog was not modified."
        )
        self.path = path


class StorageIoError(TermiPaperError):
    """Copying, deleting or writing a file inside the catalog failed."""

    def __init__(self, operation: str, path: str, detail: str):
        super().__init__(
            f"Could not {operation} '{path}': {detail}. "
            f"Check permissions and free space in the catalog directory."
        )
        self.operation = operation
        self.path = path
        self.detail = detail


class IndexLoadError(TermiPaperError):
    """The index file exists but could not be read."""

    def __init__(self, path: str, detail: str):
        super().__init__(
            f"Failed to load index file '{path}': {detail}. "
            f"The catalog cannot be used until the index is readable. "
            f"The file was not modified."
        )
        self.path = path
        self.detail = detail


class IndexParseError(IndexLoadError):
    """The index file is not valid YAML or has the wrong structure."""

    def __init__(self, path: str, detail: str):
        super().__init__(path, f"parse error: {detail}")
        self.detail = detail


class CategoryNotFound(TermiPaperError):
    """No category node at the requested relative path."""

    def __init__(self, relative_path: tuple[str, ...]):
        shown = "/".join(relative_path) or "(top)"
        super().__init__(
            f"No category '{shown}' in the catalog. "
            f"Use info to see the available sub-categories."
        )
        self.relative_path = relative_path


class ConfigError(TermiPaperError):
    """User profile configuration is invalid."""

    def __init__(self, detail: str, hint: str = ""):
        msg = f"Configuration error: {detail}."
        if hint:
            msg += f" {hint}"
        super().__init__(msg)
        self.detail = detail
        self.hint = hint
