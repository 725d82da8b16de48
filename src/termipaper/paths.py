"""Canonical file and directory names for TermiPaper.

Layout:
  ~/.termipaper/             home_dir()            profile and default catalog
  ~/.termipaper/config.yml   config_path()         user profile
  ~/.termipaper/papers/      default_catalog_dir() catalog used when none is active
  <catalog>/index.termipaper.yml                   per-category index
  <catalog>/index.termipaper.yml.tmp               transient, during an index write

Set TERMIPAPER_HOME to relocate the home directory.
"""

from __future__ import annotations

import os
from pathlib import Path

DOT_DIR = ".termipaper"
HOME_ENV = "TERMIPAPER_HOME"
INDEX_FILENAME = "index.termipaper.yml"
INDEX_TMP_FILENAME = INDEX_FILENAME + ".tmp"
CONFIG_FILENAME = "config.yml"


def home_dir() -> Path:
    """Return $TERMIPAPER_HOME, or ~/.termipaper/ when unset."""
    override = os.environ.get(HOME_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / DOT_DIR


def config_path() -> Path:
    return home_dir() / CONFIG_FILENAME


def default_catalog_dir() -> Path:
    """Return <home>/papers/, the catalog used when none is activated."""
    return home_dir() / "papers"


def index_path(directory: Path) -> Path:
    """Path to the index file of a category directory."""
    return directory / INDEX_FILENAME
