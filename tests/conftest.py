"""Shared test fixtures for TermiPaper."""

import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """An existing, empty catalog directory."""
    d = tmp_path / "papers"
    d.mkdir()
    return d


@pytest.fixture
def downloads(tmp_path: Path) -> Path:
    """A directory of external files to ingest."""
    d = tmp_path / "downloads"
    d.mkdir()
    (d / "paper.pdf").write_bytes(b"%PDF-1.4 first paper\n")
    (d / "other.pdf").write_bytes(b"%PDF-1.4 second paper\n")
    (d / "paper").write_bytes(b"no extension\n")
    (d / "notes.txt").write_text("plain text notes\n", encoding="utf-8")
    return d


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point TERMIPAPER_HOME at a temp directory."""
    h = tmp_path / "home"
    monkeypatch.setenv("TERMIPAPER_HOME", str(h))
    return h


SAMPLE_INDEX = textwrap.dedent("""\
    papers:
      xu2022:
        title: Scaling quantum interference from molecules to cages
        authors:
        - Xu, Yang
        - Guo, Xuefeng
        year: 2022
        doi: 10.1038/s41586-022-04435-4
        file: xu2022.pdf
      chen2023:
        title: A single-molecule transistor with millivolt gate voltages
        year: 2023
    sub_categories:
    - reviews
""")


@pytest.fixture
def sample_index(catalog_dir: Path) -> Path:
    """Write a two-paper index (and xu2022's file) into catalog_dir."""
    p = catalog_dir / "index.termipaper.yml"
    p.write_text(SAMPLE_INDEX, encoding="utf-8")
    (catalog_dir / "xu2022.pdf").write_bytes(b"%PDF-1.4 xu\n")
    return p
