"""Command line for TermiPaper.

Usage:
    termipaper init ~/papers
    termipaper activate ~/papers
    termipaper add smith2020 --file ~/Downloads/paper.pdf --title "A Paper" \\
        --author "A. Smith" --author "B. Jones" --year 2020
    termipaper edit smith2020 --year 2021
    termipaper list
    termipaper show smith2020
    termipaper open smith2020
    termipaper remove smith2020
    termipaper info

Every command accepts --dir to target a catalog other than the active one.
"""

from __future__ import annotations

import argparse
import logging
import platform
import subprocess
import sys
from pathlib import Path

from termipaper import catalog as _catalog
from termipaper.config import (
    activate,
    load_config,
    register_database,
    resolve_catalog_dir,
    save_config,
)
from termipaper.errors import (
    NoStoredFile,
    SourceFileNotFound,
    StorageIoError,
    TermiPaperError,
)
from termipaper.models import Entry

logger = logging.getLogger("termipaper")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_stderr_handler: logging.StreamHandler | None = None


def _configure_logging(verbose: bool) -> None:
    """Attach a stderr handler to the termipaper logger (idempotent)."""
    global _stderr_handler
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)
    if _stderr_handler is None:
        _stderr_handler = logging.StreamHandler(sys.stderr)
        _stderr_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(_stderr_handler)
    else:
        _stderr_handler.setStream(sys.stderr)
    _stderr_handler.setLevel(level)


def _year(value: str) -> int:
    try:
        year = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid year: '{value}'") from None
    if year < 0:
        raise argparse.ArgumentTypeError(f"year must not be negative: {year}")
    return year


def _entry_from_args(args: argparse.Namespace) -> Entry:
    return Entry(
        title=args.title,
        authors=args.authors or None,
        year=args.year,
        doi=args.doi,
        file=args.file,
    )


def _target_dir(args: argparse.Namespace) -> Path:
    """Directory for init/activate: positional arg, else --dir, else resolved."""
    if getattr(args, "target", None):
        return Path(args.target).expanduser()
    return resolve_catalog_dir(args.dir, load_config())


def _open(args: argparse.Namespace, create: bool = True) -> _catalog.Catalog:
    root = resolve_catalog_dir(args.dir, load_config())
    logger.debug("Using catalog at %s", root)
    if create:
        return _catalog.open_or_create(root)
    return _catalog.open_catalog(root)


def _format_entry(identifier: str, entry: Entry) -> str:
    parts = [identifier]
    if entry.year is not None:
        parts.append(f"({entry.year})")
    if entry.title:
        parts.append(entry.title)
    if entry.authors:
        parts.append("by " + ", ".join(entry.authors))
    if entry.file:
        parts.append(f"[{entry.file}]")
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_init(args: argparse.Namespace) -> None:
    """Create a catalog directory with an empty index and register it."""
    target = _target_dir(args)
    cat = _catalog.init(target)
    cfg = load_config()
    register_database(cfg, cat.root)
    save_config(cfg)
    print(f"Initialized catalog at {cat.root}")


def cmd_activate(args: argparse.Namespace) -> None:
    """Make a catalog directory the default for later commands."""
    target = _target_dir(args)
    cat = _catalog.open_or_create(target)
    cfg = load_config()
    active = activate(cfg, cat.root)
    save_config(cfg)
    print(f"Activated catalog at {active}")


def cmd_add(args: argparse.Namespace) -> None:
    cat = _open(args)
    stored = cat.add(args.id, _entry_from_args(args), force=args.force)
    print(f"Added {_format_entry(args.id, stored)}")


def cmd_edit(args: argparse.Namespace) -> None:
    cat = _open(args, create=False)
    updated = cat.edit(args.id, _entry_from_args(args))
    print(f"Updated {_format_entry(args.id, updated)}")


def cmd_remove(args: argparse.Namespace) -> None:
    cat = _open(args, create=False)
    cat.remove(args.id)
    print(f"Removed {args.id}")


def cmd_list(args: argparse.Namespace) -> None:
    cat = _open(args, create=False)
    if not cat.entries:
        print("No papers in catalog.")
        return
    for identifier in sorted(cat.entries):
        print(_format_entry(identifier, cat.entries[identifier]))


def cmd_show(args: argparse.Namespace) -> None:
    cat = _open(args, create=False)
    entry = cat.get(args.id)
    print(f"id:      {args.id}")
    print(f"title:   {entry.title or ''}")
    print(f"authors: {', '.join(entry.authors or [])}")
    print(f"year:    {'' if entry.year is None else entry.year}")
    print(f"doi:     {entry.doi or ''}")
    path = cat.file_path(args.id)
    print(f"file:    {path if path is not None else ''}")


def _launch(path: Path) -> None:
    """Open *path* with the platform's default application."""
    system = platform.system()
    if system == "Windows":
        cmd = ["explorer", str(path)]
    elif system == "Darwin":
        cmd = ["open", str(path)]
    else:
        cmd = ["xdg-open", str(path)]
    try:
        subprocess.run(cmd, check=True, shell=False)
    except (subprocess.CalledProcessError, OSError) as e:
        raise StorageIoError("open", str(path), str(e)) from e


def cmd_open(args: argparse.Namespace) -> None:
    """Open a paper's stored file in the default viewer."""
    cat = _open(args, create=False)
    path = cat.file_path(args.id)
    if path is None:
        raise NoStoredFile(args.id)
    if not path.is_file():
        raise SourceFileNotFound(str(path))
    if args.print_path:
        print(path)
        return
    logger.debug("Opening %s", path)
    _launch(path)


def cmd_info(args: argparse.Namespace) -> None:
    cat = _open(args, create=False)
    info = cat.info()
    record = load_config().databases.get(str(cat.root.resolve()))
    print(f"Catalog: {info['root']}")
    print(f"  Index:    {info['index_file']}{'' if info['index_exists'] else ' (not yet written)'}")
    print(f"  Papers:   {info['papers']}")
    print(f"  Files:    {info['files']}")
    subs = ", ".join(info["sub_categories"]) or "(none)"
    print(f"  Sub-categories: {subs}")
    if record is not None:
        print(f"  Created:  {record.date_created}")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_metadata_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("id", help="Paper identifier, e.g. smith2020")
    p.add_argument("-f", "--file", help="File to copy into the catalog")
    p.add_argument("-t", "--title", help="Paper title")
    p.add_argument(
        "-a", "--author", dest="authors", action="append", help="Author (repeat for several)"
    )
    p.add_argument("-y", "--year", type=_year, help="Publication year")
    p.add_argument("--doi", help="DOI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="A terminal-based academic paper manager",
        prog="termipaper",
    )
    parser.add_argument("-d", "--dir", help="Catalog directory (default: the active catalog)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug logging")

    # Accept the global flags after the subcommand too. SUPPRESS keeps a
    # subparser from resetting a value given before the subcommand.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-d", "--dir", default=argparse.SUPPRESS, help=argparse.SUPPRESS)
    common.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help=argparse.SUPPRESS
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", parents=[common], help="Initialize a catalog directory")
    p.add_argument("target", nargs="?", help="Directory to initialize")
    p.set_defaults(func=cmd_init)

    p = sub.add_parser("activate", parents=[common], help="Activate a catalog directory")
    p.add_argument("target", nargs="?", help="Directory to activate")
    p.set_defaults(func=cmd_activate)

    p = sub.add_parser("add", parents=[common], help="Add a paper")
    _add_metadata_args(p)
    p.add_argument("--force", action="store_true", help="Overwrite an existing paper")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("edit", parents=[common], help="Edit a paper")
    _add_metadata_args(p)
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("remove", parents=[common], help="Remove a paper and its file")
    p.add_argument("id", help="Paper identifier")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("list", parents=[common], help="List papers")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", parents=[common], help="Show a paper's details")
    p.add_argument("id", help="Paper identifier")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("open", parents=[common], help="Open a paper's file")
    p.add_argument("id", help="Paper identifier")
    p.add_argument(
        "--print", dest="print_path", action="store_true", help="Print the path instead"
    )
    p.set_defaults(func=cmd_open)

    p = sub.add_parser("info", parents=[common], help="Show catalog information")
    p.set_defaults(func=cmd_info)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        args.func(args)
    except TermiPaperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
