"""User profile: loads and saves ~/.termipaper/config.yml.

The profile records which catalog directories have been registered, the
owner of the collection, and which catalog is active. The engine itself
never reads it: the command line resolves a directory here and passes it
explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from termipaper.errors import ConfigError, StorageIoError
from termipaper.paths import config_path, default_catalog_dir

logger = logging.getLogger(__name__)


@dataclass
class DatabaseRecord:
    """A registered catalog directory."""

    date_created: str = field(default_factory=lambda: date.today().strftime("%Y-%m-%d"))


@dataclass
class Owner:
    name: str
    email: str | None = None
    affiliation: str | None = None
    link: str | None = None


@dataclass
class UserConfig:
    """Parsed config.yml."""

    databases: dict[str, DatabaseRecord] = field(default_factory=dict)
    owner: Owner | None = None
    activated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "databases": {d: {"date_created": r.date_created} for d, r in self.databases.items()},
            "owner": None,
            "activated": self.activated,
        }
        if self.owner is not None:
            out["owner"] = {
                k: v
                for k, v in (
                    ("name", self.owner.name),
                    ("email", self.owner.email),
                    ("affiliation", self.owner.affiliation),
                    ("link", self.owner.link),
                )
                if v is not None
            }
        return out


def _parse_owner(raw: Any, p: Path) -> Owner | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ConfigError(f"'owner' in {p} must be a mapping, got {type(raw).__name__}")
    name = raw.get("name")
    if not name:
        raise ConfigError(f"'owner' in {p} is missing 'name'")
    return Owner(
        name=str(name),
        email=None if raw.get("email") is None else str(raw["email"]),
        affiliation=None if raw.get("affiliation") is None else str(raw["affiliation"]),
        link=None if raw.get("link") is None else str(raw["link"]),
    )


def load_config(path: Path | None = None) -> UserConfig:
    """Load and validate config.yml. Returns defaults if the file is missing."""
    p = path or config_path()
    if not p.exists():
        return UserConfig()

    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {p}: {e}") from e

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {p}: {e}",
            hint="Fix the file by hand or delete it to start with an empty profile.",
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {p}, got {type(data).__name__}")

    databases: dict[str, DatabaseRecord] = {}
    raw_dbs = data.get("databases") or {}
    if not isinstance(raw_dbs, dict):
        raise ConfigError(f"'databases' in {p} must be a mapping")
    for directory, record in raw_dbs.items():
        record = record or {}
        if not isinstance(record, dict):
            raise ConfigError(f"Database entry '{directory}' in {p} must be a mapping")
        created = record.get("date_created")
        databases[str(directory)] = (
            DatabaseRecord(date_created=str(created)) if created else DatabaseRecord()
        )

    activated = data.get("activated")
    return UserConfig(
        databases=databases,
        owner=_parse_owner(data.get("owner"), p),
        activated=None if activated is None else str(activated),
    )


def save_config(cfg: UserConfig, path: Path | None = None) -> Path:
    """Write config.yml atomically, creating its directory. Returns the path."""
    p = path or config_path()
    tmp = p.with_suffix(".yml.tmp")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(
            yaml.safe_dump(
                cfg.to_dict(), default_flow_style=False, allow_unicode=True, sort_keys=False
            ),
            encoding="utf-8",
        )
        tmp.replace(p)
    except OSError as e:
        raise StorageIoError("write profile", str(p), str(e)) from e
    return p


def _key(directory: Path | str) -> str:
    return str(Path(directory).expanduser().resolve())


def register_database(cfg: UserConfig, directory: Path | str) -> DatabaseRecord:
    """Record *directory* as a known catalog (mutates cfg). Idempotent."""
    key = _key(directory)
    record = cfg.databases.get(key)
    if record is None:
        record = DatabaseRecord()
        cfg.databases[key] = record
        logger.debug("Registered catalog %s", key)
    return record


def activate(cfg: UserConfig, directory: Path | str) -> str:
    """Register *directory* and make it the active catalog (mutates cfg)."""
    register_database(cfg, directory)
    cfg.activated = _key(directory)
    return cfg.activated


def resolve_catalog_dir(explicit: str | None, cfg: UserConfig) -> Path:
    """Pick the catalog directory: explicit flag, then active, then default."""
    if explicit:
        return Path(explicit).expanduser()
    if cfg.activated:
        return Path(cfg.activated)
    return default_catalog_dir()
