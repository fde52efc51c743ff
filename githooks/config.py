"""Functional TOML configuration management for githooks."""

import tomllib
from pathlib import Path

import tomlkit
from pydantic import ValidationError

from .errors import ConfigError
from .models import HooksConfig

CONFIG_FILENAME = "githooks.toml"


def configPath(root: Path | None = None) -> Path:
    """Config file location for a worktree root (default: current directory)."""
    return (root or Path.cwd()) / CONFIG_FILENAME


def configExists(path: Path | None = None) -> bool:
    """Check if config file exists."""
    p = path or Path(CONFIG_FILENAME)
    return p.is_file()


def loadConfig(path: Path | None = None) -> HooksConfig:
    """Load and parse githooks.toml. Returns defaults if file missing."""
    p = path or Path(CONFIG_FILENAME)
    if not p.is_file():
        return HooksConfig()

    try:
        with open(p, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {p}: {e}") from e

    # Accept a bare `search_paths = ".husky"` as a one-element list
    if isinstance(raw.get("search_paths"), str):
        raw["search_paths"] = [raw["search_paths"]]

    try:
        return HooksConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {p}: {e}") from e


def writeConfig(path: Path | None, config: HooksConfig) -> Path:
    """Write config to TOML. Empty search_paths and timeouts are left out."""
    p = path or Path(CONFIG_FILENAME)

    doc = tomlkit.document()
    doc.add(tomlkit.comment("githooks configuration; timeouts are in seconds, 0 = no limit"))
    doc.add("timeout", tomlkit.item(config.timeout))

    if config.search_paths:
        doc.add("search_paths", tomlkit.item(list(config.search_paths)))

    if config.timeouts:
        doc.add(tomlkit.nl())
        tbl = tomlkit.table()
        for hook, seconds in config.timeouts.items():
            tbl.add(hook, seconds)
        doc.add("timeouts", tbl)

    p.write_text(tomlkit.dumps(doc))
    return p
