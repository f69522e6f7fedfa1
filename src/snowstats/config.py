"""
SnowStats configuration loader

This module centralizes *all* configuration handling for SnowStats.

Design goals:
- Keep the CLI Unix-friendly: CLI flags override everything.
- Provide sensible defaults if no config exists.
- Allow per-machine config without committing personal paths:
    ~/.config/snowstats/config.toml
- Allow repo-local config:
    <repo_root>/config/config.toml
- Allow environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (SNOWSTATS_*)
3) User config: ~/.config/snowstats/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults (~/SnowCountry/tracks, metric, unix epoch)

Recognized keys:

    [paths]
    tracks_root = "~/SnowCountry/tracks"

    [display]
    units = "metric"        # or "imperial"

    [json]
    time_epoch = "unix"     # or "apple" (seconds since 2001-01-01)

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` otherwise.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from snowstats.errors import ConfigError

UNITS = ("metric", "imperial")
TIME_EPOCHS = ("unix", "apple")


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise a ConfigError
      with a clear, user-facing message.

    Rationale:
    - Missing config files are normal and expected.
    - Malformed config files indicate user intent and should fail loudly.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "paths.tracks_root")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str) and v:
        return Path(v).expanduser()
    return None


def _as_choice(v: Any, choices: tuple[str, ...], key: str, origin: str) -> Optional[str]:
    """
    Normalize an enumerated setting ("Metric" -> "metric").

    Unknown values are an error: a typo in units should not silently
    fall back to the default.
    """
    if v is None:
        return None
    s = str(v).strip().lower()
    if s not in choices:
        raise ConfigError(f"Invalid {key} {v!r} from {origin}; expected one of {', '.join(choices)}")
    return s


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_tracks_root() -> Path:
    """Default directory holding recorded track files."""
    return Path.home() / "SnowCountry" / "tracks"


# ---------------------------------------------------------------------------
# Typed config
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SnowStatsConfig:
    """
    Fully merged SnowStats configuration.

    Attributes:
    - tracks_root: directory scanned for .json/.gpx tracks
    - units: "metric" or "imperial"
    - time_epoch: epoch for numeric JSON timestamps
    - source: provenance map showing where each value came from
    """

    tracks_root: Path
    units: str
    time_epoch: str
    source: dict[str, str]

    @property
    def metric(self) -> bool:
        return self.units == "metric"


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
_KEYS = ("paths.tracks_root", "display.units", "json.time_epoch")

_ENV_MAP = {
    "SNOWSTATS_TRACKS_ROOT": "paths.tracks_root",
    "SNOWSTATS_UNITS": "display.units",
    "SNOWSTATS_TIME_EPOCH": "json.time_epoch",
}


def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> SnowStatsConfig:
    """
    Load, merge, and normalize all SnowStats configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "snowstats" / "config.toml"

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    values: dict[str, Any] = {
        "paths.tracks_root": default_tracks_root(),
        "display.units": "metric",
        "json.time_epoch": "unix",
    }
    src = {k: "default" for k in _KEYS}

    # Repo, then user (user overrides repo)
    for cfg, origin in ((repo_cfg, f"repo:{repo_config_path}"), (user_cfg, f"user:{user_config_path}")):
        for key in _KEYS:
            raw = _deep_get(cfg, key)
            if raw is None:
                continue
            values[key] = raw
            src[key] = origin

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in _ENV_MAP.items():
        val = os.environ.get(env)
        if not val:
            continue
        values[key] = val
        src[key] = f"env:{env}"

    tracks_root = _as_path(values["paths.tracks_root"])
    if tracks_root is None:
        raise ConfigError(f"Invalid paths.tracks_root from {src['paths.tracks_root']}")

    return SnowStatsConfig(
        tracks_root=tracks_root,
        units=_as_choice(values["display.units"], UNITS, "display.units", src["display.units"]),
        time_epoch=_as_choice(
            values["json.time_epoch"], TIME_EPOCHS, "json.time_epoch", src["json.time_epoch"]
        ),
        source=src,
    )
