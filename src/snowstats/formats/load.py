# snowstats/formats/load.py
"""
Format dispatch and file access for track files.

Reading bytes (TrackIOError) is kept apart from decoding them (ParseError)
so callers can tell an unreadable file from a malformed one.
"""

from __future__ import annotations

import datetime as _dt
from pathlib import Path
from typing import Optional

from snowstats.errors import ParseError, TrackIOError
from snowstats.formats.gpx import parse_gpx, track_name_from_gpx
from snowstats.formats.records import LoadedTrack
from snowstats.formats.trackjson import load_track_json, parse_track_json

TRACK_FORMATS = {".json": "json", ".gpx": "gpx"}

# Recording apps name files after the day they were recorded
_FILENAME_DATE_FORMAT = "%m-%d-%Y"


def format_for_path(path: Path) -> str:
    fmt = TRACK_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ParseError("Unsupported track file", f"unknown extension {path.suffix!r}")
    return fmt


def parse_track(data: bytes, fmt: str, *, time_epoch: str = "unix") -> LoadedTrack:
    """Decode raw bytes in the declared format ("json" or "gpx")."""
    if fmt == "json":
        return load_track_json(data, time_epoch=time_epoch)
    if fmt == "gpx":
        return parse_gpx(data)
    raise ParseError("Unsupported track format", repr(fmt))


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise TrackIOError(f"Cannot read track file {path}: {e}") from e


def read_track(path: Path, *, time_epoch: str = "unix") -> LoadedTrack:
    """
    Read and decode a track file.

    Raises:
      ParseError, TrackIOError
    """
    fmt = format_for_path(path)
    return parse_track(read_bytes(path), fmt, time_epoch=time_epoch)


def default_track_name(path: Path) -> str:
    """
    Fallback display name derived from the filename.

    "12-01-2023.json" -> "December 1, 2023"; any other stem is used as-is.
    """
    stem = path.stem
    try:
        day = _dt.datetime.strptime(stem, _FILENAME_DATE_FORMAT).date()
    except ValueError:
        return stem
    return f"{day:%B} {day.day}, {day.year}"


def embedded_track_name(path: Path) -> Optional[str]:
    """
    Name stored inside the file, or None.

    Never raises: unreadable, malformed or unsupported files are simply
    "not found".
    """
    fmt = TRACK_FORMATS.get(path.suffix.lower())
    if fmt is None:
        return None
    try:
        data = read_bytes(path)
        if fmt == "gpx":
            return track_name_from_gpx(data)
        return parse_track_json(data).track_name
    except (TrackIOError, ParseError):
        return None


def display_name(path: Path) -> str:
    return embedded_track_name(path) or default_track_name(path)


def iter_track_files(root: Path) -> list[Path]:
    """All .json/.gpx track files under `root`, sorted."""
    if not root.is_dir():
        return []
    out: list[Path] = []
    for p in root.rglob("*"):
        if p.is_file() and p.suffix.lower() in TRACK_FORMATS:
            out.append(p)
    out.sort()
    return out
