# snowstats/formats/gpx.py
"""
GPX helpers for SnowStats

This module is intentionally format-focused:
- GPX namespace handling (1.0, 1.1 and un-namespaced files)
- parsing raw bytes into an ElementTree
- extracting track points and the track display name

Key design principle:
  Keep orchestration (paths, fallbacks, user interaction) in the loader and
  CLI, separate from GPX decoding (here). Decoding is all-or-nothing: either
  every point is read or a ParseError is raised.
"""

from __future__ import annotations

import datetime as _dt
import math
from typing import Optional
from xml.etree import ElementTree as ET

from snowstats.errors import ParseError
from snowstats.formats.records import GeoFix, LoadedTrack


def local_name(tag: str) -> str:
    """
    Strip the namespace from an ElementTree tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def parse_time_utc(text: str) -> _dt.datetime:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"

    Raises:
      ValueError for empty or unparsable text
    """
    s = (text or "").strip()
    if not s:
        raise ValueError("empty timestamp")

    # GPX times commonly use Z for UTC.
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"

    dt = _dt.datetime.fromisoformat(s)

    # Naive times are taken as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def read_gpx(data: bytes) -> ET.Element:
    """
    Parse GPX bytes into the root element.

    Raises:
      ParseError for malformed XML or a non-GPX root element
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ParseError("Malformed GPX", str(e)) from e

    if local_name(root.tag) != "gpx":
        raise ParseError("Not a GPX document", f"root element is <{local_name(root.tag)}>")
    return root


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for c in elem:
        if local_name(c.tag) == name:
            text = (c.text or "").strip()
            return text or None
    return None


def _iter_named(root: ET.Element, name: str):
    for el in root.iter():
        if local_name(el.tag) == name:
            yield el


def extract_track_name(root: ET.Element) -> Optional[str]:
    """
    Return the text of the first <name> element in document order.

    First match wins, whether it sits in <metadata>, <trk> or elsewhere.
    Returns None when there is no (non-empty) name.
    """
    for el in _iter_named(root, "name"):
        text = "".join(el.itertext()).strip()
        return text or None
    return None


def track_name_from_gpx(data: bytes) -> Optional[str]:
    """
    Best-effort name lookup used for listings.

    Malformed XML (an unclosed <name>, truncated files) is "not found"
    rather than an error so the caller can fall back to the filename.
    """
    try:
        root = read_gpx(data)
    except ParseError:
        return None
    return extract_track_name(root)


def _float_or_none(text: Optional[str], what: str, index: int) -> Optional[float]:
    if text is None:
        return None
    try:
        value = float(text)
    except ValueError as e:
        raise ParseError(f"Invalid <{what}> in point {index}", str(e)) from e
    if not math.isfinite(value):
        raise ParseError(f"Invalid <{what}> in point {index}", f"non-finite value {text!r}")
    return value


def _point_to_fix(pt: ET.Element, index: int) -> GeoFix:
    lat_s = pt.get("lat")
    lon_s = pt.get("lon")
    if lat_s is None or lon_s is None:
        raise ParseError(f"Point {index} is missing lat/lon", f"attributes: {dict(pt.attrib)}")
    try:
        lat = float(lat_s)
        lon = float(lon_s)
    except ValueError as e:
        raise ParseError(f"Invalid lat/lon in point {index}", str(e)) from e
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ParseError(f"Invalid lat/lon in point {index}", f"out of range ({lat}, {lon})")

    time = None
    time_text = _child_text(pt, "time")
    if time_text is not None:
        try:
            time = parse_time_utc(time_text)
        except ValueError as e:
            raise ParseError(f"Invalid <time> in point {index}", str(e)) from e

    speed = _float_or_none(_child_text(pt, "speed"), "speed", index)
    if speed is not None and speed < 0:
        speed = None

    return GeoFix(
        lat=lat,
        lon=lon,
        time=time,
        ele=_float_or_none(_child_text(pt, "ele"), "ele", index),
        speed=speed,
    )


def extract_fixes(root: ET.Element) -> list[GeoFix]:
    """
    Extract ordered fixes from a GPX tree.

    Track points are preferred; a file with no <trkpt> falls back to its
    route points (<rtept>).
    """
    points = list(_iter_named(root, "trkpt"))
    if not points:
        points = list(_iter_named(root, "rtept"))
    return [_point_to_fix(pt, i) for i, pt in enumerate(points)]


def parse_gpx(data: bytes) -> LoadedTrack:
    """Decode GPX bytes into a LoadedTrack (no precomputed statistics)."""
    root = read_gpx(data)
    return LoadedTrack(fmt="gpx", name=extract_track_name(root), fixes=extract_fixes(root))
