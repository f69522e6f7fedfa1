# snowstats/formats/trackjson.py
"""
JSON track exports

Schema (as written by the tracking app):

    {
      "trackName": "Opening day",          # optional
      "maxSpeed": 17.2,                    # optional, m/s
      "totalDistance": 5000,               # optional, m
      "totalVertical": 820,                # optional, m descended
      "recordingDuration": 5400,           # optional, s
      "locations": [                       # required
        {"latitude": 46.1, "longitude": 7.2,
         "altitude": 2300, "speed": 4.5, "timestamp": 1700000000}
      ]
    }

Per-location elevation may be spelled `elevation` or `altitude` and the time
`timestamp` or `time`. Timestamps are ISO-8601 strings or numbers of seconds
since the configured epoch.
"""

from __future__ import annotations

import datetime as _dt
import json
import math
from typing import Any, Optional

from snowstats.errors import ParseError
from snowstats.formats.gpx import parse_time_utc
from snowstats.formats.records import GeoFix, LoadedTrack, TrackData

# Epochs for numeric timestamps
EPOCHS = {
    "unix": _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc),
    # Foundation's reference date (Swift JSONEncoder default for Date)
    "apple": _dt.datetime(2001, 1, 1, tzinfo=_dt.timezone.utc),
}

_AGGREGATES = {
    "maxSpeed": "max_speed",
    "totalDistance": "total_distance",
    "totalVertical": "total_vertical",
    "recordingDuration": "recording_duration",
}


def _is_number(v: Any) -> bool:
    # bool is an int subclass; true/false are not coordinates
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    try:
        return math.isfinite(v)
    except OverflowError:
        # integer literal beyond float range
        return False


def _optional_number(obj: dict[str, Any], keys: tuple[str, ...], where: str) -> Optional[float]:
    for key in keys:
        v = obj.get(key)
        if v is None:
            continue
        if not _is_number(v):
            raise ParseError(f"Invalid {where}", f"'{key}' must be a number, got {v!r}")
        return float(v)
    return None


def _parse_timestamp(v: Any, epoch: _dt.datetime, index: int) -> Optional[_dt.datetime]:
    if v is None:
        return None
    if _is_number(v):
        try:
            return epoch + _dt.timedelta(seconds=float(v))
        except OverflowError as e:
            raise ParseError(f"Invalid timestamp in location {index}", str(e)) from e
    if isinstance(v, str):
        try:
            return parse_time_utc(v)
        except ValueError as e:
            raise ParseError(f"Invalid timestamp in location {index}", str(e)) from e
    raise ParseError(f"Invalid timestamp in location {index}", f"unsupported value {v!r}")


def _location_to_fix(loc: Any, epoch: _dt.datetime, index: int) -> GeoFix:
    if not isinstance(loc, dict):
        raise ParseError(f"Invalid location {index}", "expected an object")

    lat = loc.get("latitude")
    lon = loc.get("longitude")
    if not _is_number(lat) or not _is_number(lon):
        raise ParseError(
            f"Invalid location {index}", "latitude and longitude are required numbers"
        )
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ParseError(f"Invalid location {index}", f"coordinates out of range ({lat}, {lon})")

    where = f"location {index}"
    speed = _optional_number(loc, ("speed",), where)
    if speed is not None and speed < 0:
        # CoreLocation reports -1 for "no valid speed"
        speed = None

    return GeoFix(
        lat=float(lat),
        lon=float(lon),
        time=_parse_timestamp(loc.get("timestamp", loc.get("time")), epoch, index),
        ele=_optional_number(loc, ("elevation", "altitude"), where),
        speed=speed,
    )


def parse_track_json(data: bytes, *, time_epoch: str = "unix") -> TrackData:
    """
    Decode a JSON track export into TrackData.

    Raises:
      ParseError for malformed JSON, a missing `locations` array, or any
      invalid field. No partial TrackData is ever returned.
    """
    if time_epoch not in EPOCHS:
        raise ValueError(f"Unknown time epoch: {time_epoch!r}")
    epoch = EPOCHS[time_epoch]

    try:
        doc = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError("Malformed JSON", str(e)) from e

    if not isinstance(doc, dict):
        raise ParseError("Invalid track JSON", "top level must be an object")

    locations = doc.get("locations")
    if not isinstance(locations, list):
        raise ParseError("Invalid track JSON", "'locations' array is required")

    name = doc.get("trackName")
    if name is not None and not isinstance(name, str):
        raise ParseError("Invalid track JSON", "'trackName' must be a string")

    aggregates = {
        attr: _optional_number(doc, (key,), "track JSON") for key, attr in _AGGREGATES.items()
    }

    return TrackData(
        track_name=name,
        locations=[_location_to_fix(loc, epoch, i) for i, loc in enumerate(locations)],
        **aggregates,
    )


def load_track_json(data: bytes, *, time_epoch: str = "unix") -> LoadedTrack:
    """Decode JSON bytes into a LoadedTrack carrying the producer's aggregates."""
    td = parse_track_json(data, time_epoch=time_epoch)
    return LoadedTrack(fmt="json", name=td.track_name, fixes=td.locations, overrides=td.overrides())
