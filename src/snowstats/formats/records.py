# snowstats/formats/records.py
"""
In-memory track records shared by the JSON and GPX decoders.

Everything here is transient: built fresh per file load and thrown away
once the statistics are rendered. Absence of a value is always an explicit
None, never a sentinel zero.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class GeoFix:
    """One recorded sample point (WGS84 degrees, meters, m/s)."""

    lat: float
    lon: float
    time: Optional[_dt.datetime] = None
    ele: Optional[float] = None
    speed: Optional[float] = None


@dataclass(frozen=True)
class StatOverrides:
    """
    Per-field precomputed statistics.

    A field left as None is derived from the fixes; a supplied value is used
    as-is and its computation is skipped.
    """

    distance_m: Optional[float] = None
    max_elevation_m: Optional[float] = None
    min_elevation_m: Optional[float] = None
    elevation_loss_m: Optional[float] = None
    elevation_gain_m: Optional[float] = None
    duration_s: Optional[float] = None
    max_speed_mps: Optional[float] = None


@dataclass(frozen=True)
class TrackData:
    """A JSON recording session as written by the tracking app."""

    track_name: Optional[str] = None
    max_speed: Optional[float] = None
    total_distance: Optional[float] = None
    total_vertical: Optional[float] = None
    recording_duration: Optional[float] = None
    locations: list[GeoFix] = field(default_factory=list)

    def overrides(self) -> StatOverrides:
        # totalVertical is the skier's vertical: meters descended.
        return StatOverrides(
            distance_m=self.total_distance,
            elevation_loss_m=self.total_vertical,
            duration_s=self.recording_duration,
            max_speed_mps=self.max_speed,
        )


@dataclass(frozen=True)
class LoadedTrack:
    """Result of decoding one track file, whatever its format."""

    fmt: str
    name: Optional[str]
    fixes: list[GeoFix]
    overrides: StatOverrides = field(default_factory=StatOverrides)
