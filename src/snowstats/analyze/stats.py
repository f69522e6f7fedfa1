# snowstats/analyze/stats.py
"""
Track statistics for SnowStats

All values are SI: meters, seconds, meters/second. Every function here is
total: empty and single-fix sequences give zeros, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional, Sequence

from haversine import Unit, haversine

from snowstats.formats.records import GeoFix, StatOverrides

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class TrackStats:
    distance_m: float = 0.0
    max_elevation_m: Optional[float] = 0.0
    min_elevation_m: Optional[float] = 0.0
    elevation_loss_m: float = 0.0
    elevation_gain_m: float = 0.0
    duration_s: float = 0.0
    max_speed_mps: float = 0.0


def great_circle_m(a: GeoFix, b: GeoFix) -> float:
    """Haversine distance between two fixes on a sphere of EARTH_RADIUS_M."""
    # Unit.RADIANS gives the central angle, independent of the library's radius
    angle = haversine((a.lat, a.lon), (b.lat, b.lon), unit=Unit.RADIANS)
    return angle * EARTH_RADIUS_M


def step_speeds(fixes: Sequence[GeoFix]) -> list[float]:
    """Return the speed (m/s) of every consecutive timed pair with elapsed time."""
    vs = []

    for p0, p1 in zip(fixes, fixes[1:]):
        if p0.time is None or p1.time is None:
            continue
        dt_s = (p1.time - p0.time).total_seconds()
        if dt_s <= 0:
            continue

        vs.append(great_circle_m(p0, p1) / dt_s)

    return vs


def total_distance_m(fixes: Sequence[GeoFix]) -> float:
    return sum((great_circle_m(p0, p1) for p0, p1 in zip(fixes, fixes[1:])), 0.0)


def _elevations(fixes: Sequence[GeoFix]) -> list[float]:
    # Fixes without elevation are skipped, not read as zero
    return [f.ele for f in fixes if f.ele is not None]


def max_elevation_m(fixes: Sequence[GeoFix]) -> Optional[float]:
    if len(fixes) < 2:
        return 0.0
    eles = _elevations(fixes)
    return max(eles) if eles else None


def min_elevation_m(fixes: Sequence[GeoFix]) -> Optional[float]:
    if len(fixes) < 2:
        return 0.0
    eles = _elevations(fixes)
    return min(eles) if eles else None


def elevation_loss_m(fixes: Sequence[GeoFix]) -> float:
    """Sum of descents between consecutive elevation-bearing fixes."""
    eles = _elevations(fixes)
    return sum((e0 - e1 for e0, e1 in zip(eles, eles[1:]) if e1 < e0), 0.0)


def elevation_gain_m(fixes: Sequence[GeoFix]) -> float:
    eles = _elevations(fixes)
    return sum((e1 - e0 for e0, e1 in zip(eles, eles[1:]) if e1 > e0), 0.0)


def duration_s(fixes: Sequence[GeoFix]) -> float:
    """Last timestamp minus first timestamp; untimed fixes are ignored."""
    times = [f.time for f in fixes if f.time is not None]
    if len(fixes) < 2 or len(times) < 2:
        return 0.0
    return max(0.0, (times[-1] - times[0]).total_seconds())


def max_speed_mps(fixes: Sequence[GeoFix]) -> float:
    """
    Highest speed over the track.

    Maximum over the recorded instantaneous speeds and the speeds derived
    from each consecutive pair (distance over elapsed time). Pairs with no
    elapsed time are skipped.
    """
    if len(fixes) < 2:
        return 0.0
    speeds = [f.speed for f in fixes if f.speed is not None] + step_speeds(fixes)
    return max(speeds) if speeds else 0.0


_FIELD_FUNCS = {
    "distance_m": total_distance_m,
    "max_elevation_m": max_elevation_m,
    "min_elevation_m": min_elevation_m,
    "elevation_loss_m": elevation_loss_m,
    "elevation_gain_m": elevation_gain_m,
    "duration_s": duration_s,
    "max_speed_mps": max_speed_mps,
}


def compute_stats(
    fixes: Sequence[GeoFix], overrides: Optional[StatOverrides] = None
) -> TrackStats:
    """
    Derive a TrackStats from `fixes`.

    Each field uses its override when one is supplied and is computed from
    the fixes otherwise.
    """
    overrides = overrides or StatOverrides()
    values = {}
    for f in fields(TrackStats):
        given = getattr(overrides, f.name)
        values[f.name] = given if given is not None else _FIELD_FUNCS[f.name](fixes)
    return TrackStats(**values)
