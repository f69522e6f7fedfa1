# snowstats/analyze/units.py
"""
Unit conversion and display formatting for track statistics.

Input is always SI (TrackStats); output is an ordered list of Statistic
cards whose position depends only on the source format.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional

from snowstats.analyze.stats import TrackStats

# Imperial conversion factors from SI
M_TO_MI = 0.000621371
MPS_TO_MPH = 2.23694
M_TO_FT = 3.28084

# Metric display conversions from SI
M_TO_KM = 1 / 1000
MPS_TO_KMH = 3.6


@dataclass(frozen=True)
class Statistic:
    title: str
    value: str


def round_half_away(x: float, places: int = 1) -> float:
    """Round half away from zero (2.25 -> 2.3, -2.25 -> -2.3)."""
    # str() gives the shortest repr, so 0.15 rounds as written
    q = Decimal(1).scaleb(-places)
    d = Decimal(str(x)).copy_abs()
    with localcontext() as ctx:
        # Room for every integer digit plus the kept decimals
        ctx.prec = max(ctx.prec, d.adjusted() + places + 2)
        d = d.quantize(q, rounding=ROUND_HALF_UP)
    r = float(d)
    return -r if x < 0 else r


def format_number(x: Optional[float], unit: str) -> str:
    v = round_half_away(x or 0.0)
    if v == 0:
        v = 0.0  # no "-0.0"
    return f"{v:.1f} {unit}"


def format_duration(seconds: Optional[float]) -> str:
    """
    Abbreviated h/m/s, zero components dropped.

      5000 -> "1h 23m 20s", 3600 -> "1h", 0 -> "0s"
    """
    total = int(round_half_away(max(0.0, seconds or 0.0), 0))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    parts = []
    if h:
        parts.append(f"{h}h")
    if m:
        parts.append(f"{m}m")
    if s:
        parts.append(f"{s}s")
    return " ".join(parts) or "0s"


def distance(meters: float, *, metric: bool) -> tuple[float, str]:
    return (meters * M_TO_KM, "km") if metric else (meters * M_TO_MI, "mi")


def speed(mps: float, *, metric: bool) -> tuple[float, str]:
    return (mps * MPS_TO_KMH, "km/h") if metric else (mps * MPS_TO_MPH, "mph")


def elevation(meters: Optional[float], *, metric: bool) -> tuple[float, str]:
    meters = meters or 0.0
    return (meters, "m") if metric else (meters * M_TO_FT, "ft")


def _json_statistics(stats: TrackStats, metric: bool) -> list[Statistic]:
    vertical, unit = elevation(stats.elevation_loss_m, metric=metric)
    return [
        Statistic("Max Speed", format_number(*speed(stats.max_speed_mps, metric=metric))),
        Statistic("Total Distance", format_number(*distance(stats.distance_m, metric=metric))),
        Statistic("Vertical", format_number(vertical, "meters" if metric else "feet")),
        Statistic("Duration", format_duration(stats.duration_s)),
    ]


def _gpx_statistics(stats: TrackStats, metric: bool) -> list[Statistic]:
    return [
        Statistic("Total Distance", format_number(*distance(stats.distance_m, metric=metric))),
        Statistic("Max Elevation", format_number(*elevation(stats.max_elevation_m, metric=metric))),
        Statistic(
            "Total Elevation Loss",
            format_number(*elevation(stats.elevation_loss_m, metric=metric)),
        ),
        Statistic("Min Elevation", format_number(*elevation(stats.min_elevation_m, metric=metric))),
        Statistic("Max Speed", format_number(*speed(stats.max_speed_mps, metric=metric))),
        Statistic("Duration", format_duration(stats.duration_s)),
    ]


def format_statistics(stats: TrackStats, *, metric: bool, source: str) -> list[Statistic]:
    """
    Render stats as display cards in the fixed order for `source`.

    json: Max Speed, Total Distance, Vertical, Duration
    gpx:  Total Distance, Max Elevation, Total Elevation Loss,
          Min Elevation, Max Speed, Duration
    """
    if source == "json":
        return _json_statistics(stats, metric)
    if source == "gpx":
        return _gpx_statistics(stats, metric)
    raise ValueError(f"Unknown source format: {source!r}")
