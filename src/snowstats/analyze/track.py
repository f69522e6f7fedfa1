# snowstats/analyze/track.py
"""
Track analysis pipeline for SnowStats: read -> decode -> compute -> format.
"""

from dataclasses import dataclass
from pathlib import Path

from snowstats.analyze.stats import TrackStats, compute_stats
from snowstats.analyze.units import Statistic, format_statistics
from snowstats.formats.load import default_track_name, read_track
from snowstats.formats.records import LoadedTrack, StatOverrides


@dataclass(frozen=True)
class TrackReport:
    name: str
    fmt: str
    stats: TrackStats
    statistics: list[Statistic]


def analyze_loaded(track: LoadedTrack, *, metric: bool, fallback_name: str = "") -> TrackReport:
    # JSON producers are trusted for the aggregates they wrote; GPX is always recomputed
    overrides = track.overrides if track.fmt == "json" else StatOverrides()
    stats = compute_stats(track.fixes, overrides)
    return TrackReport(
        name=track.name or fallback_name,
        fmt=track.fmt,
        stats=stats,
        statistics=format_statistics(stats, metric=metric, source=track.fmt),
    )


def analyze_track(path: Path, *, metric: bool = True, time_epoch: str = "unix") -> TrackReport:
    """
    Analyze one track file.

    Raises TrackIOError or ParseError; a report is only returned complete.
    """
    track = read_track(path, time_epoch=time_epoch)
    return analyze_loaded(track, metric=metric, fallback_name=default_track_name(path))
