#!/usr/bin/env python3
"""
snowstats: print ride statistics for recorded ski/snowboard tracks.

  snowstats 12-01-2023.json run.gpx        # named files
  snowstats --imperial                     # pick from the tracks root with fzf
  snowstats --list                         # filename<TAB>track name
"""

from __future__ import annotations

import argparse
from pathlib import Path

from snowstats.analyze.track import TrackReport, analyze_track
from snowstats.config import load_config
from snowstats.errors import SnowStatsError
from snowstats.formats.load import display_name, iter_track_files
from snowstats.util.fzf import fzf_select_paths
from snowstats.util.logging import log


def print_report(path: Path, report: TrackReport, *, tsv: bool) -> None:
    if tsv:
        values = "\t".join(s.value for s in report.statistics)
        print(f"{path}\t{report.name}\t{report.fmt}\t{values}")
    else:
        print(f"\n{report.name}  ({path.name})")
        width = max(len(s.title) for s in report.statistics)
        for s in report.statistics:
            print(f"  {s.title:<{width}} : {s.value}")


def print_listing(paths: list[Path]) -> None:
    for path in paths:
        print(f"{path.name}\t{display_name(path)}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="SnowStats: ride statistics for track file(s).")
    ap.add_argument("tracks", nargs="*", type=Path,
                    help="One or more .json/.gpx track files. If omitted, use fzf selection.")
    ap.add_argument("--tracks-root", type=Path, default=None,
                    help="Tracks directory (default: from config or ~/SnowCountry/tracks)")
    units = ap.add_mutually_exclusive_group()
    units.add_argument("--metric", dest="units", action="store_const", const="metric",
                       help="km, km/h and meters")
    units.add_argument("--imperial", dest="units", action="store_const", const="imperial",
                       help="mi, mph and feet")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated output (good for piping).")
    ap.add_argument("--list", action="store_true",
                    help="List track files under the tracks root with their names.")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config()

    metric = args.units == "metric" if args.units else cfg.metric
    tracks_root = (args.tracks_root or cfg.tracks_root).expanduser()

    if args.list:
        print_listing(iter_track_files(tracks_root))
        return 0

    selected: list[Path] = list(args.tracks)
    if not selected:
        candidates = iter_track_files(tracks_root)
        if not candidates:
            raise SystemExit(f"No track files found under {tracks_root}")
        selected = fzf_select_paths(
            candidates,
            header="Select track(s) to analyze:",
            labels={p: display_name(p) for p in candidates},
        )

    failed = 0
    for path in selected:
        try:
            report = analyze_track(path, metric=metric, time_epoch=cfg.time_epoch)
        except SnowStatsError as e:
            log(f"Skipping {path}: {e}")
            failed += 1
            continue
        print_report(path, report, tsv=args.tsv)

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
