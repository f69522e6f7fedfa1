import pytest

from snowstats.analyze.stats import TrackStats, compute_stats
from snowstats.analyze.units import (
    M_TO_FT,
    M_TO_MI,
    MPS_TO_KMH,
    MPS_TO_MPH,
    Statistic,
    format_duration,
    format_number,
    format_statistics,
    round_half_away,
)
from snowstats.formats.trackjson import load_track_json


@pytest.mark.parametrize(
    "x, expected",
    [
        (0.25, 0.3),
        (0.15, 0.2),
        (2.45, 2.5),
        (-2.45, -2.5),
        (1.04, 1.0),
        (0.0, 0.0),
    ],
)
def test_round_half_away(x, expected):
    assert round_half_away(x) == expected


def test_round_to_whole_units():
    assert round_half_away(2.5, 0) == 3.0
    assert round_half_away(3.5, 0) == 4.0


def test_negative_zero_is_not_printed():
    assert format_number(-0.04, "m") == "0.0 m"
    assert format_number(None, "m") == "0.0 m"


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0s"),
        (None, "0s"),
        (59, "59s"),
        (60, "1m"),
        (3600, "1h"),
        (4990, "1h 23m 10s"),
        (5400, "1h 30m"),
        (3601.6, "1h 2s"),
        (90061, "25h 1m 1s"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


STATS = TrackStats(
    distance_m=12345.0,
    max_elevation_m=2500.0,
    min_elevation_m=1800.0,
    elevation_loss_m=700.0,
    elevation_gain_m=650.0,
    duration_s=4990.0,
    max_speed_mps=20.0,
)


def test_gpx_metric_order_and_values():
    assert format_statistics(STATS, metric=True, source="gpx") == [
        Statistic("Total Distance", "12.3 km"),
        Statistic("Max Elevation", "2500.0 m"),
        Statistic("Total Elevation Loss", "700.0 m"),
        Statistic("Min Elevation", "1800.0 m"),
        Statistic("Max Speed", "72.0 km/h"),
        Statistic("Duration", "1h 23m 10s"),
    ]


def test_gpx_imperial_values():
    values = [s.value for s in format_statistics(STATS, metric=False, source="gpx")]
    assert values == [
        "7.7 mi",
        "8202.1 ft",
        "2296.6 ft",
        "5905.5 ft",
        "44.7 mph",
        "1h 23m 10s",
    ]


def test_json_order_and_units():
    metric = format_statistics(STATS, metric=True, source="json")
    imperial = format_statistics(STATS, metric=False, source="json")

    assert [s.title for s in metric] == ["Max Speed", "Total Distance", "Vertical", "Duration"]
    assert [s.value for s in metric] == ["72.0 km/h", "12.3 km", "700.0 meters", "1h 23m 10s"]
    assert [s.value for s in imperial] == ["44.7 mph", "7.7 mi", "2296.6 feet", "1h 23m 10s"]


def test_missing_elevation_renders_as_zero():
    stats = TrackStats(max_elevation_m=None, min_elevation_m=None)
    values = [s.value for s in format_statistics(stats, metric=True, source="gpx")]
    assert values[1] == "0.0 m"
    assert values[3] == "0.0 m"


def test_all_zero_stats():
    values = [s.value for s in format_statistics(TrackStats(), metric=False, source="gpx")]
    assert values == ["0.0 mi", "0.0 ft", "0.0 ft", "0.0 ft", "0.0 mph", "0s"]


def _number(value: str) -> float:
    return float(value.split()[0])


@pytest.mark.parametrize(
    "stats_field, title, metric_to_si, imperial_factor",
    [
        ("distance_m", "Total Distance", 1000.0, M_TO_MI),
        ("max_speed_mps", "Max Speed", 1 / MPS_TO_KMH, MPS_TO_MPH),
        ("max_elevation_m", "Max Elevation", 1.0, M_TO_FT),
    ],
)
@pytest.mark.parametrize("si_value", [0.0, 3.7, 123.456, 8848.0, 50000.0])
def test_imperial_tracks_metric(stats_field, title, metric_to_si, imperial_factor, si_value):
    stats = TrackStats(**{stats_field: si_value})
    metric = {s.title: s.value for s in format_statistics(stats, metric=True, source="gpx")}
    imperial = {s.title: s.value for s in format_statistics(stats, metric=False, source="gpx")}

    # Both sides are rounded to 0.1, so the metric side carries up to 0.05 error
    slack = 0.05 * metric_to_si * imperial_factor + 0.05
    expected = _number(metric[title]) * metric_to_si * imperial_factor
    assert _number(imperial[title]) == pytest.approx(expected, abs=slack + 1e-9)


@pytest.mark.parametrize("x", [1e30, -1e30, 1.5e300, 123456789012345678901234567890.0])
def test_round_half_away_huge_values(x):
    assert round_half_away(x) == x
    assert round_half_away(x, 0) == x


def test_format_duration_huge():
    assert format_duration(1e30).split()[0].endswith("h")


def test_huge_json_aggregates_still_format():
    track = load_track_json(
        b'{"totalDistance": 1e30, "recordingDuration": 1e30, "maxSpeed": 1e30, "locations": []}'
    )
    statistics = format_statistics(compute_stats([], track.overrides), metric=True, source="json")

    values = {s.title: s.value for s in statistics}
    assert values["Total Distance"].endswith(" km")
    assert float(values["Total Distance"].split()[0]) == pytest.approx(1e27)
    assert values["Max Speed"].endswith(" km/h")
    assert values["Duration"].split()[0].endswith("h")


def test_unknown_source():
    with pytest.raises(ValueError):
        format_statistics(STATS, metric=True, source="fit")
