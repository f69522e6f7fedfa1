from pathlib import Path
import pytest


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).parent / "data"


@pytest.fixture
def sample_gpx_path(data_dir) -> Path:
    return data_dir / "sample.gpx"


@pytest.fixture
def sample_json_path(data_dir) -> Path:
    return data_dir / "sample.json"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    # Keep the developer's own config and SNOWSTATS_* env out of test runs
    for var in ("SNOWSTATS_TRACKS_ROOT", "SNOWSTATS_UNITS", "SNOWSTATS_TIME_EPOCH"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
