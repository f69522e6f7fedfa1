from pathlib import Path

import pytest

from snowstats.config import load_config
from snowstats.errors import ConfigError


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults(tmp_path: Path):
    cfg = load_config(
        repo_root=tmp_path,
        repo_config_path=tmp_path / "none.toml",
        user_config_path=tmp_path / "none-either.toml",
    )

    assert cfg.tracks_root == Path.home() / "SnowCountry" / "tracks"
    assert cfg.units == "metric"
    assert cfg.metric is True
    assert cfg.time_epoch == "unix"
    assert set(cfg.source.values()) == {"default"}


def test_user_overrides_repo(tmp_path: Path):
    repo = _write(tmp_path / "repo.toml", '[display]\nunits = "imperial"\n[json]\ntime_epoch = "apple"\n')
    user = _write(tmp_path / "user.toml", '[display]\nunits = "Metric"\n')

    cfg = load_config(repo_root=tmp_path, repo_config_path=repo, user_config_path=user)

    assert cfg.units == "metric"
    assert cfg.time_epoch == "apple"
    assert cfg.source["display.units"] == f"user:{user}"
    assert cfg.source["json.time_epoch"] == f"repo:{repo}"


def test_env_overrides_files(tmp_path: Path, monkeypatch):
    user = _write(tmp_path / "user.toml", '[paths]\ntracks_root = "/srv/tracks"\n')
    monkeypatch.setenv("SNOWSTATS_TRACKS_ROOT", str(tmp_path / "env-tracks"))
    monkeypatch.setenv("SNOWSTATS_UNITS", "imperial")

    cfg = load_config(repo_root=tmp_path, repo_config_path=tmp_path / "none.toml", user_config_path=user)

    assert cfg.tracks_root == tmp_path / "env-tracks"
    assert cfg.metric is False
    assert cfg.source["paths.tracks_root"] == "env:SNOWSTATS_TRACKS_ROOT"


def test_malformed_toml(tmp_path: Path):
    bad = _write(tmp_path / "user.toml", "[display\nunits = ")
    with pytest.raises(ConfigError):
        load_config(repo_root=tmp_path, repo_config_path=tmp_path / "none.toml", user_config_path=bad)


@pytest.mark.parametrize(
    "text",
    [
        '[display]\nunits = "nautical"\n',
        '[json]\ntime_epoch = "mayan"\n',
        "[paths]\ntracks_root = 3\n",
    ],
)
def test_invalid_values(tmp_path: Path, text):
    user = _write(tmp_path / "user.toml", text)
    with pytest.raises(ConfigError):
        load_config(repo_root=tmp_path, repo_config_path=tmp_path / "none.toml", user_config_path=user)
