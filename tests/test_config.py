"""Tests for configuration loading."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from waveplay import config

posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX config layout")


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_defaults_when_missing(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    assert config.load_config() == config.AppConfig()


def test_load_defaults_when_corrupt(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not-json", encoding="utf-8")
    assert config.load_config(path) == config.AppConfig()


def test_load_defaults_when_not_an_object(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", [1, 2, 3])
    assert config.load_config(path) == config.AppConfig()


def test_load_values(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {"music_dir": "~/Music", "volume": 0.75, "tick_ms": 100, "recursive": False},
    )
    assert config.load_config(path) == config.AppConfig(
        music_dir="~/Music", volume=0.75, tick_ms=100, recursive=False
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"volume": 5}, 2.0),
        ({"volume": -1}, 0.0),
        ({"volume": "loud"}, 1.0),
        ({"volume": True}, 1.0),
        ({"volume": 1}, 1.0),
    ],
)
def test_volume_is_clamped(raw: dict, expected: float) -> None:
    assert config._config_from_mapping(raw).volume == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [({"tick_ms": 1}, 50), ({"tick_ms": 99999}, 1000), ({"tick_ms": "fast"}, 200)],
)
def test_tick_is_clamped(raw: dict, expected: int) -> None:
    assert config._config_from_mapping(raw).tick_ms == expected


def test_invalid_types_fall_back() -> None:
    cfg = config._config_from_mapping({"music_dir": 12, "recursive": "yes"})
    assert cfg.music_dir is None
    assert cfg.recursive is True
    assert config._config_from_mapping({"music_dir": ""}).music_dir is None


@posix_only
def test_config_dir_uses_xdg(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "_is_macos", lambda: False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config.get_config_dir() == tmp_path / "waveplay"
    assert config.get_config_path() == tmp_path / "waveplay" / "config.json"


@posix_only
def test_config_dir_macos(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "_is_macos", lambda: True)
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
    assert config.get_config_dir() == (
        tmp_path / "Library" / "Application Support" / "waveplay"
    )

