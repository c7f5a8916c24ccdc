"""Tests for CLI parsing and startup wiring."""

from __future__ import annotations

import builtins
from pathlib import Path
import sys
import threading
from types import SimpleNamespace
from typing import Optional

import pytest

from waveplay import cli, library
from waveplay.config import AppConfig
from waveplay.controller import PlayerController
from waveplay.metadata import TrackMeta
from waveplay.player_vlc import AudioDeviceError


class DummyPlayer:
    def load(self, path: str) -> None:
        pass

    def play(self) -> None:
        pass

    def set_paused(self, paused: bool) -> None:
        pass

    def stop(self) -> None:
        pass

    def set_volume(self, level: float) -> None:
        pass

    def consume_end_reached(self) -> bool:
        return False

    def consume_error(self) -> bool:
        return False

    def get_length_ms(self) -> Optional[int]:
        return None


@pytest.fixture
def startup(monkeypatch: pytest.MonkeyPatch) -> list[PlayerController]:
    """Stub out logging, config and the TUI; collect the controllers run."""
    controllers: list[PlayerController] = []

    def fake_run_tui(controller: PlayerController) -> int:
        controllers.append(controller)
        return 0

    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(cli, "init_logging", lambda: Path("app.log"))
    monkeypatch.setattr(cli, "enable_faulthandler", lambda _: Path("hangdump.log"))
    monkeypatch.setattr(cli, "load_config", lambda: AppConfig())
    monkeypatch.setattr(cli, "VlcPlayer", DummyPlayer)
    monkeypatch.setattr(cli, "_run_tui", fake_run_tui)
    monkeypatch.setattr(
        library, "get_track_meta", lambda path: TrackMeta(artist=None, title=None)
    )
    return controllers


def test_parse_defaults() -> None:
    args = cli.build_parser().parse_args([])
    assert args.path is None
    assert args.volume is None
    assert args.recursive is None


def test_parse_options() -> None:
    argv = ["~/Music", "--volume", "1.5", "--no-recursive"]
    args = cli.build_parser().parse_args(argv)
    assert args.path == "~/Music"
    assert args.volume == 1.5
    assert args.recursive is False


def test_resolve_music_dir_precedence(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    configured = AppConfig(music_dir=str(tmp_path / "configured"))
    assert cli.resolve_music_dir("given", configured) == Path("given")
    assert cli.resolve_music_dir(None, configured) == tmp_path / "configured"
    assert cli.resolve_music_dir(None, AppConfig()) == tmp_path


def test_main_wires_tracks_and_volume(startup, tmp_path: Path) -> None:
    (tmp_path / "a.mp3").write_bytes(b"")
    (tmp_path / "readme.txt").write_bytes(b"")
    exit_code = cli.main([str(tmp_path), "--volume", "5"])
    assert exit_code == 0
    (controller,) = startup
    assert [track.path.name for track in controller.tracks] == ["a.mp3"]
    assert controller.volume == 2.0
    assert controller.tick_interval == pytest.approx(0.2)


def test_main_uses_config_defaults(startup, monkeypatch, tmp_path: Path) -> None:
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "deep.ogg").write_bytes(b"")
    (tmp_path / "top.wav").write_bytes(b"")
    cfg = AppConfig(music_dir=str(tmp_path), volume=0.4, tick_ms=100, recursive=False)
    monkeypatch.setattr(cli, "load_config", lambda: cfg)
    assert cli.main([]) == 0
    (controller,) = startup
    assert [track.path.name for track in controller.tracks] == ["top.wav"]
    assert controller.volume == 0.4
    assert controller.tick_interval == pytest.approx(0.1)


def test_main_handles_audio_device_error(startup, monkeypatch, capsys) -> None:
    def boom() -> None:
        raise AudioDeviceError("Audio output is unavailable.")

    monkeypatch.setattr(cli, "VlcPlayer", boom)
    assert cli.main([]) == 1
    assert "Audio output is unavailable." in capsys.readouterr().err
    assert startup == []


def test_run_tui_handles_import_error(monkeypatch, capsys) -> None:
    original_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "waveplay.tui":
            raise RuntimeError("Textual is required")
        return original_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    result = cli._run_tui(SimpleNamespace())  # type: ignore[arg-type]
    assert result == 1
    assert "Textual is required" in capsys.readouterr().err


def test_run_tui_handles_terminal_failure(monkeypatch, capsys) -> None:
    from waveplay import tui

    def broken(controller: PlayerController) -> int:
        raise OSError("not a terminal")

    monkeypatch.setattr(tui, "run_tui", broken)
    result = cli._run_tui(SimpleNamespace())  # type: ignore[arg-type]
    assert result == 1
    assert "not a terminal" in capsys.readouterr().err


def test_thread_exceptions_dump_threads(startup, monkeypatch, tmp_path: Path) -> None:
    calls: list[str] = []
    monkeypatch.setattr(cli, "dump_threads", calls.append)
    cli.main([str(tmp_path)])
    fake_args = SimpleNamespace(
        exc_type=RuntimeError,
        exc_value=RuntimeError("boom"),
        exc_traceback=None,
        thread=SimpleNamespace(name="PlaybackEngine"),
    )
    threading.excepthook(fake_args)  # type: ignore[arg-type]
    assert calls == ["thread exception in PlaybackEngine"]
