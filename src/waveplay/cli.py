"""Command-line interface for WavePlay."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys
import threading
from types import TracebackType
from typing import Iterable, Optional, Tuple

from waveplay.config import AppConfig, MAX_VOLUME, MIN_VOLUME, load_config
from waveplay.controller import PlayerController
from waveplay.engine import PlaybackEngine
from waveplay.hangwatch import HangWatchdog, dump_threads, enable_faulthandler
from waveplay.library import scan_directory
from waveplay.logging_setup import init_logging
from waveplay.player_vlc import AudioDeviceError, VlcPlayer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="waveplay", description="WavePlay")
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory to scan for audio files",
    )
    parser.add_argument(
        "--volume",
        type=float,
        default=None,
        help="Initial volume (0.0-2.0, 1.0 is unity)",
    )
    parser.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        default=None,
        help="Only scan the top level of the directory",
    )
    return parser


def resolve_music_dir(arg: Optional[str], config: AppConfig) -> Path:
    if arg:
        return Path(arg).expanduser()
    if config.music_dir:
        return Path(config.music_dir).expanduser()
    return Path(os.getcwd())


def _install_excepthooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.error("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[type[BaseException], BaseException, Optional[TracebackType]] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.error("Thread exception in %s", thread_name, exc_info=exc_info)
        dump_threads(f"thread exception in {thread_name}")

    threading.excepthook = thread_hook


def _run_tui(controller: PlayerController) -> int:
    try:
        from waveplay.tui import run_tui
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    try:
        return run_tui(controller)
    except Exception as exc:
        logger.exception("Terminal failure")
        print(f"Terminal error: {exc}", file=sys.stderr)
        return 1


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    log_path = init_logging()
    enable_faulthandler(log_path)
    logger.info("App start")
    _install_excepthooks()

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = load_config()

    volume = args.volume if args.volume is not None else config.volume
    volume = max(MIN_VOLUME, min(MAX_VOLUME, volume))
    recursive = args.recursive if args.recursive is not None else config.recursive
    music_dir = resolve_music_dir(args.path, config)

    try:
        player = VlcPlayer()
    except AudioDeviceError as exc:
        logger.error("Audio device unavailable: %s", exc)
        print(str(exc), file=sys.stderr)
        return 1

    tracks = scan_directory(music_dir, recursive=recursive)

    tick_interval = config.tick_ms / 1000.0
    engine = PlaybackEngine(player)
    engine.start()
    watchdog = HangWatchdog(lambda: engine.last_cycle)
    watchdog.start()

    controller = PlayerController(
        tracks,
        engine.commands,
        engine.events,
        volume=volume,
        tick_interval=tick_interval,
    )
    try:
        exit_code = _run_tui(controller)
    finally:
        watchdog.stop()
        engine.stop()
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
