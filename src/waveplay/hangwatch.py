"""Hang watchdog and faulthandler integration.

The playback engine stamps a monotonic heartbeat every loop. A decode or
device call that never returns stops the heartbeat; the watchdog then dumps
every thread's stack into ``hangdump.log`` beside the application log.
"""

from __future__ import annotations

import faulthandler
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

_HANG_FILE: Optional[TextIO] = None
_HANG_PATH: Optional[Path] = None
_LOCK = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Enable faulthandler and return the hangdump path."""
    global _HANG_FILE, _HANG_PATH
    hang_path = log_path.parent / "hangdump.log"
    try:
        hang_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(hang_path, "a", encoding="utf-8")
    except OSError:
        logger.warning("Cannot open %s; hang dumps disabled", hang_path)
        return hang_path
    with _LOCK:
        _HANG_FILE = handle
        _HANG_PATH = hang_path
    faulthandler.enable(file=handle, all_threads=True)
    return hang_path


def dump_threads(label: str) -> None:
    """Write a stamped header and the stacks of all threads."""
    handle = _HANG_FILE
    if not handle:
        return
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
    try:
        handle.write(f"\n[{stamp}] {label}\n")
        handle.flush()
        faulthandler.dump_traceback(file=handle, all_threads=True)
        handle.flush()
    except (OSError, ValueError):
        logger.warning("Failed to write hang dump", exc_info=True)


class HangWatchdog:
    """Background thread that dumps stacks when a heartbeat stops advancing."""

    def __init__(
        self,
        get_last_beat: Callable[[], float],
        *,
        threshold_seconds: float = 15.0,
        repeat_seconds: float = 30.0,
        poll_seconds: float = 1.0,
        label: str = "engine stalled",
    ) -> None:
        self._get_last_beat = get_last_beat
        self._threshold_seconds = threshold_seconds
        self._repeat_seconds = repeat_seconds
        self._poll_seconds = poll_seconds
        self._label = label
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="HangWatchdog", daemon=True
        )
        self._last_dump = 0.0

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def check(self, now: float) -> bool:
        """Dump threads if the heartbeat is stale; return True when it did."""
        stalled = now - self._get_last_beat() > self._threshold_seconds
        if stalled and now - self._last_dump > self._repeat_seconds:
            self._last_dump = now
            logger.warning("%s; dumping thread stacks", self._label)
            dump_threads(self._label)
            return True
        return False

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.check(time.monotonic())
            self._stop_event.wait(self._poll_seconds)
