"""Playback engine: the background thread that owns the audio device.

The engine consumes commands from ``commands`` and publishes events on
``events``. Both are plain FIFO queues with a single producer and a single
consumer, so nothing else is shared with the UI side. Every loop iteration
drains all pending commands first and only then checks the loaded stream,
which keeps command handling and progress sampling strictly sequential on
the engine thread.
"""

from __future__ import annotations

from enum import Enum
import logging
from pathlib import Path
import queue
import threading
import time
from typing import Callable, Optional, Protocol

from waveplay.metadata import UnsupportedFormatError, probe_audio
from waveplay.models import (
    Command,
    Error,
    Event,
    PauseChanged,
    Play,
    Progress,
    SetVolume,
    TogglePlayPause,
    TrackEnded,
    TrackStarted,
)

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.2


class AudioBackend(Protocol):
    def load(self, path: str) -> None: ...

    def play(self) -> None: ...

    def set_paused(self, paused: bool) -> None: ...

    def stop(self) -> None: ...

    def set_volume(self, level: float) -> None: ...

    def consume_end_reached(self) -> bool: ...

    def consume_error(self) -> bool: ...

    def get_length_ms(self) -> Optional[int]: ...


class EngineState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackEngine:
    """Serializes all access to one audio backend and one active stream."""

    def __init__(
        self,
        backend: AudioBackend,
        *,
        interval: float = DEFAULT_INTERVAL,
        now: Callable[[], float] = time.monotonic,
        probe: Callable[[Path], Optional[int]] = probe_audio,
    ) -> None:
        self.commands: queue.Queue[Command] = queue.Queue()
        self.events: queue.Queue[Event] = queue.Queue()
        self._backend = backend
        self._interval = interval
        self._now = now
        self._probe = probe
        self._state = EngineState.IDLE
        self._volume = 1.0
        self._current_path: Optional[str] = None
        self._started_at = 0.0
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="PlaybackEngine", daemon=True
        )
        self.last_cycle = now()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def volume(self) -> float:
        return self._volume

    def start(self) -> None:
        self._thread.start()
        logger.info("Playback engine started (interval=%.3fs)", self._interval)

    def stop(self) -> None:
        """Stop the loop thread; the process normally just exits instead."""
        self._stop_event.set()

    def run_once(self) -> None:
        """Drain pending commands, then sample the loaded stream."""
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                break
            self._dispatch(command)
        self._check_stream()
        self.last_cycle = self._now()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_once()
            self._stop_event.wait(self._interval)

    def _emit(self, event: Event) -> None:
        self.events.put(event)

    def _dispatch(self, command: Command) -> None:
        try:
            if isinstance(command, Play):
                self._handle_play(command)
            elif isinstance(command, TogglePlayPause):
                self._handle_toggle()
            elif isinstance(command, SetVolume):
                self._handle_volume(command.level)
            else:
                logger.warning("Ignoring unknown command %r", command)
        except Exception as exc:
            logger.exception("Command %r failed", command)
            self._reset_stream()
            self._emit(Error(f"Playback failed: {exc}"))

    # --- Commands ---
    def _handle_play(self, command: Play) -> None:
        self._unload()
        self._state = EngineState.LOADING
        logger.info("Loading index=%s path=%s", command.index, command.path)
        try:
            duration_ms = self._probe(Path(command.path))
        except OSError:
            logger.warning("Cannot open %s", command.path, exc_info=True)
            self._fail(f"Cannot open file: {command.path}")
            return
        except UnsupportedFormatError:
            logger.warning("Unsupported format %s", command.path, exc_info=True)
            self._fail(f"Unsupported format: {command.path}")
            return
        self._backend.load(command.path)
        self._backend.set_volume(self._volume)
        self._backend.play()
        if duration_ms is None:
            duration_ms = self._backend.get_length_ms()
        self._current_path = command.path
        self._started_at = self._now()
        self._paused_at = None
        self._paused_total = 0.0
        self._state = EngineState.PLAYING
        self._emit(TrackStarted(index=command.index, duration_ms=duration_ms))

    def _handle_toggle(self) -> None:
        if self._state is EngineState.PLAYING:
            self._backend.set_paused(True)
            self._paused_at = self._now()
            self._state = EngineState.PAUSED
            self._emit(PauseChanged(paused=True))
        elif self._state is EngineState.PAUSED:
            self._backend.set_paused(False)
            if self._paused_at is not None:
                self._paused_total += self._now() - self._paused_at
            self._paused_at = None
            self._state = EngineState.PLAYING
            self._emit(PauseChanged(paused=False))

    def _handle_volume(self, level: float) -> None:
        self._volume = level
        if self._state in (EngineState.PLAYING, EngineState.PAUSED):
            self._backend.set_volume(level)

    # --- Stream bookkeeping ---
    def _check_stream(self) -> None:
        if self._state not in (EngineState.PLAYING, EngineState.PAUSED):
            return
        if self._backend.consume_end_reached():
            logger.info("Track ended path=%s", self._current_path)
            self._reset_stream()
            self._emit(TrackEnded())
            return
        if self._backend.consume_error():
            path = self._current_path
            logger.error("Decoder/output error while playing %s", path)
            self._reset_stream()
            self._emit(Error(f"Playback error: {path}"))
            return
        self._emit(Progress(position_ms=self.position_ms()))

    def position_ms(self) -> int:
        """Elapsed playback time excluding paused intervals."""
        if self._state not in (EngineState.PLAYING, EngineState.PAUSED):
            return 0
        reference = self._paused_at if self._paused_at is not None else self._now()
        elapsed = reference - self._started_at - self._paused_total
        return max(0, int(elapsed * 1000))

    def _unload(self) -> None:
        if self._state in (EngineState.PLAYING, EngineState.PAUSED):
            self._backend.stop()
        self._reset_stream()

    def _fail(self, message: str) -> None:
        self._reset_stream()
        self._emit(Error(message))

    def _reset_stream(self) -> None:
        self._state = EngineState.IDLE
        self._current_path = None
        self._started_at = 0.0
        self._paused_at = None
        self._paused_total = 0.0
