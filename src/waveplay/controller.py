"""Application controller: UI state, event folding, key dispatch, rendering.

The controller never talks to the audio device. It mirrors playback state
from engine events and expresses user intent as commands, once per tick.
"""

from __future__ import annotations

from collections import deque
import logging
import math
import queue
import time
from typing import Callable, Iterable, Optional, Protocol

from waveplay.layout import AppLayout, LayoutCache
from waveplay.models import (
    Command,
    Error,
    Event,
    PauseChanged,
    Play,
    PlaybackStatus,
    Progress,
    SetVolume,
    TogglePlayPause,
    Track,
    TrackEnded,
    TrackStarted,
)
from waveplay.theme import DEFAULT_THEME, Theme
from waveplay.ui.frame import Frame
from waveplay.ui.status_controller import StatusController
from waveplay.ui.widgets import (
    RegionKind,
    render_now_playing,
    render_playback_control,
    render_status_bar,
    render_track_list,
    render_visualization,
)

logger = logging.getLogger(__name__)

WAVE_HISTORY = 80
VOLUME_STEP = 0.05
VOLUME_MIN = 0.0
VOLUME_MAX = 2.0
DEFAULT_TICK_INTERVAL = 0.2
QUIT_KEY = "q"

KEY_ACTIONS = {
    "q": "quit",
    "down": "select_next",
    "j": "select_next",
    "up": "select_previous",
    "k": "select_previous",
    "enter": "play_selected",
    "space": "toggle_pause",
    " ": "toggle_pause",
    "right_square_bracket": "play_next",
    "]": "play_next",
    "left_square_bracket": "play_previous",
    "[": "play_previous",
    "plus": "volume_up",
    "+": "volume_up",
    "minus": "volume_down",
    "-": "volume_down",
}


class Terminal(Protocol):
    """What the controller needs from the screen."""

    def draw(self, render: Callable[[Frame], None]) -> None: ...

    def poll_input(self, timeout: float) -> Optional[str]: ...


def clamp_volume(level: float) -> float:
    return round(max(VOLUME_MIN, min(VOLUME_MAX, level)), 2)


class PlayerController:
    """Owns the track list, selection and the mirrored playback state."""

    def __init__(
        self,
        tracks: Iterable[Track],
        commands: "queue.Queue[Command]",
        events: "queue.Queue[Event]",
        *,
        volume: float = 1.0,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        now: Callable[[], float] = time.monotonic,
        theme: Theme = DEFAULT_THEME,
    ) -> None:
        self.tracks: list[Track] = list(tracks)
        self.selected = 0
        self.playing: Optional[int] = None
        self.status = PlaybackStatus.STOPPED
        self.position_ms = 0
        self.total_ms: Optional[int] = None
        self.volume = clamp_volume(volume)
        self.wave: deque[int] = deque([0] * WAVE_HISTORY, maxlen=WAVE_HISTORY)
        self.running = True
        self.tick_interval = tick_interval
        self.layout_cache = LayoutCache()
        self.status_line = StatusController(now, theme)
        self._commands = commands
        self._events = events
        self._now = now
        self._theme = theme

    # --- Loop ---
    def start(self) -> None:
        """Align the engine gain with the initial volume."""
        self.send(SetVolume(self.volume))

    def run(self, terminal: Terminal) -> None:
        self.start()
        logger.info("Controller loop start tracks=%d", len(self.tracks))
        while self.running:
            self.tick(terminal)
        logger.info("Controller loop exit")

    def tick(self, terminal: Terminal) -> None:
        started = self._now()
        self.drain_events()
        terminal.draw(self.render)
        elapsed = self._now() - started
        key = terminal.poll_input(max(0.0, self.tick_interval - elapsed))
        if key is not None:
            self.handle_key(key)
        self.update_wave()

    def send(self, command: Command) -> None:
        self._commands.put(command)

    # --- Events ---
    def drain_events(self) -> int:
        count = 0
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return count
            self.apply_event(event)
            count += 1

    def apply_event(self, event: Event) -> None:
        if isinstance(event, TrackStarted):
            if not 0 <= event.index < len(self.tracks):
                logger.warning(
                    "Ignoring TrackStarted for unknown index %s", event.index
                )
                return
            self.playing = event.index
            self.status = PlaybackStatus.PLAYING
            self.position_ms = 0
            self.total_ms = event.duration_ms
        elif isinstance(event, Progress):
            if self.status is not PlaybackStatus.STOPPED:
                self.position_ms = event.position_ms
        elif isinstance(event, PauseChanged):
            if self.playing is not None:
                self.status = (
                    PlaybackStatus.PAUSED if event.paused else PlaybackStatus.PLAYING
                )
        elif isinstance(event, TrackEnded):
            self._advance_after_end()
        elif isinstance(event, Error):
            logger.error("Playback error: %s", event.message)
            self.status_line.show_message(event.message, level="error")
            self._mark_stopped()
        else:
            logger.warning("Ignoring unknown event %r", event)

    def _advance_after_end(self) -> None:
        finished = self.playing
        self._mark_stopped()
        if finished is None or finished + 1 >= len(self.tracks):
            return
        self.selected = finished + 1
        self._play(self.selected)

    def _mark_stopped(self) -> None:
        self.status = PlaybackStatus.STOPPED
        self.playing = None
        self.position_ms = 0
        self.total_ms = None

    # --- Keys ---
    def handle_key(self, key: str) -> None:
        action = KEY_ACTIONS.get(key)
        if action is None:
            return
        getattr(self, f"action_{action}")()

    def action_quit(self) -> None:
        self.running = False

    def action_select_next(self) -> None:
        if self.tracks:
            self.selected = min(self.selected + 1, len(self.tracks) - 1)

    def action_select_previous(self) -> None:
        if self.tracks:
            self.selected = max(self.selected - 1, 0)

    def action_play_selected(self) -> None:
        if self.tracks:
            self._play(self.selected)

    def action_toggle_pause(self) -> None:
        self.send(TogglePlayPause())

    def action_play_next(self) -> None:
        if not self.tracks:
            return
        self.selected = min(self.selected + 1, len(self.tracks) - 1)
        self._play(self.selected)

    def action_play_previous(self) -> None:
        if not self.tracks:
            return
        self.selected = max(self.selected - 1, 0)
        self._play(self.selected)

    def action_volume_up(self) -> None:
        self._set_volume(self.volume + VOLUME_STEP)

    def action_volume_down(self) -> None:
        self._set_volume(self.volume - VOLUME_STEP)

    def _set_volume(self, level: float) -> None:
        self.volume = clamp_volume(level)
        self.send(SetVolume(self.volume))

    def _play(self, index: int) -> None:
        track = self.tracks[index]
        self.send(Play(index=index, path=str(track.path)))

    # --- Visualization ---
    def wave_sample(self) -> int:
        if self.status is not PlaybackStatus.PLAYING:
            return 0
        t = self.position_ms / 1000.0
        value = (math.sin(t * 6.0) * 0.5 + 0.5) * 100.0 * min(self.volume, 1.0)
        return int(max(0.0, min(100.0, value)))

    def update_wave(self) -> None:
        self.wave.append(self.wave_sample())

    # --- Rendering ---
    def layout_for(self, width: int, height: int) -> AppLayout:
        return self.layout_cache.get(width, height)

    def render(self, frame: Frame) -> None:
        layout = self.layout_for(frame.width, frame.height)
        track = self.tracks[self.playing] if self.playing is not None else None
        frame.render(
            RegionKind.NOW_PLAYING,
            layout.now_playing,
            render_now_playing(
                layout.now_playing, status=self.status, track=track, theme=self._theme
            ),
        )
        frame.render(
            RegionKind.TRACK_LIST,
            layout.track_list,
            render_track_list(
                layout.track_list,
                tracks=self.tracks,
                selected=self.selected,
                playing=self.playing,
                theme=self._theme,
            ),
        )
        if layout.visualization is not None:
            frame.render(
                RegionKind.VISUALIZATION,
                layout.visualization,
                render_visualization(
                    layout.visualization,
                    samples=self.wave,
                    status=self.status,
                    theme=self._theme,
                ),
            )
        frame.render(
            RegionKind.PLAYBACK_CONTROL,
            layout.playback_control,
            render_playback_control(
                layout.playback_control,
                status=self.status,
                position_ms=self.position_ms,
                total_ms=self.total_ms,
                volume=self.volume,
                theme=self._theme,
            ),
        )
        frame.render(
            RegionKind.STATUS_BAR,
            layout.status_bar,
            render_status_bar(layout.status_bar, status=self.status_line),
        )
