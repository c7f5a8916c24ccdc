"""VLC-backed audio output device."""

from __future__ import annotations

from typing import Any, Optional, cast
import logging
import threading

logger = logging.getLogger(__name__)

vlc: Any | None = None
_VLC_IMPORT_ERROR: Optional[Exception] = None


class AudioDeviceError(RuntimeError):
    """Raised when no audio output can be initialised."""


def _load_vlc() -> None:
    global vlc
    global _VLC_IMPORT_ERROR
    if vlc is not None or _VLC_IMPORT_ERROR is not None:
        return
    try:
        import vlc as vlc_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        vlc = None
        _VLC_IMPORT_ERROR = exc
    else:
        vlc = cast(Any, vlc_module)
        _VLC_IMPORT_ERROR = None


class VlcPlayer:
    """Thin wrapper around python-vlc's MediaPlayer.

    Only the playback engine thread calls into an instance once it has been
    constructed. The end-reached and error flags are set from libvlc's own
    callback thread, hence the threading.Event fields.
    """

    def __init__(self) -> None:
        _load_vlc()
        if vlc is None:
            raise AudioDeviceError(
                "Audio output is unavailable. Install VLC and the python-vlc package."
            ) from _VLC_IMPORT_ERROR
        instance = cast(Any, vlc).Instance()
        if instance is None:
            raise AudioDeviceError(
                "Audio output is unavailable: libvlc failed to start."
            )
        self._instance = instance
        self._player = self._instance.media_player_new()
        self._current_media: Optional[str] = None
        self._end_reached = threading.Event()
        self._errored = threading.Event()
        self._attach_events()

    def _attach_events(self) -> None:
        if vlc is None:
            return
        vlc_module = cast(Any, vlc)
        try:
            event_manager = self._player.event_manager()
            event_manager.event_attach(
                vlc_module.EventType.MediaPlayerEndReached, self._handle_end_reached
            )
            event_manager.event_attach(
                vlc_module.EventType.MediaPlayerEncounteredError, self._handle_error
            )
        except Exception:
            logger.warning("VLC event manager unavailable; relying on state polling")

    def _handle_end_reached(self, event: object) -> None:
        del event
        self._end_reached.set()

    def _handle_error(self, event: object) -> None:
        del event
        self._errored.set()

    @property
    def current_media(self) -> Optional[str]:
        """Return the current media path if loaded."""
        return self._current_media

    def consume_end_reached(self) -> bool:
        """Return True if the stream drained since the last check."""
        if self._end_reached.is_set():
            self._end_reached.clear()
            return True
        return "ended" in self.get_state()

    def consume_error(self) -> bool:
        """Return True if libvlc reported a decode/output error since last check."""
        if self._errored.is_set():
            self._errored.clear()
            return True
        return "error" in self.get_state()

    def signal_end_reached(self) -> None:
        """Manually flag end reached (for tests)."""
        self._end_reached.set()

    def load(self, path: str) -> None:
        """Load media into the player."""
        media = self._instance.media_new(path)
        self._player.set_media(media)
        self._current_media = path
        self._end_reached.clear()
        self._errored.clear()

    def play(self) -> None:
        """Start playback."""
        if self._player.play() == -1:
            raise RuntimeError(f"VLC could not start playback of {self._current_media}")

    def set_paused(self, paused: bool) -> None:
        """Pause or resume the loaded stream."""
        self._player.set_pause(1 if paused else 0)

    def stop(self) -> None:
        """Stop playback and drop buffered audio."""
        self._player.stop()
        self._current_media = None

    def set_volume(self, level: float) -> None:
        """Set gain where 1.0 is unity; VLC accepts 0-200."""
        self._player.audio_set_volume(max(0, min(200, int(round(level * 100)))))

    def get_state(self) -> str:
        """Return a best-effort playback state string."""
        try:
            state = self._player.get_state()
        except Exception:
            return "unknown"
        if state is None:
            return "unknown"
        name = getattr(state, "name", None)
        if isinstance(name, str):
            return name.lower()
        return str(state).lower()

    def get_length_ms(self) -> Optional[int]:
        """Return the media length in ms, if available."""
        try:
            length = self._player.get_length()
        except Exception:
            return None
        if length is None or length <= 0:
            return None
        return int(length)
