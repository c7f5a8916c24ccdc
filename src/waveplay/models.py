"""Track, playback status and the engine command/event messages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class Track:
    """Represents a single scanned audio file."""

    id: int
    path: Path
    duration_ms: Optional[int] = None
    title: Optional[str] = None

    @property
    def display_title(self) -> str:
        if self.title:
            return self.title
        return self.path.name


class PlaybackStatus(Enum):
    """The controller's belief about what the engine is doing."""

    STOPPED = "stopped"
    PAUSED = "paused"
    PLAYING = "playing"


# Commands (controller -> engine)


@dataclass(frozen=True)
class Play:
    index: int
    path: str


@dataclass(frozen=True)
class TogglePlayPause:
    pass


@dataclass(frozen=True)
class SetVolume:
    level: float


Command = Union[Play, TogglePlayPause, SetVolume]


# Events (engine -> controller)


@dataclass(frozen=True)
class TrackStarted:
    index: int
    duration_ms: Optional[int]


@dataclass(frozen=True)
class Progress:
    position_ms: int


@dataclass(frozen=True)
class PauseChanged:
    paused: bool


@dataclass(frozen=True)
class TrackEnded:
    pass


@dataclass(frozen=True)
class Error:
    message: str


Event = Union[TrackStarted, Progress, PauseChanged, TrackEnded, Error]
