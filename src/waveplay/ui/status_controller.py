"""Status bar controller for the player."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from rich.text import Text

from waveplay.theme import DEFAULT_THEME, Theme
from waveplay.ui.formatters import ellipsize

KEY_HINTS: tuple[tuple[str, str], ...] = (
    ("q", "quit"),
    ("↑↓", "navigate"),
    ("Enter", "play"),
    ("Space", "pause"),
    ("[ ]", "prev/next"),
    ("+/-", "volume"),
)

HINT_SEPARATOR = "  |  "


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str
    until: Optional[float]


def render_hints(hints: Sequence[tuple[str, str]] = KEY_HINTS) -> str:
    return HINT_SEPARATOR.join(f"{key}:{desc}" for key, desc in hints)


class StatusController:
    """Transient status messages with a key-hint fallback."""

    def __init__(self, now: Callable[[], float], theme: Theme = DEFAULT_THEME) -> None:
        self._now = now
        self._theme = theme
        self._message: Optional[StatusMessage] = None

    def show_message(
        self,
        text: str,
        *,
        level: str = "info",
        timeout: Optional[float] = None,
    ) -> None:
        if timeout is None:
            timeout = 6.0 if level in ("warn", "error") else 3.0
        until = None if timeout == 0 else self._now() + max(0.0, timeout)
        self._message = StatusMessage(text=text, level=level, until=until)

    def clear_message(self) -> None:
        self._message = None

    @property
    def message(self) -> Optional[StatusMessage]:
        return self._current_message()

    def render_line(self, width: int) -> Text:
        message = self._current_message()
        if message:
            line = ellipsize(message.text, width)
            if message.level == "warn":
                return Text(line, style=self._theme.warn)
            if message.level == "error":
                return Text(line, style=self._theme.error)
            return Text(line, style=self._theme.text)
        return Text(ellipsize(render_hints(), width), style=self._theme.text_dim)

    def _current_message(self) -> Optional[StatusMessage]:
        if not self._message:
            return None
        if self._message.until is None or self._message.until > self._now():
            return self._message
        self._message = None
        return None
