from __future__ import annotations

from typing import Iterable, Optional

from waveplay.models import PlaybackStatus

SPARK_LEVELS = "▁▂▃▄▅▆▇█"
WAVE_MAX = 100

STATUS_ICONS = {
    PlaybackStatus.PLAYING: "▶",
    PlaybackStatus.PAUSED: "⏸",
    PlaybackStatus.STOPPED: "⏹",
}


def format_time_ms(value: Optional[int]) -> str:
    if value is None:
        return "--:--"
    total_seconds = max(0, value // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_progress(position_ms: int, total_ms: Optional[int]) -> str:
    """Return ``MM:SS / MM:SS``, or only the position when the total is unknown."""
    if total_ms is None:
        return format_time_ms(position_ms)
    return f"{format_time_ms(position_ms)} / {format_time_ms(total_ms)}"


def progress_ratio(position_ms: int, total_ms: Optional[int]) -> float:
    if not total_ms or total_ms <= 0:
        return 0.0
    return max(0.0, min(1.0, position_ms / float(total_ms)))


def render_progress_bar(width: int, ratio: float) -> str:
    if width <= 0:
        return ""
    if width <= 2:
        return "=" * width
    inner = width - 2
    filled = int(max(0.0, min(1.0, ratio)) * inner)
    return "[" + "=" * filled + "-" * (inner - filled) + "]"


def ellipsize(text: str, max_len: int) -> str:
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return "." * max_len
    return text[: max_len - 3] + "..."


def volume_percent(volume: float) -> int:
    return int(round(volume * 100))


def fit_samples(samples: Iterable[int], width: int) -> list[int]:
    """Return the newest ``width`` samples, left-padded with zeros."""
    if width <= 0:
        return []
    values = list(samples)[-width:]
    return [0] * (width - len(values)) + values


def render_bars(samples: list[int], height: int) -> str:
    """Render samples (0-100) as a multi-row sparkline with eighth-block steps."""
    if height <= 0 or not samples:
        return ""
    levels = [
        int(max(0, min(WAVE_MAX, value)) * height * 8 // WAVE_MAX) for value in samples
    ]
    lines: list[str] = []
    for row in range(height):
        floor = (height - 1 - row) * 8
        chars: list[str] = []
        for level in levels:
            cell = max(0, min(8, level - floor))
            chars.append(SPARK_LEVELS[cell - 1] if cell else " ")
        lines.append("".join(chars))
    return "\n".join(lines)


def visible_window(count: int, selected: int, height: int) -> tuple[int, int]:
    """Return the [start, end) slice of rows to show so ``selected`` is visible."""
    if count <= 0 or height <= 0:
        return (0, 0)
    if count <= height:
        return (0, count)
    max_start = count - height
    start = max(0, min(selected - height // 2, max_start))
    return (start, start + height)
