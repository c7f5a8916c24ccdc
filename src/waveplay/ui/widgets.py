"""Region renderers.

Each function takes a slice of controller state plus the target region and
returns a rich renderable sized for it. None of them touch the terminal.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Sequence

from rich.console import RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from waveplay.layout import Region
from waveplay.models import PlaybackStatus, Track
from waveplay.theme import DEFAULT_THEME, Theme
from waveplay.ui.formatters import (
    STATUS_ICONS,
    ellipsize,
    fit_samples,
    format_progress,
    progress_ratio,
    render_bars,
    render_progress_bar,
    visible_window,
    volume_percent,
)
from waveplay.ui.status_controller import StatusController

WELCOME_TEXT = "Welcome to Music Player"
EMPTY_LIBRARY_TEXT = "No audio files found"
PLAYING_MARKER = "▶ "


class RegionKind(Enum):
    NOW_PLAYING = "now_playing"
    TRACK_LIST = "track_list"
    VISUALIZATION = "visualization"
    PLAYBACK_CONTROL = "playback_control"
    STATUS_BAR = "status_bar"


def inner_size(region: Region) -> tuple[int, int]:
    """Return the content size left inside a region once borders are drawn."""
    if region.height >= 3 and region.width >= 3:
        return (region.width - 2, region.height - 2)
    return (region.width, region.height)


def _boxed(
    body: RenderableType, title: str, region: Region, theme: Theme
) -> RenderableType:
    # Too small for a border: draw the content bare.
    if region.height < 3 or region.width < 3:
        return body
    return Panel(
        body,
        title=title,
        title_align="left",
        border_style=theme.style_border(),
        padding=(0, 0),
        height=region.height,
        width=region.width,
    )


def render_now_playing(
    region: Region,
    *,
    status: PlaybackStatus,
    track: Optional[Track],
    theme: Theme = DEFAULT_THEME,
) -> RenderableType:
    width, _ = inner_size(region)
    if track is None:
        body = Text(ellipsize(WELCOME_TEXT, width), style=theme.style_dim())
    else:
        icon = STATUS_ICONS[status]
        body = Text(ellipsize(f"{icon} {track.display_title}", width))
        body.stylize(theme.style_title())
    return _boxed(body, "Now Playing", region, theme)


def render_track_list(
    region: Region,
    *,
    tracks: Sequence[Track],
    selected: int,
    playing: Optional[int],
    theme: Theme = DEFAULT_THEME,
) -> RenderableType:
    width, height = inner_size(region)
    if not tracks:
        body = Text(ellipsize(EMPTY_LIBRARY_TEXT, width), style=theme.style_dim())
        return _boxed(body, "Tracks", region, theme)
    start, end = visible_window(len(tracks), selected, height)
    body = Text()
    for index in range(start, end):
        if index > start:
            body.append("\n")
        marker = PLAYING_MARKER if index == playing else "  "
        line = ellipsize(
            f"{marker}{index + 1:3}. {tracks[index].display_title}", width
        )
        if index == selected:
            selected_style = theme.style_highlight() + Style(reverse=True)
            body.append(line.ljust(width), style=selected_style)
        elif index == playing:
            body.append(line, style=theme.style_title())
        else:
            body.append(line, style=theme.style_text())
    return _boxed(body, f"Tracks ({len(tracks)})", region, theme)


def render_visualization(
    region: Region,
    *,
    samples: Iterable[int],
    status: PlaybackStatus,
    theme: Theme = DEFAULT_THEME,
) -> RenderableType:
    width, height = inner_size(region)
    values = fit_samples(samples, width)
    if status is not PlaybackStatus.PLAYING:
        values = [0] * len(values)
    style = theme.primary if status is PlaybackStatus.PLAYING else theme.text_dim
    body = Text(render_bars(values, height), style=style)
    return _boxed(body, "Visualizer", region, theme)


def control_hints(status: PlaybackStatus) -> str:
    if status is PlaybackStatus.PLAYING:
        return "Space: pause  [ ]: prev/next  +/-: volume"
    if status is PlaybackStatus.PAUSED:
        return "Space: resume  [ ]: prev/next  +/-: volume"
    return "Enter: play selected  +/-: volume"


def render_playback_control(
    region: Region,
    *,
    status: PlaybackStatus,
    position_ms: int,
    total_ms: Optional[int],
    volume: float,
    theme: Theme = DEFAULT_THEME,
) -> RenderableType:
    width, height = inner_size(region)
    timing = format_progress(position_ms, total_ms)
    volume_label = f"Vol {volume_percent(volume)}%"
    bar_width = max(0, width - len(timing) - len(volume_label) - 2)
    ratio = progress_ratio(position_ms, total_ms)
    body = Text()
    body.append(render_progress_bar(bar_width, ratio), style=theme.style_progress())
    body.append(f" {timing} ", style=theme.style_text())
    body.append(volume_label, style=theme.style_highlight())
    if height >= 2:
        body.append("\n")
        body.append(ellipsize(control_hints(status), width), style=theme.style_dim())
    return _boxed(body, "Playback", region, theme)


def render_status_bar(region: Region, *, status: StatusController) -> RenderableType:
    return status.render_line(region.width)
