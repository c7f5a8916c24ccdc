"""Responsive screen layout.

The screen is a stack of horizontal bands, top to bottom::

    now playing        5 rows (3 when height < 20)
    middle             remainder, at least 5 rows
                       track list 55% | visualization 45% (hidden below 80 cols)
    playback control   5 rows (4 when height < 20)
    status bar         1 row

When the terminal is shorter than the bands need, the now-playing band gives
up rows first, then the playback-control band, each keeping one row. The
status bar always keeps its row at the bottom edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

COMPACT_WIDTH = 80
SMALL_HEIGHT = 20
MIN_MIDDLE_HEIGHT = 5
STATUS_BAR_HEIGHT = 1
TRACK_LIST_PERCENT = 55


@dataclass(frozen=True)
class Region:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class AppLayout:
    now_playing: Region
    track_list: Region
    visualization: Optional[Region]
    playback_control: Region
    status_bar: Region

    @property
    def compact(self) -> bool:
        return self.visualization is None


def is_compact(width: int) -> bool:
    return width < COMPACT_WIDTH


def _band_heights(height: int) -> tuple[int, int, int, int]:
    small = height < SMALL_HEIGHT
    top = 3 if small else 5
    controls = 4 if small else 5
    status = min(STATUS_BAR_HEIGHT, height)
    deficit = top + MIN_MIDDLE_HEIGHT + controls + status - height
    if deficit > 0:
        take = min(deficit, max(0, top - 1))
        top -= take
        deficit -= take
    if deficit > 0:
        take = min(deficit, max(0, controls - 1))
        controls -= take
        deficit -= take
    middle = height - top - controls - status
    if middle < 0:
        # Below the one-row-per-band floor: fill top-down until rows run out.
        available = height - status
        top = min(top, available)
        controls = min(controls, available - top)
        middle = 0
    return top, middle, controls, status


def calculate(width: int, height: int) -> AppLayout:
    """Compute region geometry for a terminal of the given size."""
    width = max(0, width)
    height = max(0, height)
    top, middle, controls, status = _band_heights(height)

    now_playing = Region(0, 0, width, top)
    middle_band = Region(0, now_playing.bottom, width, middle)
    playback_control = Region(0, middle_band.bottom, width, controls)
    status_bar = Region(0, height - status, width, status)

    if is_compact(width):
        track_list = middle_band
        visualization = None
    else:
        list_width = width * TRACK_LIST_PERCENT // 100
        track_list = Region(0, middle_band.y, list_width, middle)
        visualization = Region(list_width, middle_band.y, width - list_width, middle)

    return AppLayout(
        now_playing=now_playing,
        track_list=track_list,
        visualization=visualization,
        playback_control=playback_control,
        status_bar=status_bar,
    )


class LayoutCache:
    """Single-entry memo keyed by the most recent terminal size."""

    def __init__(self) -> None:
        self._key: Optional[tuple[int, int]] = None
        self._layout: Optional[AppLayout] = None
        self.misses = 0

    def get(self, width: int, height: int) -> AppLayout:
        key = (width, height)
        if self._layout is None or key != self._key:
            self._layout = calculate(width, height)
            self._key = key
            self.misses += 1
        return self._layout
