"""Audio metadata helpers for track display and format probing."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError

logger = logging.getLogger(__name__)


class UnsupportedFormatError(Exception):
    """Raised when a file is not a decodable audio container."""


@dataclass(frozen=True)
class TrackMeta:
    artist: str | None
    title: str | None
    duration_ms: int | None = None


_TRACK_META_CACHE: dict[Path, TrackMeta] = {}


def _extract_text(value: object | None) -> str | None:
    if value is None:
        return None
    if hasattr(value, "text"):
        value = getattr(value, "text", value)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    else:
        text = str(value)
    text = text.strip()
    return text or None


def _read_tag(tags: object | None, keys: tuple[str, ...]) -> str | None:
    if tags is None:
        return None
    getter = getattr(tags, "get", None)
    if getter is None:
        return None
    for key in keys:
        try:
            value = getter(key)
        except (KeyError, ValueError):
            continue
        text = _extract_text(value)
        if text:
            return text
    return None


def _length_ms(audio: object) -> Optional[int]:
    info = getattr(audio, "info", None)
    length = getattr(info, "length", None)
    if not isinstance(length, (int, float)) or length <= 0:
        return None
    return int(round(length * 1000))


def probe_audio(path: Path) -> Optional[int]:
    """Return the duration in ms of a supported file, or None if unknown.

    Raises UnsupportedFormatError when mutagen does not recognise the
    container or finds it corrupt. Errors opening the file propagate as
    OSError so callers can tell them apart.
    """
    with open(path, "rb"):
        pass
    try:
        audio = MutagenFile(path)
    except MutagenError as exc:
        raise UnsupportedFormatError(str(path)) from exc
    if audio is None:
        raise UnsupportedFormatError(str(path))
    return _length_ms(audio)


def read_track_meta(path: Path) -> TrackMeta:
    """Best-effort metadata extraction with safe fallbacks."""
    try:
        audio = MutagenFile(path)
    except (MutagenError, OSError):
        logger.debug("No readable tags in %s", path)
        return TrackMeta(artist=None, title=None)
    if not audio:
        return TrackMeta(artist=None, title=None)
    tags = getattr(audio, "tags", None)
    artist = _read_tag(tags, ("artist", "ARTIST", "TPE1", "TPE2"))
    title = _read_tag(tags, ("title", "TITLE", "TIT2"))
    return TrackMeta(artist=artist, title=title, duration_ms=_length_ms(audio))


def get_track_meta(path: Path) -> TrackMeta:
    cached = _TRACK_META_CACHE.get(path)
    if cached is not None:
        return cached
    meta = read_track_meta(path)
    _TRACK_META_CACHE[path] = meta
    return meta


def format_display_title(path: Path, meta: TrackMeta | None = None) -> str:
    if meta and meta.title:
        if meta.artist:
            return f"{meta.artist} – {meta.title}"
        return meta.title
    return path.name
