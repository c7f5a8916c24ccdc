"""Audio file discovery for the track list."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from waveplay.metadata import format_display_title, get_track_meta
from waveplay.models import Track

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".mp3", ".flac", ".ogg", ".wav"}


def _is_supported(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def _iter_files(root: Path, recursive: bool) -> Iterator[Path]:
    if not recursive:
        yield from sorted(p for p in root.iterdir() if p.is_file())
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            yield Path(dirpath) / name


def _track_from_path(track_id: int, path: Path) -> Track:
    meta = get_track_meta(path)
    title = format_display_title(path, meta)
    return Track(id=track_id, path=path, duration_ms=meta.duration_ms, title=title)


def scan_directory(root: Path, recursive: bool = True) -> list[Track]:
    """Return every supported audio file under root, in discovery order."""
    if not root.is_dir():
        logger.warning("Music directory not found: %s", root)
        return []
    tracks: list[Track] = []
    for path in _iter_files(root, recursive):
        if not _is_supported(path):
            continue
        tracks.append(_track_from_path(len(tracks), path))
    logger.info("Scanned %s: %d tracks", root, len(tracks))
    return tracks
