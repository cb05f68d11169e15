"""
Turn user-selected files into Track records.

Titles come from the file name and the artist is always "Unknown Artist";
no tag reading is attempted.
"""

from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from .models import UNKNOWN_ARTIST, Track


def track_from_file(path: Path) -> Track:
    """Build a Track for a single file without checking that it exists."""
    path = path.expanduser()
    # Title is the name the user picked, even when it is a symlink
    return Track(title=path.name, artist=UNKNOWN_ARTIST, source=str(path.resolve()))


def tracks_from_files(
    paths: Iterable[str | Path],
    supported_formats: Optional[Iterable[str]] = None,
) -> list[Track]:
    """Build Track records for the given files, preserving selection order.

    Args:
        paths: Files chosen by the user, in selection order
        supported_formats: Optional list of accepted extensions (".mp3", ...).
            When given, files with other extensions are skipped.

    Returns:
        List of Track records without ids (the catalog assigns them)
    """
    allowed = None
    if supported_formats is not None:
        allowed = {ext.lower() for ext in supported_formats}

    tracks: list[Track] = []
    for raw_path in paths:
        path = Path(raw_path).expanduser()

        if not path.exists():
            logger.warning(f"Skipping missing file: {path}")
            continue
        if path.is_dir():
            logger.warning(f"Skipping directory: {path}")
            continue
        if allowed is not None and path.suffix.lower() not in allowed:
            logger.warning(f"Skipping unsupported format: {path}")
            continue

        tracks.append(track_from_file(path))

    logger.debug(f"Prepared {len(tracks)} track(s) from upload")
    return tracks
