"""Library domain - track records and the upload step that creates them."""

from .models import UNKNOWN_ARTIST, Track
from .upload import track_from_file, tracks_from_files

__all__ = [
    "UNKNOWN_ARTIST",
    "Track",
    "track_from_file",
    "tracks_from_files",
]
