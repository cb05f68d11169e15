"""
Track library domain models.

Contains data structures for representing playable tracks.
"""

from typing import NamedTuple, Optional

UNKNOWN_ARTIST = "Unknown Artist"


class Track(NamedTuple):
    """Represents a playable track.

    Tracks are never mutated once added to a catalog. The id is assigned by
    the catalog at append time and stays valid for the life of the catalog;
    tracks produced by the upload step carry ``id=None`` until then.
    """

    title: str
    source: str  # Absolute file path or URI handed to the media primitive
    artist: str = UNKNOWN_ARTIST
    id: Optional[int] = None
