"""
Ordered, append-only track catalog.

Tracks get a stable id when appended. Positions are only used for display
and for computing neighbors with wraparound.
"""

from typing import Iterable, Iterator, Optional

from loguru import logger

from audio_deck.domain.library.models import Track


class TrackCatalog:
    """Insertion-ordered collection of tracks with stable ids."""

    def __init__(self) -> None:
        self._tracks: list[Track] = []
        self._positions: dict[int, int] = {}
        self._next_id = 1

    def append(self, tracks: Iterable[Track]) -> list[Track]:
        """Add tracks to the end, preserving arrival order.

        Any id already set on an incoming track is replaced.

        Returns:
            The appended tracks with their assigned ids
        """
        added: list[Track] = []
        for track in tracks:
            stored = track._replace(id=self._next_id)
            self._next_id += 1
            self._positions[stored.id] = len(self._tracks)
            self._tracks.append(stored)
            added.append(stored)

        if added:
            logger.debug(f"Catalog grew by {len(added)} to {len(self._tracks)} tracks")
        return added

    def get(self, index: int) -> Optional[Track]:
        """Get the track at a position, or None when out of range."""
        if 0 <= index < len(self._tracks):
            return self._tracks[index]
        return None

    def get_by_id(self, track_id: int) -> Optional[Track]:
        index = self._positions.get(track_id)
        return None if index is None else self._tracks[index]

    def index_of(self, track_id: int) -> Optional[int]:
        """Resolve a track id to its current position."""
        return self._positions.get(track_id)

    def length(self) -> int:
        return len(self._tracks)

    def next_index(self, current: int) -> int:
        """Position after ``current``, wrapping to 0 after the last entry.

        Raises:
            IndexError: If the catalog is empty
        """
        if not self._tracks:
            raise IndexError("next_index on empty catalog")
        return (current + 1) % len(self._tracks)

    def prev_index(self, current: int) -> int:
        """Position before ``current``, wrapping to the last entry from 0.

        Raises:
            IndexError: If the catalog is empty
        """
        if not self._tracks:
            raise IndexError("prev_index on empty catalog")
        return (current - 1) % len(self._tracks)

    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(tuple(self._tracks))
