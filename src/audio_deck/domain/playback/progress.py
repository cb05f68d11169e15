"""
Displayable playback progress derived from the media clock.
"""

import math
from typing import NamedTuple


class ProgressSnapshot(NamedTuple):
    """Immutable view of the playback clock."""

    current_time_seconds: float = 0.0
    duration_seconds: float = 0.0
    percent: float = 0.0


def _valid_seconds(value: float) -> float:
    """Map NaN, infinities and negatives to 0."""
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def compute_percent(current_time: float, duration: float) -> float:
    """Percentage of the track played, always within [0, 100]."""
    current_time = _valid_seconds(current_time)
    duration = _valid_seconds(duration)
    if duration <= 0:
        return 0.0
    return min(max(current_time / duration * 100, 0.0), 100.0)


class ProgressReporter:
    """Recomputes the progress snapshot on every clock update.

    Holds nothing but the last snapshot: no extrapolation, no buffering of
    missed ticks, and a fresh zero snapshot whenever a new track is bound.
    """

    def __init__(self) -> None:
        self._snapshot = ProgressSnapshot()

    @property
    def snapshot(self) -> ProgressSnapshot:
        return self._snapshot

    def on_track_bound(self) -> ProgressSnapshot:
        self._snapshot = ProgressSnapshot()
        return self._snapshot

    def on_metadata(self, duration: float) -> ProgressSnapshot:
        """Record the duration reported when a track becomes ready."""
        current = self._snapshot.current_time_seconds
        self._snapshot = ProgressSnapshot(
            current_time_seconds=current,
            duration_seconds=_valid_seconds(duration),
            percent=compute_percent(current, duration),
        )
        return self._snapshot

    def on_tick(self, current_time: float, total_duration: float) -> ProgressSnapshot:
        self._snapshot = ProgressSnapshot(
            current_time_seconds=_valid_seconds(current_time),
            duration_seconds=_valid_seconds(total_duration),
            percent=compute_percent(current_time, total_duration),
        )
        return self._snapshot


def format_time(seconds: float) -> str:
    """Format seconds to M:SS display."""
    seconds = _valid_seconds(seconds)
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
