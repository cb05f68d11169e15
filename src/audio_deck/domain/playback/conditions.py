"""
Recoverable playback conditions.

These are values stored on the playback state and published in snapshots,
not exceptions. The controller stays in a valid state after every one.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PlaybackCondition:
    """Base class for conditions reported through ``last_error``."""

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class PlaybackBlocked(PlaybackCondition):
    """The runtime refused to start playback. Retrying play() may succeed."""

    reason: str = ""

    @property
    def message(self) -> str:
        if self.reason:
            return f"Playback was blocked: {self.reason}"
        return "Playback was blocked"


@dataclass(frozen=True)
class TrackUnplayable(PlaybackCondition):
    """A track could not be decoded or opened. Skip to another track."""

    track_id: Optional[int] = None
    title: str = ""
    reason: str = ""

    @property
    def message(self) -> str:
        text = f"Cannot play '{self.title}'"
        if self.reason:
            text += f": {self.reason}"
        return text


@dataclass(frozen=True)
class EmptyCatalog(PlaybackCondition):
    """A playback command arrived with no tracks loaded. Never published."""

    command: str = ""

    @property
    def message(self) -> str:
        return f"Ignored '{self.command}': no tracks loaded"
