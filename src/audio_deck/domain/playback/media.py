"""
Interfaces between the playback controller and a media output.

A media primitive decodes and plays one source at a time. Every bind is
tagged with a generation number chosen by the controller, and every
callback echoes the generation of the bind it belongs to so the controller
can drop callbacks from superseded binds.

Implementations must never invoke listener callbacks from inside
bind/play/pause/set_volume; results are delivered later, in arrival order,
on the same thread that issues commands.
"""

from typing import Protocol


class MediaListener(Protocol):
    """Receives callbacks from a media primitive."""

    def on_ready(self, generation: int, duration: float) -> None:
        """Source metadata loaded; playback can start."""

    def on_playing(self, generation: int) -> None:
        """A play command took effect."""

    def on_paused(self, generation: int) -> None:
        """Playback stopped advancing without a pause command from the listener."""

    def on_play_blocked(self, generation: int, reason: str) -> None:
        """A play command was rejected."""

    def on_tick(self, generation: int, current_time: float, duration: float) -> None:
        """Clock update."""

    def on_ended(self, generation: int) -> None:
        """Playback reached the end of the source."""

    def on_error(self, generation: int, reason: str) -> None:
        """The source could not be opened or decoded."""


class MediaPrimitive(Protocol):
    """A single audio output bound to one source at a time."""

    def subscribe(self, listener: MediaListener) -> None: ...

    def bind(self, source: str, generation: int) -> None:
        """Stop whatever is playing and start loading ``source`` paused."""

    def stop(self) -> None:
        """Halt output of the current source."""

    def play(self, generation: int) -> None: ...

    def pause(self) -> None: ...

    def set_volume(self, volume: float) -> None:
        """Set gain, 0.0 - 1.0."""
