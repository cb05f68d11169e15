"""Shared fixtures for playback tests."""

from typing import Any, Optional

import pytest

from audio_deck.domain.library.models import Track
from audio_deck.domain.playback.controller import PlaybackController


class FakeMedia:
    """Media primitive that records commands instead of playing audio.

    Tests deliver callbacks themselves through ``listener``, in whatever
    order a scenario needs.
    """

    def __init__(self) -> None:
        self.listener: Optional[Any] = None
        self.calls: list[tuple] = []
        self.volume: Optional[float] = None
        self.bound: list[tuple[str, int]] = []

    def subscribe(self, listener: Any) -> None:
        self.listener = listener

    def bind(self, source: str, generation: int) -> None:
        self.bound.append((source, generation))
        self.calls.append(("bind", source, generation))

    def stop(self) -> None:
        self.calls.append(("stop",))

    def play(self, generation: int) -> None:
        self.calls.append(("play", generation))

    def pause(self) -> None:
        self.calls.append(("pause",))

    def set_volume(self, volume: float) -> None:
        self.volume = volume
        self.calls.append(("set_volume", volume))

    @property
    def last_generation(self) -> int:
        return self.bound[-1][1]

    def play_calls(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "play"]


def _tracks(*titles: str) -> list[Track]:
    return [Track(title=title, source=f"/music/{title}.mp3") for title in titles]


@pytest.fixture
def media() -> FakeMedia:
    return FakeMedia()


@pytest.fixture
def controller(media: FakeMedia) -> PlaybackController:
    """Controller with an empty catalog."""
    return PlaybackController(media)


@pytest.fixture
def loaded_controller(media: FakeMedia) -> PlaybackController:
    """Controller with tracks A, B, C queued (A bound, loading)."""
    controller = PlaybackController(media)
    controller.add_tracks(_tracks("A", "B", "C"))
    return controller


@pytest.fixture
def make_tracks():
    """Factory for unsaved tracks: make_tracks("A", "B") -> [Track A, Track B]."""
    return _tracks
