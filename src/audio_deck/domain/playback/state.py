"""
Playback state machine.

``transition(state, event)`` is a pure function returning the next state and
the list of effects the controller must apply to the media primitive. It
performs no I/O, which keeps every race (stale callbacks, pause while a play
command is in flight, overlapping loads) testable without a player.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Union

from .conditions import PlaybackBlocked, PlaybackCondition, TrackUnplayable


class PlaybackStatus(str, Enum):
    IDLE = "idle"  # No track bound, or the bound track failed
    LOADING = "loading"  # Source assigned, waiting for metadata or play confirmation
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"  # Finished, position at end


@dataclass(frozen=True)
class PlaybackState:
    """Immutable playback state.

    ``generation`` increases on every bind. Media callbacks tagged with any
    other generation belong to a superseded bind and are ignored.
    """

    status: PlaybackStatus = PlaybackStatus.IDLE
    track_id: Optional[int] = None
    requested_autoplay: bool = False
    generation: int = 0
    last_error: Optional[PlaybackCondition] = None


# Events ----------------------------------------------------------------


@dataclass(frozen=True)
class TrackSelected:
    track_id: int
    source: str


@dataclass(frozen=True)
class PlayRequested:
    pass


@dataclass(frozen=True)
class PauseRequested:
    pass


@dataclass(frozen=True)
class MediaEvent:
    """Base for callbacks delivered by the media primitive."""

    generation: int


@dataclass(frozen=True)
class MediaReady(MediaEvent):
    duration: float


@dataclass(frozen=True)
class MediaPlaying(MediaEvent):
    pass


@dataclass(frozen=True)
class MediaPaused(MediaEvent):
    pass


@dataclass(frozen=True)
class PlayBlocked(MediaEvent):
    reason: str


@dataclass(frozen=True)
class MediaTick(MediaEvent):
    current_time: float
    duration: float


@dataclass(frozen=True)
class MediaEnded(MediaEvent):
    pass


@dataclass(frozen=True)
class MediaFailed(MediaEvent):
    reason: str
    title: str = ""


Event = Union[
    TrackSelected,
    PlayRequested,
    PauseRequested,
    MediaReady,
    MediaPlaying,
    MediaPaused,
    PlayBlocked,
    MediaTick,
    MediaEnded,
    MediaFailed,
]


# Effects ---------------------------------------------------------------


@dataclass(frozen=True)
class StopMedia:
    pass


@dataclass(frozen=True)
class BindSource:
    source: str
    generation: int


@dataclass(frozen=True)
class PlayMedia:
    generation: int


@dataclass(frozen=True)
class PauseMedia:
    pass


@dataclass(frozen=True)
class ResetProgress:
    pass


@dataclass(frozen=True)
class SetDuration:
    duration: float


@dataclass(frozen=True)
class ReportProgress:
    current_time: float
    duration: float


Effect = Union[
    StopMedia,
    BindSource,
    PlayMedia,
    PauseMedia,
    ResetProgress,
    SetDuration,
    ReportProgress,
]

Transition = tuple[PlaybackState, list[Effect]]

# States from which a play command may be issued to a loaded source
_RESUMABLE = (PlaybackStatus.PAUSED, PlaybackStatus.ENDED)


def _on_track_selected(state: PlaybackState, event: TrackSelected) -> Transition:
    generation = state.generation + 1
    new_state = replace(
        state,
        status=PlaybackStatus.LOADING,
        track_id=event.track_id,
        generation=generation,
        last_error=None,
    )
    return new_state, [StopMedia(), ResetProgress(), BindSource(event.source, generation)]


def _on_play_requested(state: PlaybackState, event: PlayRequested) -> Transition:
    if state.status is PlaybackStatus.PLAYING:
        return state, []

    new_state = replace(state, requested_autoplay=True)
    if state.status in _RESUMABLE:
        return replace(new_state, last_error=None), [PlayMedia(state.generation)]

    # Loading: the ready callback issues the play. Idle: nothing bound.
    return new_state, []


def _on_pause_requested(state: PlaybackState, event: PauseRequested) -> Transition:
    if state.status is PlaybackStatus.PLAYING:
        return (
            replace(state, status=PlaybackStatus.PAUSED, requested_autoplay=False),
            [PauseMedia()],
        )
    return replace(state, requested_autoplay=False), []


def _on_ready(state: PlaybackState, event: MediaReady) -> Transition:
    if state.status is not PlaybackStatus.LOADING:
        return state, []

    effects: list[Effect] = [SetDuration(event.duration)]
    if state.requested_autoplay:
        # Stay in Loading until the primitive confirms playback
        return state, effects + [PlayMedia(state.generation)]
    return replace(state, status=PlaybackStatus.PAUSED), effects


def _on_playing(state: PlaybackState, event: MediaPlaying) -> Transition:
    if state.status in (PlaybackStatus.PLAYING, PlaybackStatus.IDLE):
        return state, []

    if not state.requested_autoplay:
        # Paused while the play command was in flight
        return replace(state, status=PlaybackStatus.PAUSED), [PauseMedia()]
    return replace(state, status=PlaybackStatus.PLAYING, last_error=None), []


def _on_paused(state: PlaybackState, event: MediaPaused) -> Transition:
    if state.status is not PlaybackStatus.PLAYING:
        return state, []
    return replace(state, status=PlaybackStatus.PAUSED, requested_autoplay=False), []


def _on_play_blocked(state: PlaybackState, event: PlayBlocked) -> Transition:
    if state.status in (PlaybackStatus.PLAYING, PlaybackStatus.IDLE):
        return state, []

    status = PlaybackStatus.PAUSED if state.status is PlaybackStatus.LOADING else state.status
    return (
        replace(
            state,
            status=status,
            requested_autoplay=False,
            last_error=PlaybackBlocked(reason=event.reason),
        ),
        [],
    )


def _on_tick(state: PlaybackState, event: MediaTick) -> Transition:
    if state.status is PlaybackStatus.IDLE:
        return state, []
    return state, [ReportProgress(event.current_time, event.duration)]


def _on_ended(state: PlaybackState, event: MediaEnded) -> Transition:
    if state.status is not PlaybackStatus.PLAYING:
        return state, []
    return replace(state, status=PlaybackStatus.ENDED, requested_autoplay=False), []


def _on_failed(state: PlaybackState, event: MediaFailed) -> Transition:
    condition = TrackUnplayable(
        track_id=state.track_id, title=event.title, reason=event.reason
    )
    # requested_autoplay survives so that skipping to another track keeps playing
    new_state = replace(state, status=PlaybackStatus.IDLE, last_error=condition)
    return new_state, [StopMedia(), ResetProgress()]


_HANDLERS: dict[type, Callable[[PlaybackState, Event], Transition]] = {
    TrackSelected: _on_track_selected,
    PlayRequested: _on_play_requested,
    PauseRequested: _on_pause_requested,
    MediaReady: _on_ready,
    MediaPlaying: _on_playing,
    MediaPaused: _on_paused,
    PlayBlocked: _on_play_blocked,
    MediaTick: _on_tick,
    MediaEnded: _on_ended,
    MediaFailed: _on_failed,
}


def is_stale(state: PlaybackState, event: Event) -> bool:
    """True for media callbacks that belong to a superseded bind."""
    return isinstance(event, MediaEvent) and event.generation != state.generation


def transition(state: PlaybackState, event: Event) -> Transition:
    """Compute the next state and the effects to apply.

    Raises:
        TypeError: If ``event`` is not a known event type
    """
    if is_stale(state, event):
        return state, []

    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown playback event: {event!r}")
    return handler(state, event)
