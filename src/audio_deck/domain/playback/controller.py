"""
Playback controller - owns the track catalog, the playback state machine and
the single media primitive handle.

All commands and media callbacks run on one thread. Commands are issued by
the UI; callbacks are delivered by the media primitive (for mpv, from its
``poll()`` in the UI loop). Each one is turned into an event, run through
``transition()``, and the resulting effects are applied to the primitive.
A fresh PlayerSnapshot is published to subscribers after every transition.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from loguru import logger

from audio_deck.domain.library.models import Track

from .catalog import TrackCatalog
from .conditions import EmptyCatalog, PlaybackCondition
from .media import MediaPrimitive
from .progress import ProgressReporter, ProgressSnapshot
from .state import (
    BindSource,
    Effect,
    Event,
    MediaEnded,
    MediaFailed,
    MediaPaused,
    MediaPlaying,
    MediaReady,
    MediaTick,
    PauseMedia,
    PauseRequested,
    PlayBlocked,
    PlaybackState,
    PlaybackStatus,
    PlayMedia,
    PlayRequested,
    ReportProgress,
    ResetProgress,
    SetDuration,
    StopMedia,
    TrackSelected,
    is_stale,
    transition,
)
from .volume import VolumeController


@dataclass(frozen=True)
class PlayerSnapshot:
    """Read-only view of the player published to the rendering layer."""

    status: PlaybackStatus
    current_index: Optional[int]
    current_track: Optional[Track]
    progress: ProgressSnapshot
    volume: float
    requested_autoplay: bool
    last_error: Optional[PlaybackCondition]

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING


SnapshotCallback = Callable[[PlayerSnapshot], None]


class PlaybackController:
    """Queue-based playback over a single media primitive."""

    def __init__(
        self,
        media: MediaPrimitive,
        catalog: Optional[TrackCatalog] = None,
        initial_volume: float = 1.0,
        auto_advance: bool = False,
    ) -> None:
        self._media = media
        self._catalog = catalog if catalog is not None else TrackCatalog()
        self._progress = ProgressReporter()
        self._volume = VolumeController(media, initial_volume)
        self._state = PlaybackState()
        self._auto_advance = auto_advance
        self._subscribers: list[SnapshotCallback] = []

        media.subscribe(self)

        if len(self._catalog):
            self._select(0, publish=False)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def catalog(self) -> TrackCatalog:
        return self._catalog

    def snapshot(self) -> PlayerSnapshot:
        current_index = None
        current_track = None
        if self._state.track_id is not None:
            current_index = self._catalog.index_of(self._state.track_id)
            current_track = self._catalog.get_by_id(self._state.track_id)

        return PlayerSnapshot(
            status=self._state.status,
            current_index=current_index,
            current_track=current_track,
            progress=self._progress.snapshot,
            volume=self._volume.volume,
            requested_autoplay=self._state.requested_autoplay,
            last_error=self._state.last_error,
        )

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Register a snapshot callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_tracks(self, tracks: Iterable[Track]) -> list[Track]:
        """Append tracks to the catalog.

        The first tracks added to an empty catalog are bound right away
        (paused), so there is always a current track once any exist.
        """
        was_empty = len(self._catalog) == 0
        added = self._catalog.append(tracks)
        if not added:
            return added

        logger.info(f"Added {len(added)} track(s) to the queue")
        if was_empty:
            self._select(0)
        else:
            self._publish()
        return added

    def select_track(self, index: int) -> PlayerSnapshot:
        """Bind the track at ``index``, keeping the current play/pause intention.

        Raises:
            IndexError: If the catalog is non-empty and ``index`` is out of range
        """
        if not len(self._catalog):
            return self._ignore("select_track")
        self._select(index)
        return self.snapshot()

    def play(self) -> PlayerSnapshot:
        if not len(self._catalog):
            return self._ignore("play")

        if self._state.status is PlaybackStatus.IDLE:
            # Nothing usable is bound (the last track failed): load it again
            self._dispatch(PlayRequested(), publish=False)
            self._select(self._current_index_or_zero())
            return self.snapshot()

        self._dispatch(PlayRequested())
        return self.snapshot()

    def pause(self) -> PlayerSnapshot:
        if not len(self._catalog):
            return self._ignore("pause")
        self._dispatch(PauseRequested())
        return self.snapshot()

    def toggle(self) -> PlayerSnapshot:
        """Play/pause button: pause while playing, play otherwise."""
        if self._state.status is PlaybackStatus.PLAYING:
            return self.pause()
        return self.play()

    def next(self) -> PlayerSnapshot:
        if not len(self._catalog):
            return self._ignore("next")
        self._select(self._catalog.next_index(self._current_index_or_zero()))
        return self.snapshot()

    def previous(self) -> PlayerSnapshot:
        if not len(self._catalog):
            return self._ignore("previous")
        self._select(self._catalog.prev_index(self._current_index_or_zero()))
        return self.snapshot()

    def set_volume(self, volume: float) -> PlayerSnapshot:
        """Set output volume (clamped to 0.0 - 1.0). Legal in every state."""
        self._volume.set_volume(volume)
        self._publish()
        return self.snapshot()

    def adjust_volume(self, delta: float) -> PlayerSnapshot:
        self._volume.adjust(delta)
        self._publish()
        return self.snapshot()

    # ------------------------------------------------------------------
    # Media callbacks
    # ------------------------------------------------------------------

    def on_ready(self, generation: int, duration: float) -> None:
        self._dispatch(MediaReady(generation, duration))

    def on_playing(self, generation: int) -> None:
        self._dispatch(MediaPlaying(generation))

    def on_paused(self, generation: int) -> None:
        self._dispatch(MediaPaused(generation))

    def on_play_blocked(self, generation: int, reason: str) -> None:
        self._dispatch(PlayBlocked(generation, reason))

    def on_tick(self, generation: int, current_time: float, duration: float) -> None:
        self._dispatch(MediaTick(generation, current_time, duration))

    def on_ended(self, generation: int) -> None:
        self._dispatch(MediaEnded(generation))

        ended_now = (
            generation == self._state.generation
            and self._state.status is PlaybackStatus.ENDED
        )
        if ended_now and self._auto_advance:
            logger.info("Track ended, advancing to next track")
            self.next()
            self.play()

    def on_error(self, generation: int, reason: str) -> None:
        title = ""
        if self._state.track_id is not None:
            track = self._catalog.get_by_id(self._state.track_id)
            title = track.title if track else ""
        self._dispatch(MediaFailed(generation, reason, title))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _current_index_or_zero(self) -> int:
        if self._state.track_id is None:
            return 0
        index = self._catalog.index_of(self._state.track_id)
        return 0 if index is None else index

    def _select(self, index: int, publish: bool = True) -> None:
        track = self._catalog.get(index)
        if track is None:
            raise IndexError(
                f"Track index {index} out of range (catalog has {len(self._catalog)})"
            )
        logger.info(f"Selecting track {index}: {track.title}")
        self._dispatch(TrackSelected(track.id, track.source), publish=publish)

    def _ignore(self, command: str) -> PlayerSnapshot:
        logger.debug(EmptyCatalog(command=command).message)
        return self.snapshot()

    def _dispatch(self, event: Event, publish: bool = True) -> None:
        if is_stale(self._state, event):
            logger.debug(
                f"Discarding stale {type(event).__name__} "
                f"(generation {event.generation}, current {self._state.generation})"
            )
            return

        previous = self._state
        self._state, effects = transition(previous, event)

        if previous.status is not self._state.status:
            logger.info(
                f"Playback {previous.status.value} -> {self._state.status.value} "
                f"on {type(event).__name__}"
            )
        if self._state.last_error is not None and self._state.last_error != previous.last_error:
            logger.warning(self._state.last_error.message)

        for effect in effects:
            self._apply(effect)

        if publish:
            self._publish()

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, StopMedia):
            self._media.stop()
        elif isinstance(effect, BindSource):
            self._media.bind(effect.source, effect.generation)
        elif isinstance(effect, PlayMedia):
            self._media.play(effect.generation)
        elif isinstance(effect, PauseMedia):
            self._media.pause()
        elif isinstance(effect, ResetProgress):
            self._progress.on_track_bound()
        elif isinstance(effect, SetDuration):
            self._progress.on_metadata(effect.duration)
        elif isinstance(effect, ReportProgress):
            self._progress.on_tick(effect.current_time, effect.duration)
        else:
            raise TypeError(f"Unknown playback effect: {effect!r}")

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot subscriber failed")
