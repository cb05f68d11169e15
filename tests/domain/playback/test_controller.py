"""Tests for PlaybackController - commands, callbacks and races."""

import pytest

from audio_deck.domain.playback.conditions import PlaybackBlocked, TrackUnplayable
from audio_deck.domain.playback.controller import PlaybackController, PlayerSnapshot
from audio_deck.domain.playback.state import PlaybackStatus


def start_playing(controller: PlaybackController, media) -> int:
    """Drive the bound track all the way to Playing. Returns its generation."""
    controller.play()
    generation = media.last_generation
    controller.on_ready(generation, 120.0)
    controller.on_playing(generation)
    return generation


class TestEmptyCatalog:
    """Commands with no tracks are silent no-ops."""

    def test_play_on_empty_catalog_is_silent(self, controller, media) -> None:
        before = controller.snapshot()
        after = controller.play()

        assert after == before
        assert after.status is PlaybackStatus.IDLE
        assert after.current_index is None
        assert after.last_error is None
        assert media.play_calls() == []

    @pytest.mark.parametrize("command", ["pause", "next", "previous", "toggle"])
    def test_other_commands_are_silent(self, controller, command) -> None:
        before = controller.snapshot()
        assert getattr(controller, command)() == before

    def test_select_track_is_silent(self, controller, media) -> None:
        controller.select_track(0)
        assert media.bound == []

    def test_nothing_is_published(self, controller) -> None:
        published = []
        controller.subscribe(published.append)
        controller.play()
        controller.next()
        assert published == []


class TestAddTracks:
    """Catalog growth through the controller."""

    def test_first_tracks_bind_index_zero_paused_intent(self, controller, media, make_tracks) -> None:
        controller.add_tracks(make_tracks("A", "B"))
        snapshot = controller.snapshot()

        assert snapshot.status is PlaybackStatus.LOADING
        assert snapshot.current_index == 0
        assert snapshot.current_track.title == "A"
        assert snapshot.requested_autoplay is False
        assert media.bound == [("/music/A.mp3", 1)]

    def test_later_tracks_do_not_rebind(self, loaded_controller, media, make_tracks) -> None:
        loaded_controller.add_tracks(make_tracks("D"))
        assert len(media.bound) == 1
        assert len(loaded_controller.catalog) == 4

    def test_tracks_get_stable_ids(self, controller, make_tracks) -> None:
        added = controller.add_tracks(make_tracks("A", "B"))
        assert [track.id for track in added] == [1, 2]

    def test_ready_without_play_moves_to_paused(self, loaded_controller, media) -> None:
        loaded_controller.on_ready(media.last_generation, 90.0)
        snapshot = loaded_controller.snapshot()
        assert snapshot.status is PlaybackStatus.PAUSED
        assert snapshot.progress.duration_seconds == 90.0
        assert media.play_calls() == []


class TestPlayPause:
    """play()/pause() lifecycle."""

    def test_play_commits_only_on_confirmation(self, loaded_controller, media) -> None:
        generation = media.last_generation
        loaded_controller.on_ready(generation, 100.0)

        loaded_controller.play()
        assert loaded_controller.snapshot().status is PlaybackStatus.PAUSED
        assert media.play_calls() == [("play", generation)]

        loaded_controller.on_playing(generation)
        assert loaded_controller.snapshot().status is PlaybackStatus.PLAYING

    def test_pause_from_playing(self, loaded_controller, media) -> None:
        start_playing(loaded_controller, media)
        snapshot = loaded_controller.pause()

        assert snapshot.status is PlaybackStatus.PAUSED
        assert snapshot.requested_autoplay is False
        assert media.calls[-1] == ("pause",)

    def test_pause_while_loading_prevents_autoplay(self, loaded_controller, media) -> None:
        loaded_controller.play()
        snapshot = loaded_controller.pause()

        assert snapshot.status is PlaybackStatus.LOADING
        assert snapshot.requested_autoplay is False

        loaded_controller.on_ready(media.last_generation, 100.0)
        assert loaded_controller.snapshot().status is PlaybackStatus.PAUSED
        assert media.play_calls() == []

    def test_pause_while_play_in_flight_repauses_on_confirmation(self, loaded_controller, media) -> None:
        generation = media.last_generation
        loaded_controller.play()
        loaded_controller.on_ready(generation, 100.0)
        loaded_controller.pause()

        loaded_controller.on_playing(generation)

        assert loaded_controller.snapshot().status is PlaybackStatus.PAUSED
        assert media.calls[-1] == ("pause",)

    def test_blocked_play_surfaces_condition(self, loaded_controller, media) -> None:
        generation = media.last_generation
        loaded_controller.play()
        loaded_controller.on_ready(generation, 100.0)
        loaded_controller.on_play_blocked(generation, "autoplay policy")

        snapshot = loaded_controller.snapshot()
        assert snapshot.status is PlaybackStatus.PAUSED
        assert snapshot.last_error == PlaybackBlocked(reason="autoplay policy")

        loaded_controller.play()
        loaded_controller.on_playing(generation)
        snapshot = loaded_controller.snapshot()
        assert snapshot.status is PlaybackStatus.PLAYING
        assert snapshot.last_error is None

    def test_toggle(self, loaded_controller, media) -> None:
        start_playing(loaded_controller, media)
        assert loaded_controller.toggle().status is PlaybackStatus.PAUSED
        loaded_controller.toggle()
        assert loaded_controller.snapshot().requested_autoplay is True

    def test_external_pause_is_reflected(self, loaded_controller, media) -> None:
        generation = start_playing(loaded_controller, media)
        loaded_controller.on_paused(generation)
        assert loaded_controller.snapshot().status is PlaybackStatus.PAUSED


class TestTrackSwitching:
    """selectTrack / next / previous and the stale-callback guard."""

    def test_stale_ready_is_discarded_after_switch(self, loaded_controller, media) -> None:
        gen_a = media.last_generation
        loaded_controller.play()
        loaded_controller.select_track(1)
        gen_b = media.last_generation

        loaded_controller.on_ready(gen_a, 100.0)
        assert media.play_calls() == []
        assert loaded_controller.snapshot().status is PlaybackStatus.LOADING

        loaded_controller.on_ready(gen_b, 150.0)
        assert media.play_calls() == [("play", gen_b)]

        loaded_controller.on_playing(gen_b)
        snapshot = loaded_controller.snapshot()
        assert snapshot.status is PlaybackStatus.PLAYING
        assert snapshot.current_track.title == "B"

    def test_only_latest_of_many_selections_takes_effect(self, loaded_controller, media) -> None:
        loaded_controller.play()
        generations = [media.last_generation]
        for index in (1, 2, 0, 1):
            loaded_controller.select_track(index)
            generations.append(media.last_generation)

        for generation in generations[:-1]:
            loaded_controller.on_ready(generation, 10.0)
            loaded_controller.on_playing(generation)
            loaded_controller.on_error(generation, "late failure")

        snapshot = loaded_controller.snapshot()
        assert snapshot.status is PlaybackStatus.LOADING
        assert snapshot.last_error is None
        assert media.play_calls() == []

        loaded_controller.on_ready(generations[-1], 10.0)
        assert media.play_calls() == [("play", generations[-1])]

    def test_switch_while_playing_keeps_playing(self, loaded_controller, media) -> None:
        start_playing(loaded_controller, media)
        loaded_controller.next()

        generation = media.last_generation
        assert loaded_controller.snapshot().requested_autoplay is True
        loaded_controller.on_ready(generation, 50.0)
        assert media.play_calls()[-1] == ("play", generation)

    def test_switch_while_paused_stays_paused(self, loaded_controller, media) -> None:
        start_playing(loaded_controller, media)
        loaded_controller.pause()
        loaded_controller.next()

        loaded_controller.on_ready(media.last_generation, 50.0)
        assert loaded_controller.snapshot().status is PlaybackStatus.PAUSED

    def test_select_stops_then_binds_and_resets_progress(self, loaded_controller, media) -> None:
        generation = start_playing(loaded_controller, media)
        loaded_controller.on_tick(generation, 60.0, 120.0)

        loaded_controller.select_track(2)

        assert media.calls[-2:] == [("stop",), ("bind", "/music/C.mp3", generation + 1)]
        assert loaded_controller.snapshot().progress.percent == 0.0

    def test_out_of_range_index_raises(self, loaded_controller) -> None:
        with pytest.raises(IndexError):
            loaded_controller.select_track(3)

    def test_next_and_previous_wrap(self, loaded_controller) -> None:
        assert loaded_controller.previous().current_index == 2
        assert loaded_controller.next().current_index == 0
        assert loaded_controller.next().current_index == 1

    @pytest.mark.parametrize("size", [1, 2, 3, 5])
    def test_next_then_previous_returns_to_start(self, controller, make_tracks, size) -> None:
        controller.add_tracks(make_tracks(*[f"T{i}" for i in range(size)]))
        for start in range(size):
            controller.select_track(start)
            controller.next()
            assert controller.previous().current_index == start
            controller.previous()
            assert controller.next().current_index == start


class TestFailures:
    """Unplayable tracks."""

    def test_error_moves_to_idle_naming_track(self, loaded_controller, media) -> None:
        loaded_controller.on_error(media.last_generation, "unsupported format")
        snapshot = loaded_controller.snapshot()

        assert snapshot.status is PlaybackStatus.IDLE
        assert snapshot.current_index == 0
        assert snapshot.last_error == TrackUnplayable(
            track_id=1, title="A", reason="unsupported format"
        )

    def test_next_after_error_recovers(self, loaded_controller, media) -> None:
        loaded_controller.play()
        loaded_controller.on_error(media.last_generation, "decode error")

        snapshot = loaded_controller.next()
        assert snapshot.status is PlaybackStatus.LOADING
        assert snapshot.last_error is None

        loaded_controller.on_ready(media.last_generation, 30.0)
        assert media.play_calls() == [("play", media.last_generation)]

    def test_play_from_idle_rebinds_current_track(self, loaded_controller, media) -> None:
        loaded_controller.on_error(media.last_generation, "decode error")
        snapshot = loaded_controller.play()

        assert snapshot.status is PlaybackStatus.LOADING
        assert snapshot.requested_autoplay is True
        assert media.bound[-1] == ("/music/A.mp3", 2)


class TestEnded:
    """End of track."""

    def test_ended_does_not_advance_by_default(self, loaded_controller, media) -> None:
        generation = start_playing(loaded_controller, media)
        loaded_controller.on_ended(generation)

        snapshot = loaded_controller.snapshot()
        assert snapshot.status is PlaybackStatus.ENDED
        assert snapshot.requested_autoplay is False
        assert snapshot.current_index == 0
        assert len(media.bound) == 1

    def test_play_after_end_replays(self, loaded_controller, media) -> None:
        generation = start_playing(loaded_controller, media)
        loaded_controller.on_ended(generation)

        loaded_controller.play()
        assert media.play_calls()[-1] == ("play", generation)

    def test_auto_advance(self, media, make_tracks) -> None:
        controller = PlaybackController(media, auto_advance=True)
        controller.add_tracks(make_tracks("A", "B"))
        generation = start_playing(controller, media)

        controller.on_ended(generation)

        snapshot = controller.snapshot()
        assert snapshot.current_index == 1
        assert snapshot.status is PlaybackStatus.LOADING
        assert snapshot.requested_autoplay is True

    def test_stale_ended_does_not_advance(self, media, make_tracks) -> None:
        controller = PlaybackController(media, auto_advance=True)
        controller.add_tracks(make_tracks("A", "B", "C"))
        generation = start_playing(controller, media)
        controller.select_track(2)

        controller.on_ended(generation)
        assert controller.snapshot().current_index == 2
        assert len(media.bound) == 2


class TestProgressAndVolume:
    """Derived progress and volume through the controller."""

    def test_tick_updates_progress(self, loaded_controller, media) -> None:
        generation = start_playing(loaded_controller, media)
        loaded_controller.on_tick(generation, 30.0, 120.0)

        progress = loaded_controller.snapshot().progress
        assert progress.current_time_seconds == 30.0
        assert progress.percent == 25.0

    def test_stale_tick_is_ignored(self, loaded_controller, media) -> None:
        generation = start_playing(loaded_controller, media)
        loaded_controller.next()
        loaded_controller.on_tick(generation, 30.0, 120.0)
        assert loaded_controller.snapshot().progress.percent == 0.0

    @pytest.mark.parametrize("requested, stored", [(-1, 0.0), (2, 1.0), (0.4, 0.4)])
    def test_set_volume_clamps(self, loaded_controller, media, requested, stored) -> None:
        assert loaded_controller.set_volume(requested).volume == stored
        assert media.volume == stored

    def test_set_volume_does_not_touch_playback_state(self, loaded_controller, media) -> None:
        start_playing(loaded_controller, media)
        loaded_controller.set_volume(0.2)
        assert loaded_controller.snapshot().status is PlaybackStatus.PLAYING

    def test_initial_volume_applied(self, media) -> None:
        PlaybackController(media, initial_volume=0.3)
        assert media.volume == 0.3


class TestSubscribers:
    """Snapshot publication."""

    def test_snapshot_published_after_each_transition(self, loaded_controller, media) -> None:
        published: list[PlayerSnapshot] = []
        loaded_controller.subscribe(published.append)

        loaded_controller.play()
        loaded_controller.on_ready(media.last_generation, 10.0)
        loaded_controller.on_playing(media.last_generation)

        assert [snapshot.status for snapshot in published] == [
            PlaybackStatus.LOADING,
            PlaybackStatus.LOADING,
            PlaybackStatus.PLAYING,
        ]

    def test_unsubscribe(self, loaded_controller) -> None:
        published = []
        unsubscribe = loaded_controller.subscribe(published.append)
        unsubscribe()
        loaded_controller.play()
        assert published == []

    def test_failing_subscriber_does_not_break_controller(self, loaded_controller, media) -> None:
        def broken(snapshot: PlayerSnapshot) -> None:
            raise RuntimeError("render failed")

        received = []
        loaded_controller.subscribe(broken)
        loaded_controller.subscribe(received.append)

        loaded_controller.play()
        assert len(received) == 1
        assert loaded_controller.snapshot().requested_autoplay is True
