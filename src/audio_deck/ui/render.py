"""Render a PlayerSnapshot as terminal lines."""

from typing import Sequence

from blessed import Terminal

from audio_deck.domain.library.models import UNKNOWN_ARTIST, Track
from audio_deck.domain.playback import PlaybackStatus, PlayerSnapshot, format_time

BAR_WIDTH = 40
MAX_LISTED_TRACKS = 9

STATUS_LABELS = {
    PlaybackStatus.IDLE: "■ Stopped",
    PlaybackStatus.LOADING: "… Loading",
    PlaybackStatus.PLAYING: "▶ Playing",
    PlaybackStatus.PAUSED: "❚❚ Paused",
    PlaybackStatus.ENDED: "■ Ended",
}

HELP_LINE = "space play/pause  n/→ next  p/← prev  +/- volume  1-9 select  q quit"


def create_progress_bar(position: float, duration: float, percent: float, term: Terminal) -> str:
    """Create a progress bar with elapsed and total time."""
    filled = int(BAR_WIDTH * percent / 100)
    bar = term.green("█" * filled) + term.white("░" * (BAR_WIDTH - filled))
    return f"{bar} {format_time(position)} / {format_time(duration)}"


def create_volume_bar(volume: float, term: Terminal) -> str:
    width = 20
    filled = round(width * volume)
    return "Vol " + term.cyan("▮" * filled) + term.white("▯" * (width - filled)) + f" {round(volume * 100)}%"


def render_track_list(
    tracks: Sequence[Track], current_index: int | None, term: Terminal
) -> list[str]:
    lines = []
    for index, track in enumerate(tracks[:MAX_LISTED_TRACKS]):
        label = f"{index + 1}. {track.title}"
        if index == current_index:
            lines.append(term.bold(f"> {label}"))
        else:
            lines.append(f"  {label}")
    hidden = len(tracks) - MAX_LISTED_TRACKS
    if hidden > 0:
        lines.append(f"  ... {hidden} more")
    return lines


def render_player(term: Terminal, snapshot: PlayerSnapshot, tracks: Sequence[Track]) -> list[str]:
    """Build the full screen for a snapshot."""
    track = snapshot.current_track
    title = track.title if track else "Audio Title"
    artist = track.artist if track else UNKNOWN_ARTIST
    progress = snapshot.progress

    lines = [
        term.bold("Audio Player"),
        "",
        term.bold_white(title),
        term.bright_black(artist),
        "",
        create_progress_bar(
            progress.current_time_seconds, progress.duration_seconds, progress.percent, term
        ),
        STATUS_LABELS[snapshot.status],
        create_volume_bar(snapshot.volume, term),
    ]

    if snapshot.last_error is not None:
        lines.append(term.red(snapshot.last_error.message))

    lines.append("")
    if tracks:
        lines.extend(render_track_list(tracks, snapshot.current_index, term))
    else:
        lines.append("  No tracks loaded")

    lines.append("")
    lines.append(term.bright_black(HELP_LINE))
    return lines
