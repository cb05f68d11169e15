"""
Audio Deck - command line entry point

`audio-deck play FILES...` opens the interactive player with the files queued.
`audio-deck list FILES...` shows the tracks the files would produce.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.table import Table

from audio_deck.core.config import Config, ensure_directories, get_data_dir, load_config
from audio_deck.core.console import get_console
from audio_deck.core.output import log, setup_loguru, setup_stderr_logging
from audio_deck.domain.library import tracks_from_files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audio-deck",
        description="Audio Deck - queue audio files and play them in the terminal",
    )
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    play_parser = subparsers.add_parser("play", help="Open the player with files queued")
    play_parser.add_argument("files", nargs="+", help="Audio files, in play order")
    play_parser.add_argument(
        "--volume", type=float, help="Initial volume between 0.0 and 1.0"
    )
    play_parser.add_argument(
        "--autoplay", action="store_true", help="Start playing the first track right away"
    )
    play_parser.add_argument(
        "--auto-advance",
        action="store_true",
        default=None,
        help="Move to the next track when one finishes",
    )

    list_parser = subparsers.add_parser("list", help="Show the tracks files would produce")
    list_parser.add_argument("files", nargs="+", help="Audio files")

    return parser


def run_list(files: Sequence[str], config: Config) -> int:
    """Print the tracks the upload step produces for ``files``."""
    tracks = tracks_from_files(files, config.player.supported_formats)
    if not tracks:
        log("No playable files given", "error")
        return 1

    table = Table(title="Tracks")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Artist")
    table.add_column("Source", overflow="fold")
    for position, track in enumerate(tracks, start=1):
        table.add_row(str(position), track.title, track.artist, track.source)

    get_console().print(table)
    return 0


def run_play(args: argparse.Namespace, config: Config) -> int:
    """Start mpv, queue the files and run the interactive player."""
    from audio_deck.domain.playback import (
        MpvMedia,
        PlaybackController,
        check_mpv_available,
        clamp_volume,
    )
    from audio_deck.ui import run_player

    if not check_mpv_available():
        log("mpv is not installed or not on PATH", "error")
        return 1

    tracks = tracks_from_files(args.files, config.player.supported_formats)
    if not tracks:
        log("No playable files given", "error")
        return 1

    volume = clamp_volume(args.volume if args.volume is not None else config.player.volume)
    auto_advance = (
        args.auto_advance if args.auto_advance is not None else config.player.auto_advance
    )

    media = MpvMedia(
        socket_path=config.player.mpv_socket_path,
        load_timeout=config.player.load_timeout,
    )
    if not media.start(volume=volume):
        log("Failed to start mpv", "error")
        return 1

    try:
        controller = PlaybackController(
            media, initial_volume=volume, auto_advance=auto_advance
        )
        controller.add_tracks(tracks)
        if args.autoplay:
            controller.play()
        run_player(controller, media, config.ui)
    finally:
        media.shutdown()

    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the audio-deck command."""
    args = build_parser().parse_args(argv)
    config = load_config()

    if args.subcommand == "list":
        setup_stderr_logging()
        sys.exit(run_list(args.files, config))

    ensure_directories()
    log_file = (
        Path(config.logging.log_file)
        if config.logging.log_file
        else get_data_dir() / "audio-deck.log"
    )
    setup_loguru(
        log_file,
        level=config.logging.level,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
    )
    sys.exit(run_play(args, config))


if __name__ == "__main__":
    main()
