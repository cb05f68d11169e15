"""Main event loop for the blessed player UI."""

import sys

from blessed import Terminal
from loguru import logger

from audio_deck.core.config import UIConfig
from audio_deck.core.output import set_ui_mode
from audio_deck.domain.playback import MpvMedia, PlaybackController, PlayerSnapshot

from .keys import handle_key
from .render import render_player


def write_at(term: Terminal, x: int, y: int, content: str) -> None:
    """Write content at position, clearing the rest of the line."""
    sys.stdout.write(term.move_xy(x, y) + term.clear_eol + content)


def draw(term: Terminal, snapshot: PlayerSnapshot, controller: PlaybackController, previous_height: int) -> int:
    """Redraw the screen. Returns the number of lines drawn."""
    lines = render_player(term, snapshot, controller.catalog.tracks())
    for y, line in enumerate(lines):
        write_at(term, 0, y, line)
    # Clear leftovers from a taller previous frame
    for y in range(len(lines), previous_height):
        write_at(term, 0, y, "")
    sys.stdout.flush()
    return len(lines)


def run_player(
    controller: PlaybackController,
    media: MpvMedia,
    ui_config: UIConfig,
    term: Terminal | None = None,
) -> None:
    """Run the interactive player until the user quits."""
    if term is None:
        term = Terminal() if ui_config.use_colors else Terminal(force_styling=None)

    frame_timeout = 1.0 / max(ui_config.refresh_rate, 1)
    dirty = True

    def mark_dirty(snapshot: PlayerSnapshot) -> None:
        nonlocal dirty
        dirty = True

    unsubscribe = controller.subscribe(mark_dirty)
    set_ui_mode(True)
    logger.info("Player UI started")

    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            height = 0
            running = True
            while running:
                media.poll()

                if dirty:
                    dirty = False
                    height = draw(term, controller.snapshot(), controller, height)

                key = term.inkey(timeout=frame_timeout)
                if key:
                    running = handle_key(key, controller)
    except KeyboardInterrupt:
        logger.info("Player UI interrupted")
    finally:
        unsubscribe()
        set_ui_mode(False)
        logger.info("Player UI stopped")
