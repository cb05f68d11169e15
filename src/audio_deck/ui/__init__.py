"""Terminal user interface (blessed)."""

from .app import run_player
from .keys import handle_key
from .render import render_player

__all__ = ["handle_key", "render_player", "run_player"]
