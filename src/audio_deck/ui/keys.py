"""Keyboard handling for the player screen."""

from blessed.keyboard import Keystroke

from audio_deck.domain.playback import PlaybackController

VOLUME_STEP = 0.05


def handle_key(key: Keystroke, controller: PlaybackController) -> bool:
    """Apply a keystroke to the controller.

    Returns:
        False when the key asks to quit, True otherwise
    """
    if key.is_sequence:
        if key.name == "KEY_RIGHT":
            controller.next()
        elif key.name == "KEY_LEFT":
            controller.previous()
        elif key.name == "KEY_UP":
            controller.adjust_volume(VOLUME_STEP)
        elif key.name == "KEY_DOWN":
            controller.adjust_volume(-VOLUME_STEP)
        return True

    char = str(key)
    if char in ("q", "Q"):
        return False
    if char == " ":
        controller.toggle()
    elif char == "n":
        controller.next()
    elif char == "p":
        controller.previous()
    elif char in ("+", "="):
        controller.adjust_volume(VOLUME_STEP)
    elif char == "-":
        controller.adjust_volume(-VOLUME_STEP)
    elif char.isdigit() and char != "0":
        index = int(char) - 1
        if index < len(controller.catalog):
            controller.select_track(index)
    return True
