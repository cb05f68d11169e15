"""Tests for the unified log() output."""

from unittest.mock import patch

import pytest

from audio_deck.core.console import get_console, safe_print
from audio_deck.core.output import log, set_ui_mode


@pytest.fixture(autouse=True)
def reset_ui_mode():
    yield
    set_ui_mode(False)


class TestLog:
    def test_prints_outside_ui_mode(self) -> None:
        with patch("audio_deck.core.output.safe_print") as mock_print:
            log("Queued 3 tracks")
        mock_print.assert_called_once_with("Queued 3 tracks", style=None)

    def test_errors_are_styled(self) -> None:
        with patch("audio_deck.core.output.safe_print") as mock_print:
            log("mpv missing", "error")
        mock_print.assert_called_once_with("mpv missing", style="bold red")

    def test_debug_not_printed(self) -> None:
        with patch("audio_deck.core.output.safe_print") as mock_print:
            log("details", "debug")
        mock_print.assert_not_called()

    def test_silent_in_ui_mode(self) -> None:
        set_ui_mode(True)
        with patch("audio_deck.core.output.safe_print") as mock_print:
            log("hidden while UI is drawn")
        mock_print.assert_not_called()


class TestSafePrint:
    def test_passes_style_to_shared_console(self) -> None:
        with patch("audio_deck.core.console.get_console") as mock_get:
            safe_print("Loaded", style="green")
        mock_get.return_value.print.assert_called_once_with("Loaded", style="green")

    def test_console_is_shared(self) -> None:
        assert get_console() is get_console()
