"""Rich console shared by the CLI table and log() output."""

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def safe_print(message: str, style: str | None = None) -> None:
    """Print one status line; ``style`` is a Rich style such as "bold red"."""
    get_console().print(message, style=style)
