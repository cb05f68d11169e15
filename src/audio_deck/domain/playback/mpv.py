"""
MPV media primitive over JSON IPC.

mpv runs idle with ``--keep-open`` so a finished track stays loaded at its
end. Commands are sent synchronously; the outcome (ready, playing, ended,
errors) is detected by polling properties and queued as events, which are
delivered to the listener from ``poll()``. Nothing is delivered from inside
a command method, so the controller never re-enters itself.
"""

import json
import os
import socket
import subprocess
import tempfile
import time
from collections import deque
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from .media import MediaListener

# Seconds after loadfile before an idle player counts as a failed load
IDLE_GRACE_PERIOD = 0.5

# Seconds to wait for mpv to create its IPC socket
SOCKET_TIMEOUT = 5.0


def check_mpv_available(binary: str = "mpv") -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            [binary, "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def _ipc_request(socket_path: Optional[str], command: list[Any]) -> Optional[dict]:
    """Send one JSON IPC command and return the decoded response."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(2.0)
            sock.connect(socket_path)
            sock.sendall((json.dumps({"command": command}) + "\n").encode("utf-8"))
            response = sock.recv(4096).decode("utf-8").strip()
    except OSError as e:
        logger.debug(f"MPV IPC error for {command[0]}: {e}")
        return None

    # mpv may interleave event lines; the reply is the line with an "error" key
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "error" in data:
            return data
    return None


def send_mpv_command(socket_path: Optional[str], command: list[Any]) -> bool:
    """Send a command to MPV. Returns True when mpv reports success."""
    response = _ipc_request(socket_path, command)
    return response is not None and response.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV, or None if unavailable."""
    response = _ipc_request(socket_path, ["get_property", property_name])
    if response is not None and response.get("error") == "success":
        return response.get("data")
    return None


class MpvMedia:
    """Media primitive backed by an mpv subprocess."""

    def __init__(
        self,
        socket_path: Optional[str] = None,
        load_timeout: float = 5.0,
        binary: str = "mpv",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if socket_path is None:
            socket_path = str(Path(tempfile.gettempdir()) / f"audio-deck-mpv-{os.getpid()}")
        self.socket_path = socket_path
        self.load_timeout = load_timeout
        self._binary = binary
        self._clock = clock
        self._process: Optional[subprocess.Popen] = None
        self._listener: Optional[MediaListener] = None
        self._pending: deque[Callable[[MediaListener], None]] = deque()

        # Per-bind tracking
        self._generation: Optional[int] = None
        self._source: Optional[str] = None
        self._bound_at = 0.0
        self._loading = False
        self._play_requested = False
        self._confirmed_playing = False
        self._ended = False

    # ------------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------------

    def start(self, volume: float = 1.0) -> bool:
        """Start mpv with JSON IPC. Returns True once the socket answers."""
        logger.info(f"Starting MPV player with socket: {self.socket_path}")

        try:
            if os.path.exists(self.socket_path):
                logger.debug(f"Removing existing socket: {self.socket_path}")
                os.unlink(self.socket_path)

            cmd = [
                self._binary,
                "--idle=yes",
                "--no-video",
                "--no-terminal",
                f"--input-ipc-server={self.socket_path}",
                f"--volume={round(volume * 100)}",
                "--keep-open=yes",
                "--pause",
                "--load-scripts=no",
            ]
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.error(f"Failed to start MPV: {e}")
            return False

        started = time.monotonic()
        while not os.path.exists(self.socket_path):
            if time.monotonic() - started > SOCKET_TIMEOUT:
                logger.error(f"MPV socket creation timeout after {SOCKET_TIMEOUT}s")
                self.shutdown()
                return False
            time.sleep(0.1)

        if get_mpv_property(self.socket_path, "idle-active") is None:
            logger.error("MPV socket connection test failed")
            self.shutdown()
            return False

        logger.info("MPV started successfully")
        return True

    def shutdown(self) -> None:
        """Stop the MPV process and remove its socket."""
        if self._process:
            try:
                self._process.kill()
                self._process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Already gone
            self._process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def is_running(self) -> bool:
        if not self._process or self._process.poll() is not None:
            return False
        return os.path.exists(self.socket_path)

    # ------------------------------------------------------------------
    # MediaPrimitive
    # ------------------------------------------------------------------

    def subscribe(self, listener: MediaListener) -> None:
        self._listener = listener

    def bind(self, source: str, generation: int) -> None:
        self._generation = generation
        self._source = source
        self._bound_at = self._clock()
        self._loading = True
        self._play_requested = False
        self._confirmed_playing = False
        self._ended = False

        send_mpv_command(self.socket_path, ["set_property", "pause", True])
        if not send_mpv_command(self.socket_path, ["loadfile", source, "replace"]):
            self._loading = False
            self._queue(lambda listener: listener.on_error(generation, "mpv rejected the source"))
            return
        logger.debug(f"Loading {source} (generation {generation})")

    def stop(self) -> None:
        send_mpv_command(self.socket_path, ["set_property", "pause", True])
        self._play_requested = False
        self._confirmed_playing = False

    def play(self, generation: int) -> None:
        if generation != self._generation:
            return

        if self._ended or get_mpv_property(self.socket_path, "eof-reached"):
            send_mpv_command(self.socket_path, ["seek", 0, "absolute"])
            self._ended = False

        if send_mpv_command(self.socket_path, ["set_property", "pause", False]):
            self._play_requested = True
        else:
            self._queue(
                lambda listener: listener.on_play_blocked(generation, "mpv refused to unpause")
            )

    def pause(self) -> None:
        send_mpv_command(self.socket_path, ["set_property", "pause", True])
        self._play_requested = False
        self._confirmed_playing = False

    def set_volume(self, volume: float) -> None:
        send_mpv_command(
            self.socket_path, ["set_property", "volume", round(volume * 100)]
        )

    # ------------------------------------------------------------------
    # Event delivery
    # ------------------------------------------------------------------

    def poll(self) -> None:
        """Inspect mpv and deliver queued events. Call once per UI frame."""
        if self._generation is not None:
            self._inspect(self._generation)

        while self._pending and self._listener is not None:
            self._pending.popleft()(self._listener)

    def _queue(self, deliver: Callable[[MediaListener], None]) -> None:
        self._pending.append(deliver)

    def _inspect(self, generation: int) -> None:
        if self._loading:
            self._inspect_loading(generation)
            return

        position = get_mpv_property(self.socket_path, "time-pos")
        duration = get_mpv_property(self.socket_path, "duration") or 0.0
        paused = get_mpv_property(self.socket_path, "pause")
        eof = get_mpv_property(self.socket_path, "eof-reached")

        if position is not None:
            self._queue(lambda listener: listener.on_tick(generation, position, duration))

        # keep-open pauses at the end; an unpaused eof is a seek still settling
        if eof and paused is not False and not self._ended:
            self._ended = True
            self._play_requested = False
            self._confirmed_playing = False
            self._queue(lambda listener: listener.on_ended(generation))
            return

        if self._play_requested and paused is False and not self._confirmed_playing:
            self._confirmed_playing = True
            self._queue(lambda listener: listener.on_playing(generation))
        elif self._confirmed_playing and paused is True:
            self._confirmed_playing = False
            self._play_requested = False
            self._queue(lambda listener: listener.on_paused(generation))

    def _inspect_loading(self, generation: int) -> None:
        elapsed = self._clock() - self._bound_at
        # loadfile is asynchronous; until path switches, duration is the previous file's
        switched = get_mpv_property(self.socket_path, "path") == self._source
        duration = get_mpv_property(self.socket_path, "duration") if switched else None

        if duration and duration > 0:
            self._loading = False
            logger.debug(f"Metadata loaded: duration={duration:.2f}s, elapsed={elapsed:.3f}s")
            self._queue(lambda listener: listener.on_ready(generation, duration))
            return

        if elapsed > IDLE_GRACE_PERIOD and get_mpv_property(self.socket_path, "idle-active"):
            self._loading = False
            self._queue(lambda listener: listener.on_error(generation, "unsupported or unreadable source"))
        elif elapsed > self.load_timeout:
            self._loading = False
            self._queue(
                lambda listener: listener.on_error(
                    generation, f"timed out after {self.load_timeout:.1f}s"
                )
            )
