"""Playback domain - queue, state machine and media integration.

This domain handles:
- The ordered track catalog with wraparound navigation
- The playback state machine (pure transition function)
- The controller that drives a media primitive from that state machine
- Progress and volume derived from / applied to the media primitive
- MPV integration via JSON IPC
"""

from .catalog import TrackCatalog
from .conditions import EmptyCatalog, PlaybackBlocked, PlaybackCondition, TrackUnplayable
from .controller import PlaybackController, PlayerSnapshot
from .media import MediaListener, MediaPrimitive
from .mpv import MpvMedia, check_mpv_available
from .progress import ProgressReporter, ProgressSnapshot, compute_percent, format_time
from .state import PlaybackState, PlaybackStatus, transition
from .volume import VolumeController, clamp_volume

__all__ = [
    # Catalog
    "TrackCatalog",
    # Conditions
    "EmptyCatalog",
    "PlaybackBlocked",
    "PlaybackCondition",
    "TrackUnplayable",
    # Controller
    "PlaybackController",
    "PlayerSnapshot",
    # Media
    "MediaListener",
    "MediaPrimitive",
    "MpvMedia",
    "check_mpv_available",
    # Progress
    "ProgressReporter",
    "ProgressSnapshot",
    "compute_percent",
    "format_time",
    # State machine
    "PlaybackState",
    "PlaybackStatus",
    "transition",
    # Volume
    "VolumeController",
    "clamp_volume",
]
