"""
Volume control for the shared media primitive.
"""

import math

from loguru import logger

from .media import MediaPrimitive


def clamp_volume(volume: float) -> float:
    """Clamp to [0.0, 1.0]. NaN is treated as silence."""
    if math.isnan(volume):
        return 0.0
    return max(0.0, min(1.0, float(volume)))


class VolumeController:
    """Scalar gain control, independent of playback state."""

    def __init__(self, media: MediaPrimitive, initial: float = 1.0) -> None:
        self._media = media
        self._volume = clamp_volume(initial)
        self._media.set_volume(self._volume)

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> float:
        """Apply a volume, clamping out-of-range input to the nearest bound.

        Returns:
            The volume actually applied
        """
        clamped = clamp_volume(volume)
        if clamped != volume:
            logger.debug(f"Clamped volume {volume} to {clamped}")
        self._volume = clamped
        self._media.set_volume(clamped)
        return clamped

    def adjust(self, delta: float) -> float:
        """Change the volume by ``delta`` (clamped)."""
        return self.set_volume(self._volume + delta)
