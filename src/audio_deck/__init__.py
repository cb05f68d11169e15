"""Audio Deck - queue-based terminal audio player."""

__version__ = "0.1.0"
