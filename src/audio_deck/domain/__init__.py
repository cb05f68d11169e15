"""Domain layer - track library and playback control."""
