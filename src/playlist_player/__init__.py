"""Playlist Player - shuffled playlist playback with a shared remote/player state."""

__version__ = "1.0.0"
