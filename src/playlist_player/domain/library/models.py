"""
Music library domain models.

Contains data structures for representing playlist tracks and the catalog.
"""

from typing import NamedTuple, Optional


class CoverArt(NamedTuple):
    """Embedded cover image pulled from an audio file's tags."""
    mime_type: str
    data: bytes


class Track(NamedTuple):
    """Represents a playlist track with metadata.

    Created during a library scan and never mutated. A reload replaces
    every Track wholesale.
    """
    filename: str  # Unique within its playlist directory
    file_path: str  # Absolute path on disk
    relative_path: str  # Path relative to the library root (POSIX separators)
    title: str
    artist: str = "Unknown Artist"
    album: str = "Unknown Album"
    duration: float = 0.0  # in seconds, 0 when unknown
    cover_art: Optional[CoverArt] = None


# Playlist name (directory name) -> ordered tracks
Catalog = dict[str, tuple[Track, ...]]
