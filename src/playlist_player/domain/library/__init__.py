"""Library domain - playlist scanning, metadata and change watching.

This domain handles:
- Track data models
- Metadata extraction from audio files
- Scanning the playlist root into a catalog
- Watching the playlist root for changes
"""

# Models
from .models import Catalog, CoverArt, Track

# Metadata extraction
from .metadata import (
    MetadataExtractor,
    build_track,
    extract_track_metadata,
    fallback_track,
    get_cover_art,
    get_display_name,
    get_tag_value,
)

# Library scanning
from .scanner import (
    diff_catalogs,
    is_supported_format,
    list_audio_files,
    load_catalog,
)

# Change watching
from .watcher import LibraryEventHandler, LibraryWatcher, ReloadDebouncer

__all__ = [
    # Models
    "Catalog",
    "CoverArt",
    "Track",
    # Metadata
    "MetadataExtractor",
    "build_track",
    "extract_track_metadata",
    "fallback_track",
    "get_cover_art",
    "get_display_name",
    "get_tag_value",
    # Scanner
    "diff_catalogs",
    "is_supported_format",
    "list_audio_files",
    "load_catalog",
    # Watcher
    "LibraryEventHandler",
    "LibraryWatcher",
    "ReloadDebouncer",
]
