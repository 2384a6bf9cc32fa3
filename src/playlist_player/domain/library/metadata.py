"""
Audio metadata extraction and track construction.

Handles reading tags and cover art from audio files using Mutagen, and
degrades to filename-derived metadata when a file cannot be read.
"""

import base64
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen.flac import Picture
from mutagen.mp4 import MP4Cover

from .models import CoverArt, Track

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

# (path) -> {title, artist, album, duration, cover_art}; may raise per file
MetadataExtractor = Callable[[str], dict[str, Any]]


def get_tag_value(audio_file: MutagenFile, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
            if value:
                # Handle different formats
                if isinstance(value, list) and value:
                    return str(value[0])
                return str(value)
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
    return None


def get_cover_art(audio_file: MutagenFile) -> Optional[CoverArt]:
    """Return the first embedded picture, or None.

    Looks at ID3 APIC frames (MP3), MP4 ``covr`` atoms, FLAC picture blocks
    and base64 ``metadata_block_picture`` comments (Ogg Vorbis/Opus).
    """
    tags = getattr(audio_file, "tags", None)

    # ID3
    if tags is not None and hasattr(tags, "getall"):
        frames = tags.getall("APIC")
        if frames:
            return CoverArt(mime_type=frames[0].mime or "image/jpeg", data=bytes(frames[0].data))

    # FLAC
    pictures = getattr(audio_file, "pictures", None)
    if pictures:
        return CoverArt(mime_type=pictures[0].mime or "image/jpeg", data=bytes(pictures[0].data))

    if tags is None:
        return None

    # MP4
    try:
        covers = tags.get("covr")
    except (KeyError, ValueError):
        covers = None
    if covers:
        cover = covers[0]
        mime = "image/png" if getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG else "image/jpeg"
        return CoverArt(mime_type=mime, data=bytes(cover))

    # Ogg
    try:
        encoded = tags.get("metadata_block_picture")
    except (KeyError, ValueError):
        encoded = None
    if encoded:
        try:
            picture = Picture(base64.b64decode(encoded[0]))
            return CoverArt(mime_type=picture.mime or "image/jpeg", data=bytes(picture.data))
        except Exception as e:
            logger.debug(f"Ignoring malformed embedded picture: {e}")

    return None


def extract_track_metadata(local_path: str) -> dict[str, Any]:
    """Extract metadata from an audio file using mutagen.

    Raises:
        ValueError: If mutagen does not recognise the file
        mutagen.MutagenError / OSError: If the file cannot be parsed or read
    """
    audio_file = MutagenFile(local_path)
    if audio_file is None:
        raise ValueError(f"Unrecognised audio format: {local_path}")

    # ID3 (MP3), MP4, and Vorbis/Opus tags (lowercase)
    title = get_tag_value(audio_file, ["TIT2", "\xa9nam", "TITLE", "title"])
    artist = get_tag_value(audio_file, ["TPE1", "\xa9ART", "ARTIST", "artist"])
    album = get_tag_value(audio_file, ["TALB", "\xa9alb", "ALBUM", "album"])

    duration = None
    if hasattr(audio_file, "info"):
        duration = getattr(audio_file.info, "length", None)

    return {
        "title": title,
        "artist": artist,
        "album": album,
        "duration": duration,
        "cover_art": get_cover_art(audio_file),
    }


def _relative_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.name


def fallback_track(local_path: str, root: str) -> Track:
    """Build a Track from the filename alone."""
    path = Path(local_path)
    return Track(
        filename=path.name,
        file_path=str(path),
        relative_path=_relative_path(path, Path(root)),
        title=path.stem,
        artist=UNKNOWN_ARTIST,
        album=UNKNOWN_ALBUM,
        duration=0.0,
        cover_art=None,
    )


def build_track(local_path: str, root: str, extractor: MetadataExtractor = extract_track_metadata) -> Track:
    """Build a Track for one file, never raising for a bad file.

    Missing tag values fall back individually; an extractor failure falls
    back to filename-derived metadata for the whole track.
    """
    fallback = fallback_track(local_path, root)
    try:
        metadata = extractor(local_path)
    except Exception as e:
        logger.warning(f"Could not parse metadata for {fallback.filename}: {e}")
        return fallback

    return fallback._replace(
        title=metadata.get("title") or fallback.title,
        artist=metadata.get("artist") or UNKNOWN_ARTIST,
        album=metadata.get("album") or UNKNOWN_ALBUM,
        duration=float(metadata.get("duration") or 0.0),
        cover_art=metadata.get("cover_art"),
    )


def get_display_name(track: Track) -> str:
    """Get a display-friendly name for the track."""
    if track.artist and track.artist != UNKNOWN_ARTIST:
        return f"{track.artist} - {track.title}"
    return track.title


def format_duration(seconds: float) -> str:
    """Format duration as MM:SS."""
    if not seconds:
        return "??:??"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
