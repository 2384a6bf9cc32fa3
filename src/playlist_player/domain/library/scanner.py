"""
Playlist library scanning.

A library root holds one subdirectory per playlist; each subdirectory's
audio files (non-recursive) are that playlist's tracks.
"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Optional

from loguru import logger

from ..exceptions import LibraryUnreadableError
from .metadata import MetadataExtractor, build_track, extract_track_metadata, fallback_track
from .models import Catalog, Track

DEFAULT_SUPPORTED_FORMATS = [".mp3"]


def is_supported_format(local_path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported (case-insensitive)."""
    return local_path.suffix.lower() in {fmt.lower() for fmt in supported_formats}


def list_audio_files(directory: Path, supported_formats: list[str]) -> list[Path]:
    """List eligible audio files directly inside a directory, sorted by name."""
    files = [
        entry
        for entry in directory.iterdir()
        if entry.is_file() and is_supported_format(entry, supported_formats)
    ]
    return sorted(files, key=lambda p: p.name)


def _collect_tracks(
    files: list[Path],
    root: Path,
    extractor: MetadataExtractor,
    executor: ThreadPoolExecutor,
    metadata_timeout: Optional[float],
) -> list[Track]:
    futures = [
        (local_path, executor.submit(build_track, str(local_path), str(root), extractor))
        for local_path in files
    ]

    tracks = []
    for local_path, future in futures:
        try:
            tracks.append(future.result(timeout=metadata_timeout))
        except FutureTimeoutError:
            logger.warning(f"Metadata extraction timed out for {local_path.name}, using filename")
            future.cancel()
            tracks.append(fallback_track(str(local_path), str(root)))
    return tracks


def load_catalog(
    root: str | Path,
    supported_formats: Optional[list[str]] = None,
    extractor: MetadataExtractor = extract_track_metadata,
    metadata_timeout: Optional[float] = 10.0,
    max_workers: int = 4,
) -> Catalog:
    """Scan the library root and build a fresh catalog.

    Args:
        root: Directory containing one subdirectory per playlist
        supported_formats: Audio extensions to include (default: .mp3)
        extractor: Metadata collaborator, called once per file
        metadata_timeout: Seconds to wait per file before using fallback metadata
        max_workers: Threads used for metadata extraction

    Returns:
        Mapping of playlist name to tracks; empty playlists are omitted

    Raises:
        LibraryUnreadableError: If the root is missing or cannot be listed
    """
    root = Path(root).expanduser()
    formats = supported_formats or DEFAULT_SUPPORTED_FORMATS

    try:
        playlist_dirs = sorted(
            (entry for entry in root.iterdir() if entry.is_dir()),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise LibraryUnreadableError(str(root), str(e)) from e

    catalog: Catalog = {}
    # Stuck extractor threads are abandoned rather than joined
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="metadata")
    try:
        for playlist_dir in playlist_dirs:
            try:
                files = list_audio_files(playlist_dir, formats)
            except OSError as e:
                logger.error(f"Error loading songs from {playlist_dir}: {e}")
                continue

            tracks = _collect_tracks(files, root, extractor, executor, metadata_timeout)
            if tracks:
                catalog[playlist_dir.name] = tuple(tracks)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info(f"Loaded {len(catalog)} playlists from {root}")
    return catalog


def diff_catalogs(old: Catalog, new: Catalog) -> tuple[list[str], list[str]]:
    """Return (added, removed) playlist names between two catalogs."""
    added = sorted(set(new) - set(old))
    removed = sorted(set(old) - set(new))
    return added, removed
