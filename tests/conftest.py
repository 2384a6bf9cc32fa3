"""Shared fixtures for domain and core tests."""

from pathlib import Path
from typing import Callable

import pytest

from playlist_player.domain.library.models import Track


def _track(filename: str, playlist: str = "A") -> Track:
    return Track(
        filename=filename,
        file_path=f"/music/{playlist}/{filename}",
        relative_path=f"{playlist}/{filename}",
        title=Path(filename).stem,
        artist="Test Artist",
        album="Test Album",
        duration=180.0,
    )


@pytest.fixture
def make_track() -> Callable[..., Track]:
    """Factory for in-memory tracks."""
    return _track


@pytest.fixture
def make_tracks() -> Callable[..., tuple[Track, ...]]:
    """Factory for a playlist's worth of tracks: t1.mp3 .. tN.mp3."""

    def factory(count: int, playlist: str = "A") -> tuple[Track, ...]:
        return tuple(_track(f"t{i}.mp3", playlist) for i in range(1, count + 1))

    return factory


@pytest.fixture
def fake_extractor() -> Callable[[str], dict]:
    """Metadata collaborator that derives tags from the filename."""

    def extractor(local_path: str) -> dict:
        stem = Path(local_path).stem
        return {
            "title": f"Title {stem}",
            "artist": f"Artist {stem}",
            "album": "Album",
            "duration": 200.0,
            "cover_art": None,
        }

    return extractor


@pytest.fixture
def library_root(tmp_path: Path) -> Callable[[dict[str, list[str]]], Path]:
    """Create a playlist library on disk: {playlist: [filenames]}."""

    def factory(layout: dict[str, list[str]]) -> Path:
        root = tmp_path / "playlists"
        root.mkdir(exist_ok=True)
        for playlist, files in layout.items():
            directory = root / playlist
            directory.mkdir(exist_ok=True)
            for name in files:
                (directory / name).write_bytes(b"")
        return root

    return factory
