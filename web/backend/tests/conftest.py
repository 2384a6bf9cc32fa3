"""Pytest configuration for backend tests."""

from pathlib import Path

import pytest

from playlist_player.core.session_store import SessionStore
from web.backend.player_service import PlayerService


@pytest.fixture
def anyio_backend():
    # PlayerService relies on asyncio primitives
    return "asyncio"


def fake_extractor(local_path: str) -> dict:
    stem = Path(local_path).stem
    return {"title": f"Title {stem}", "artist": "Artist", "album": "Album", "duration": 120.0}


@pytest.fixture
def extractor():
    return fake_extractor


@pytest.fixture
def library(tmp_path) -> Path:
    """Playlist root with A (3 tracks) and B (2 tracks)."""
    root = tmp_path / "playlists"
    for playlist, count in (("A", 3), ("B", 2)):
        directory = root / playlist
        directory.mkdir(parents=True)
        for i in range(1, count + 1):
            (directory / f"t{i}.mp3").write_bytes(b"ID3")
    return root


@pytest.fixture
def store(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "state.json")


@pytest.fixture
def service(library, store) -> PlayerService:
    return PlayerService(library, store=store, extractor=fake_extractor, watch=False)
