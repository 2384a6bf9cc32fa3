"""Tests for last-playlist persistence."""

import json

from playlist_player.core.session_store import SessionStore


def test_missing_file_returns_none(tmp_path):
    assert SessionStore(tmp_path / "state.json").get_last_playlist() is None


def test_save_then_load(tmp_path):
    store = SessionStore(tmp_path / "nested" / "state.json")

    assert store.save_last_playlist("Chill") is True
    assert SessionStore(store.path).get_last_playlist() == "Chill"
    assert json.loads(store.path.read_text()) == {"lastPlaylist": "Chill"}


def test_save_preserves_other_keys(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"volume": 0.5, "lastPlaylist": "Old"}))

    SessionStore(path).save_last_playlist("New")

    assert json.loads(path.read_text()) == {"volume": 0.5, "lastPlaylist": "New"}


def test_corrupt_file_reads_as_none_and_is_overwritten(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    store = SessionStore(path)

    assert store.get_last_playlist() is None
    assert store.save_last_playlist("Rock") is True
    assert store.get_last_playlist() == "Rock"


def test_unwritable_location_returns_false(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = SessionStore(blocker / "state.json")

    assert store.save_last_playlist("Rock") is False
