"""Tests for FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from playlist_player.core.config import Config
from web.backend.main import create_app
from web.backend.player_service import PlayerService


def _client(root, store, extractor) -> TestClient:
    config = Config()
    config.library.root = str(root)
    service = PlayerService(root, store=store, extractor=extractor, watch=False)
    return TestClient(create_app(config, service))


@pytest.fixture
def client(library, store, extractor):
    with _client(library, store, extractor) as client:
        yield client


@pytest.fixture
def empty_client(tmp_path, store, extractor):
    root = tmp_path / "empty"
    root.mkdir()
    with _client(root, store, extractor) as client:
        yield client


def test_health_endpoint(client):
    """Test health check endpoint returns 200."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_cors_headers(client):
    """Test CORS headers are present."""
    response = client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_list_playlists(client):
    response = client.get("/api/playlists")
    assert response.status_code == 200
    assert response.json() == ["A", "B"]


def test_current_state_uses_wire_keys(client):
    data = client.get("/api/current-state").json()

    assert data["currentPlaylist"] == "A"
    assert data["isPlaying"] is True
    assert data["isPaused"] is False
    assert data["totalSongs"] == 3
    assert data["playedSongs"] == []
    song = data["currentSong"]
    assert set(song) == {
        "filename",
        "filepath",
        "relativePath",
        "title",
        "artist",
        "album",
        "duration",
        "picture",
    }
    assert song["relativePath"].startswith("A/")


def test_player_status(client):
    assert client.get("/api/player-status").json() == {"playersConnected": False}


def test_next_and_previous(client):
    response = client.post("/api/player/next")
    assert response.status_code == 200
    assert len(response.json()["playedSongs"]) == 1

    response = client.post("/api/player/previous")
    assert response.status_code == 200
    assert len(response.json()["playedSongs"]) == 1


def test_switch_playlist(client):
    response = client.post("/api/player/switch-playlist", json={"name": "B"})
    assert response.status_code == 200
    assert response.json()["currentPlaylist"] == "B"
    assert response.json()["totalSongs"] == 2


def test_switch_to_unknown_playlist_is_404(client):
    response = client.post("/api/player/switch-playlist", json={"name": "Nope"})
    assert response.status_code == 404
    assert "Nope" in response.json()["detail"]
    assert client.get("/api/current-state").json()["currentPlaylist"] == "A"


def test_switch_with_blank_name_is_400(client):
    response = client.post("/api/player/switch-playlist", json={"name": ""})
    assert response.status_code == 400


def test_restart_flag_consumed_by_next_read(client):
    assert client.post("/api/player/restart").json()["shouldRestart"] is True
    assert client.get("/api/current-state").json()["shouldRestart"] is False


def test_toggle_play_pause(client):
    assert client.post("/api/player/toggle-play-pause").json()["isPaused"] is True
    assert client.post("/api/player/toggle-play-pause").json()["isPaused"] is False


def test_commands_without_playlist_are_409(empty_client):
    for path in ("next", "previous", "restart", "toggle-play-pause"):
        assert empty_client.post(f"/api/player/{path}").status_code == 409
    data = empty_client.get("/api/current-state").json()
    assert data["currentPlaylist"] is None
    assert data["playlists"] == []


def test_audio_files_are_served(client):
    response = client.get("/playlists/A/t1.mp3")
    assert response.status_code == 200
    assert response.content == b"ID3"


def test_websocket_initial_messages(client):
    with client.websocket_connect("/ws/sync") as ws:
        full = ws.receive_json()
        status = ws.receive_json()

    assert full["type"] == "sync:full"
    assert full["data"]["currentPlaylist"] == "A"
    assert status == {"type": "player:status", "data": {"playersConnected": False}, "ts": status["ts"]}


def test_websocket_command_broadcasts_to_all(client):
    with client.websocket_connect("/ws/sync") as controller, client.websocket_connect("/ws/sync") as other:
        for ws in (controller, other):
            ws.receive_json()
            ws.receive_json()

        controller.send_json({"type": "switch-playlist", "data": "B"})

        for ws in (controller, other):
            message = ws.receive_json()
            assert message["type"] == "playback:state"
            assert message["data"]["currentPlaylist"] == "B"


def test_websocket_identify_as_player(client):
    with client.websocket_connect("/ws/sync") as ws:
        ws.receive_json()
        ws.receive_json()

        ws.send_json({"type": "identify-as-player"})
        message = ws.receive_json()

        assert message["type"] == "player:status"
        assert message["data"] == {"playersConnected": True}
        assert client.get("/api/player-status").json() == {"playersConnected": True}

    assert client.get("/api/player-status").json() == {"playersConnected": False}


def test_websocket_rejected_command_sends_targeted_error(client):
    with client.websocket_connect("/ws/sync") as ws:
        ws.receive_json()
        ws.receive_json()

        ws.send_json({"type": "switch-playlist", "data": "Nope"})
        message = ws.receive_json()

        assert message["type"] == "error"
        assert message["data"]["code"] == "not_found"
        assert "Nope" in message["data"]["message"]


def test_websocket_invalid_message(client):
    with client.websocket_connect("/ws/sync") as ws:
        ws.receive_json()
        ws.receive_json()

        ws.send_text("not json")
        message = ws.receive_json()
        assert message["type"] == "error"
        assert message["data"]["code"] == "invalid_command"

        ws.send_json({"type": "rewind"})
        message = ws.receive_json()
        assert message["data"]["code"] == "invalid_command"

        # Connection stays usable
        ws.send_json({"type": "next-song"})
        assert ws.receive_json()["type"] == "playback:state"
