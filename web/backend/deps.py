from fastapi.requests import HTTPConnection

from .player_service import PlayerService


def get_player_service(conn: HTTPConnection) -> PlayerService:
    """FastAPI dependency for the app's player service (HTTP and WebSocket)."""
    return conn.app.state.player_service
