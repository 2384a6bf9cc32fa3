import time
import uuid
from typing import Any

from fastapi import WebSocket
from loguru import logger


class SyncManager:
    """Manages WebSocket connections and broadcasts state updates.

    Tracks which connections identified themselves as player surfaces so
    controllers can be told whether anything is actually rendering audio.
    Mutations are expected to be serialized by the caller (PlayerService).
    """

    def __init__(self):
        # {client_id: websocket}
        self.connections: dict[str, WebSocket] = {}
        # Client ids that sent identify-as-player
        self.players: set[str] = set()

    @property
    def players_connected(self) -> bool:
        return bool(self.players)

    def get_player_status(self) -> dict[str, bool]:
        return {"playersConnected": self.players_connected}

    async def connect(self, ws: WebSocket) -> str:
        """Accept and store a new WebSocket connection. Returns its client id."""
        await ws.accept()
        client_id = str(uuid.uuid4())
        self.connections[client_id] = ws
        logger.info(f"Client connected: {client_id}")
        return client_id

    def disconnect(self, client_id: str) -> bool:
        """Remove a connection. Returns True if player liveness changed."""
        was_live = self.players_connected
        self.connections.pop(client_id, None)
        self.players.discard(client_id)
        logger.info(f"Client disconnected: {client_id}")
        return was_live != self.players_connected

    def mark_player(self, client_id: str) -> bool:
        """Mark a client as a player. Returns True if liveness went from none to some."""
        if client_id not in self.connections:
            return False
        was_live = self.players_connected
        self.players.add(client_id)
        logger.info(f"Player identified: {client_id} ({len(self.players)} connected)")
        return not was_live

    async def send(self, client_id: str, event_type: str, data: Any) -> bool:
        """Send a message to one client. Drops the connection if sending fails."""
        ws = self.connections.get(client_id)
        if ws is None:
            return False
        try:
            await ws.send_json(self._message(event_type, data))
            return True
        except Exception as e:
            logger.debug(f"Dropping client {client_id} after failed send: {e}")
            self.disconnect(client_id)
            return False

    async def broadcast(self, event_type: str, data: Any) -> None:
        """Send a message to all connected clients."""
        was_live = self.players_connected
        await self._send_all(self._message(event_type, data))

        # A dead player socket may have taken liveness with it
        if was_live != self.players_connected:
            await self.broadcast_player_status()

    async def broadcast_player_status(self) -> None:
        """Tell every client whether at least one player is connected."""
        await self._send_all(self._message("player:status", self.get_player_status()))

    async def _send_all(self, message: dict) -> None:
        dead_connections: list[str] = []

        for client_id, conn in list(self.connections.items()):
            try:
                await conn.send_json(message)
            except Exception:
                dead_connections.append(client_id)

        for client_id in dead_connections:
            self.connections.pop(client_id, None)
            self.players.discard(client_id)

        if dead_connections:
            logger.info(f"Removed {len(dead_connections)} dead connection(s)")

    @staticmethod
    def _message(event_type: str, data: Any) -> dict:
        return {
            "type": event_type,
            "data": data,
            "ts": time.time(),
        }
