import json

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from playlist_player.domain.exceptions import PlayerError

from ..deps import get_player_service
from ..player_service import PlayerService
from ..schemas import ClientCommand

router = APIRouter()


@router.websocket("/ws/sync")
async def sync_websocket(websocket: WebSocket, service: PlayerService = Depends(get_player_service)):
    """WebSocket endpoint for commands and real-time state synchronization."""
    # Sends the current state and player status before any command is read
    client_id = await service.connect_client(websocket)

    try:
        while True:
            message = await websocket.receive_text()
            try:
                command = ClientCommand.model_validate(json.loads(message))
            except (json.JSONDecodeError, ValidationError):
                logger.warning(f"Invalid message from WebSocket: {message}")
                await service.send_error(client_id, "Invalid message", "invalid_command")
                continue

            if command.type == "identify-as-player":
                await service.identify_player(client_id)
                continue

            try:
                await service.execute(command.type, command.data)
            except PlayerError as e:
                logger.warning(f"Command {command.type} from {client_id} rejected: {e}")
                await service.send_error(client_id, str(e), e.code)

    except WebSocketDisconnect:
        pass
    finally:
        await service.disconnect_client(client_id)
