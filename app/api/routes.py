"""API routes."""

from typing import Any

from fastapi import APIRouter, HTTPException, Request, WebSocket

from app.api.responses import RoomListResponse, RoomSummary
from app.api.websocket import ConnectionManager
from app.services.room_registry import RoomRegistry

router = APIRouter()


def _registry(request: Request) -> RoomRegistry:
    return request.app.state.room_registry


@router.websocket("/ws")
async def room_socket(websocket: WebSocket) -> None:
    """WebSocket endpoint carrying all room commands for one player.

    Args:
        websocket: WebSocket connection

    """
    manager: ConnectionManager = websocket.app.state.connection_manager
    await manager.handle_connection(websocket)


@router.get("/rooms")
async def get_active_rooms(request: Request) -> RoomListResponse:
    """Get list of active rooms.

    Returns:
        Room summaries, joinable rooms first, then by player count descending

    """
    summaries = [RoomSummary(**room.get_summary()) for room in _registry(request).active_rooms()]
    summaries.sort(key=lambda r: (not r.joinable, -r.player_count))

    return RoomListResponse(rooms=summaries, count=len(summaries))


@router.get("/rooms/{room_code}")
async def get_room(room_code: str, request: Request) -> dict[str, Any]:
    """Get room state and history.

    Args:
        room_code: Room code (case-insensitive)

    Returns:
        Room state information

    """
    room = _registry(request).get_room(room_code)

    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    return room.to_dict()
