"""Room domain models."""

from app.models.enums import Command, RoomState
from app.models.player import Player
from app.models.room import Room, clamp_max_players
from app.models.room_event import RoomEvent, RoomEventType

__all__ = [
    "Command",
    "Player",
    "Room",
    "RoomEvent",
    "RoomEventType",
    "RoomState",
    "clamp_max_players",
]
