"""In-memory registry of active rooms.

Owns every live Room and the index from connection id to the room that
connection is seated in. One registry is created per application and
handed to the coordinator; nothing else mutates it.
"""

import logging
import random
from collections.abc import Callable

from app.constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from app.models.player import Player
from app.models.room import Room
from app.models.room_event import RoomEventType

logger = logging.getLogger(__name__)


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    """Generate a random, human-shareable room code."""
    return "".join(random.choices(ROOM_CODE_ALPHABET, k=length))  # noqa: S311


def normalize_room_code(code: str) -> str:
    """Normalize a room code typed by a player."""
    return code.strip().upper()


class RoomRegistry:
    """Registry of active rooms and player sessions."""

    def __init__(
        self,
        code_length: int = ROOM_CODE_LENGTH,
        code_generator: Callable[[int], str] = generate_room_code,
    ) -> None:
        """Initialize an empty registry.

        Args:
            code_length: Length of generated room codes
            code_generator: Callable producing a candidate code of a given length

        """
        self.code_length = code_length
        self._code_generator = code_generator
        # room_code -> Room
        self.rooms: dict[str, Room] = {}
        # connection_id -> room_code
        self.sessions: dict[str, str] = {}

    def _fresh_code(self) -> str:
        """Draw codes until one is not used by an active room."""
        while True:
            code = self._code_generator(self.code_length)
            if code not in self.rooms:
                return code

    def create_room(self, host_id: str, host_name: str, max_players: int) -> Room:
        """Create a room with the given connection as its host.

        Args:
            host_id: Connection id of the creating player
            host_name: Display name of the creating player
            max_players: Requested capacity (clamped by the room)

        Returns:
            The new room

        """
        code = self._fresh_code()
        room = Room(code=code, max_players=max_players)
        room.add_player(Player(id=host_id, name=host_name, is_host=True))
        room.record_event(
            RoomEventType.ROOM_CREATED,
            player_id=host_id,
            data={"name": host_name, "max_players": room.max_players},
        )

        self.rooms[code] = room
        self.sessions[host_id] = code
        logger.info("Room %s created by %s (max %d players)", code, host_id, room.max_players)
        return room

    def get_room(self, code: str) -> Room | None:
        """Get a room by code (case-insensitive)."""
        return self.rooms.get(normalize_room_code(code))

    def room_for_connection(self, connection_id: str) -> Room | None:
        """Get the room a connection is seated in."""
        code = self.sessions.get(connection_id)
        if code is None:
            return None
        return self.rooms.get(code)

    def add_player(self, room: Room, player: Player) -> bool:
        """Seat a player in a room and index their connection."""
        if player.id in self.sessions:
            return False
        if not room.add_player(player):
            return False

        self.sessions[player.id] = room.code
        room.record_event(
            RoomEventType.PLAYER_JOINED, player_id=player.id, data={"name": player.name}
        )
        logger.info("Player %s joined room %s", player.id, room.code)
        return True

    def remove_connection(self, connection_id: str) -> tuple[Room, int] | None:
        """Unseat a connection from whatever room it is in.

        Empty rooms are deleted; the returned room is then no longer
        registered.

        Returns:
            The room and the index the player occupied, or None

        """
        code = self.sessions.pop(connection_id, None)
        if code is None:
            return None

        room = self.rooms.get(code)
        if room is None:
            return None

        index = room.remove_player(connection_id)
        if index is None:
            return None

        room.record_event(RoomEventType.PLAYER_LEFT, player_id=connection_id)
        logger.info("Player %s left room %s", connection_id, code)

        if room.is_empty():
            self.delete_room(code)
        return room, index

    def delete_room(self, code: str) -> None:
        """Delete a room and drop any sessions still pointing at it."""
        room = self.rooms.pop(code, None)
        if room is None:
            return
        for player in room.players:
            self.sessions.pop(player.id, None)
        logger.info("Room %s deleted", code)

    def active_rooms(self) -> list[Room]:
        """Get all active rooms, oldest first."""
        return sorted(self.rooms.values(), key=lambda r: r.created_at)

    def clear(self) -> None:
        """Forget all rooms and sessions."""
        self.rooms.clear()
        self.sessions.clear()

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_room_code(code) in self.rooms
