"""Room logic handler for WebSocket commands.

Every handler runs to completion without awaiting and returns the
messages it produced. The connection manager delivers them afterwards,
so room state can be exercised without a live socket.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from app.api.responses import (
    ERROR_MESSAGES,
    CallBingoPayload,
    Command,
    CreateRoomPayload,
    ErrorCode,
    JoinRoomPayload,
    SelectNumberPayload,
    ServerMessage,
    StartGamePayload,
)
from app.constants import DEFAULT_MAX_PLAYERS
from app.models.player import Player
from app.models.room import Room
from app.models.room_event import RoomEventType
from app.services.room_registry import RoomRegistry

logger = logging.getLogger(__name__)

Handler = Callable[[str, Any], list[ServerMessage]]


class RoomHandler:
    """Coordinates rooms, rosters and turns for connected players.

    Processes client commands (createRoom, joinRoom, startGame,
    selectNumber, callBingo, leaveRoom) and disconnects, and generates
    the server messages they cause.

    Number legality and bingo claims are relayed as-is; clients own the
    boards and are trusted to report them honestly.
    """

    def __init__(
        self, registry: RoomRegistry, default_max_players: int = DEFAULT_MAX_PLAYERS
    ) -> None:
        """Initialize handler with the room registry it owns."""
        self.registry = registry
        self.default_max_players = default_max_players
        self._handlers: dict[str, tuple[type[BaseModel] | None, Handler]] = {
            Command.CREATE_ROOM.value: (CreateRoomPayload, self._handle_create_room),
            Command.JOIN_ROOM.value: (JoinRoomPayload, self._handle_join_room),
            Command.START_GAME.value: (StartGamePayload, self._handle_start_game),
            Command.SELECT_NUMBER.value: (SelectNumberPayload, self._handle_select_number),
            Command.CALL_BINGO.value: (CallBingoPayload, self._handle_call_bingo),
            Command.LEAVE_ROOM.value: (None, self._handle_leave_room),
        }

    def handle_command(
        self, connection_id: str, command: str, content: Any
    ) -> list[ServerMessage]:
        """Route incoming command to appropriate handler.

        Args:
            connection_id: Connection that sent the command
            command: Command name
            content: Command payload

        Returns:
            Messages to deliver, in order

        """
        entry = self._handlers.get(command)
        if entry is None:
            logger.warning("Unknown command %s from %s", command, connection_id)
            return []

        payload_model, handler = entry
        payload = None
        if payload_model is not None:
            try:
                payload = payload_model.model_validate(content)
            except ValidationError as e:
                logger.warning(
                    "Invalid %s payload from %s: %d error(s)",
                    command,
                    connection_id,
                    e.error_count(),
                )
                return [self._error(connection_id, ErrorCode.INVALID_PAYLOAD)]

        return handler(connection_id, payload)

    def handle_disconnect(self, connection_id: str) -> list[ServerMessage]:
        """Handle a transport-level disconnect."""
        return self._leave_current_room(connection_id)

    def reject_message(self, connection_id: str) -> list[ServerMessage]:
        """Answer a frame that could not be read as a command."""
        return [self._error(connection_id, ErrorCode.INVALID_MESSAGE)]

    def _handle_create_room(
        self, connection_id: str, payload: CreateRoomPayload
    ) -> list[ServerMessage]:
        """Handle createRoom - the sender becomes host of a new room."""
        messages = self._leave_current_room(connection_id)

        requested = payload.max_players
        if requested is None:
            requested = self.default_max_players

        room = self.registry.create_room(connection_id, payload.player_name, requested)

        messages.append(
            self._private(
                connection_id, Command.ROOM_CREATED, {"roomCode": room.code}, room.code
            )
        )
        messages.append(self._broadcast(room, Command.PLAYERS_LIST, room.roster()))
        return messages

    def _handle_join_room(
        self, connection_id: str, payload: JoinRoomPayload
    ) -> list[ServerMessage]:
        """Handle joinRoom - seat the sender and auto-start a filled room."""
        room = self.registry.get_room(payload.room_code)
        if room is None:
            return [self._join_failed(connection_id, ErrorCode.ROOM_NOT_FOUND)]

        if room.get_player(connection_id) is not None:
            return [self._join_failed(connection_id, ErrorCode.ALREADY_IN_ROOM, room.code)]

        if room.is_full():
            return [self._join_failed(connection_id, ErrorCode.ROOM_FULL, room.code)]

        # Sender is not in this room, so leaving never touches it
        messages = self._leave_current_room(connection_id)

        player = Player(id=connection_id, name=payload.player_name)
        self.registry.add_player(room, player)

        messages.append(
            self._private(connection_id, Command.JOINED_ROOM, {"success": True}, room.code)
        )
        messages.append(self._broadcast(room, Command.PLAYERS_LIST, room.roster()))
        messages.append(
            self._broadcast(room, Command.PLAYER_JOINED, {"player": player.to_dict()})
        )

        if len(room.players) == room.max_players:
            logger.info("Room %s is full, starting automatically", room.code)
            messages.extend(self._start_game(room))

        return messages

    def _handle_start_game(
        self, connection_id: str, payload: StartGamePayload
    ) -> list[ServerMessage]:
        """Handle startGame - any member may start; the client restricts it to the host."""
        room = self.registry.get_room(payload.room_code)
        if room is None:
            return []

        logger.info("Player %s started room %s", connection_id, room.code)
        return self._start_game(room)

    def _handle_select_number(
        self, connection_id: str, payload: SelectNumberPayload
    ) -> list[ServerMessage]:
        """Handle selectNumber - relay the call and pass the turn on."""
        room = self.registry.get_room(payload.room_code)
        if room is None:
            return []

        player = room.get_player(connection_id)
        if player is None:
            return []

        if not room.is_players_turn(connection_id):
            return [self._error(connection_id, ErrorCode.NOT_YOUR_TURN, room.code)]

        room.record_event(
            RoomEventType.NUMBER_SELECTED, player_id=player.id, data={"number": payload.number}
        )
        logger.info("Player %s selected %s in room %s", player.id, payload.number, room.code)

        messages = [
            self._broadcast(
                room, Command.NUMBER_SELECTED, {"number": payload.number, "player": player.name}
            )
        ]
        room.advance_turn()
        messages.append(self._turn_update(room))
        return messages

    def _handle_call_bingo(
        self, connection_id: str, payload: CallBingoPayload
    ) -> list[ServerMessage]:
        """Handle callBingo - announce the caller without verifying the claim."""
        room = self.registry.get_room(payload.room_code)
        if room is None:
            return []

        player = room.get_player(connection_id)
        if player is None:
            return []

        room.record_event(RoomEventType.BINGO_CALLED, player_id=player.id)
        logger.info("Player %s called bingo in room %s", player.id, room.code)
        return [self._broadcast(room, Command.BINGO_CALL, {"player": player.name})]

    def _handle_leave_room(self, connection_id: str, _payload: None) -> list[ServerMessage]:
        """Handle leaveRoom - same room effects as a disconnect."""
        return self._leave_current_room(connection_id)

    def _start_game(self, room: Room) -> list[ServerMessage]:
        """Reset the turn to the first player and announce the start."""
        room.start_game()
        room.record_event(RoomEventType.GAME_STARTED, data={"player_count": len(room.players)})

        return [
            self._broadcast(room, Command.GAME_STARTED, {}),
            self._turn_update(room),
        ]

    def _leave_current_room(self, connection_id: str) -> list[ServerMessage]:
        """Unseat a connection and repair host and turn for those who remain."""
        result = self.registry.remove_connection(connection_id)
        if result is None:
            return []

        room, removed_index = result
        if room.is_empty():
            return []

        new_host = room.ensure_host()
        if new_host is not None:
            room.record_event(RoomEventType.HOST_CHANGED, player_id=new_host.id)
            logger.info("Player %s is now host of room %s", new_host.id, room.code)

        messages = []
        if room.repair_turn(removed_index) is not None:
            messages.append(self._turn_update(room))

        messages.append(self._broadcast(room, Command.PLAYERS_LIST, room.roster()))
        return messages

    def _turn_update(self, room: Room) -> ServerMessage:
        """Build the turnUpdate broadcast for the current player."""
        current = room.current_player
        content = {
            "playerId": current.id if current else None,
            "playerName": current.name if current else None,
        }
        return self._broadcast(room, Command.TURN_UPDATE, content)

    def _broadcast(self, room: Room, command: Command, content: Any) -> ServerMessage:
        """Build a message for every connection seated in the room right now."""
        return ServerMessage(
            command=command,
            room_code=room.code,
            content=content,
            recipients=[p.id for p in room.players],
        )

    def _private(
        self, connection_id: str, command: Command, content: Any, room_code: str = ""
    ) -> ServerMessage:
        """Build a message for a single connection."""
        return ServerMessage(
            command=command,
            room_code=room_code,
            content=content,
            receiver_id=connection_id,
        )

    def _error(
        self, connection_id: str, code: ErrorCode, room_code: str = ""
    ) -> ServerMessage:
        """Build a private error message."""
        return self._private(
            connection_id,
            Command.ERROR,
            {"message": ERROR_MESSAGES[code], "code": code.value},
            room_code,
        )

    def _join_failed(
        self, connection_id: str, code: ErrorCode, room_code: str = ""
    ) -> ServerMessage:
        """Build a private joinedRoom failure."""
        logger.info("Join by %s refused: %s", connection_id, ERROR_MESSAGES[code])
        return self._private(
            connection_id,
            Command.JOINED_ROOM,
            {"success": False, "message": ERROR_MESSAGES[code]},
            room_code,
        )
