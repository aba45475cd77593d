"""Response models and DTOs."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from app.models.enums import Command

__all__ = [
    "ERROR_MESSAGES",
    "CallBingoPayload",
    "Command",
    "CreateRoomPayload",
    "ErrorCode",
    "JoinRoomPayload",
    "RoomListResponse",
    "RoomSummary",
    "SelectNumberPayload",
    "ServerMessage",
    "StartGamePayload",
]


class ErrorCode(StrEnum):
    """Error codes for i18n translation on the frontend."""

    ROOM_NOT_FOUND = "error.roomNotFound"
    ROOM_FULL = "error.roomFull"
    ALREADY_IN_ROOM = "error.alreadyInRoom"
    NOT_YOUR_TURN = "error.notYourTurn"
    INVALID_PAYLOAD = "error.invalidPayload"
    INVALID_MESSAGE = "error.invalidMessage"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.ROOM_NOT_FOUND: "Room does not exist",
    ErrorCode.ROOM_FULL: "Room is full",
    ErrorCode.ALREADY_IN_ROOM: "Already in this room",
    ErrorCode.NOT_YOUR_TURN: "Not your turn",
    ErrorCode.INVALID_PAYLOAD: "Invalid payload",
    ErrorCode.INVALID_MESSAGE: "Message must be a JSON object with a command",
}


@dataclass
class ServerMessage:
    """Message sent from server to clients via WebSocket.

    Attributes:
        command: Command type
        room_code: Room the message concerns (empty for connection-level messages)
        content: Message payload (varies by command)
        receiver_id: Specific connection to receive (empty = room broadcast)
        recipients: Connections a room broadcast is delivered to

    """

    command: Command
    room_code: str
    content: Any = field(default_factory=dict)
    receiver_id: str = ""
    recipients: list[str] = field(default_factory=list)

    @property
    def is_broadcast(self) -> bool:
        """Whether this message goes to a room group rather than one connection."""
        return not self.receiver_id

    def targets(self) -> list[str]:
        """Connection ids this message is delivered to."""
        if self.receiver_id:
            return [self.receiver_id]
        return list(self.recipients)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": self.command.value,
            "content": self.content,
        }


class _Payload(BaseModel):
    """Base for inbound command payloads (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateRoomPayload(_Payload):
    """Payload of createRoom."""

    player_name: str = Field(alias="playerName")
    max_players: int | None = Field(default=None, alias="maxPlayers")


class JoinRoomPayload(_Payload):
    """Payload of joinRoom."""

    player_name: str = Field(alias="playerName")
    room_code: str = Field(alias="roomCode")


class StartGamePayload(_Payload):
    """Payload of startGame."""

    room_code: str = Field(alias="roomCode")


class SelectNumberPayload(_Payload):
    """Payload of selectNumber."""

    number: StrictInt
    room_code: str = Field(alias="roomCode")


class CallBingoPayload(_Payload):
    """Payload of callBingo."""

    room_code: str = Field(alias="roomCode")


class RoomSummary(BaseModel):
    """Room information for the lobby listing."""

    model_config = ConfigDict(populate_by_name=True)

    room_code: str = Field(alias="roomCode")
    state: str
    player_count: int = Field(alias="playerCount")
    max_players: int = Field(alias="maxPlayers")
    joinable: bool
    player_names: list[str] = Field(alias="playerNames")


class RoomListResponse(BaseModel):
    """Response for the active room listing."""

    rooms: list[RoomSummary]
    count: int
