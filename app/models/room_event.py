"""Room event model for the room history.

Captures the significant things that happen in a room so the read-only
room endpoint can show who joined, who called which number, and who
called bingo.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class RoomEventType(str, Enum):
    """Types of room events that can be recorded."""

    # Room lifecycle
    ROOM_CREATED = "ROOM_CREATED"
    PLAYER_JOINED = "PLAYER_JOINED"
    PLAYER_LEFT = "PLAYER_LEFT"
    HOST_CHANGED = "HOST_CHANGED"

    # Game play
    GAME_STARTED = "GAME_STARTED"
    NUMBER_SELECTED = "NUMBER_SELECTED"
    BINGO_CALLED = "BINGO_CALLED"


@dataclass
class RoomEvent:
    """Represents a single room event."""

    room_code: str
    event_type: RoomEventType
    timestamp: datetime = field(default_factory=_utc_now)
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            "room_code": self.room_code,
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "player_id": self.player_id,
            "data": self.data,
        }
