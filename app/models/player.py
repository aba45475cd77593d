"""Player model."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Player:
    """Represents a player seated in a room.

    Attributes:
        id: Connection identifier (unique per live connection)
        name: Player's display name, as sent by the client
        is_host: Whether this player hosts the room

    """

    id: str
    name: str
    is_host: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation used in roster events."""
        return {"id": self.id, "name": self.name, "isHost": self.is_host}

    def __str__(self) -> str:
        """Return string representation."""
        host_str = " (Host)" if self.is_host else ""
        return f"{self.name}{host_str}"
