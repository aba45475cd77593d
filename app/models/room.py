"""Room model for managing a shared Bingo session."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.constants import MAX_PLAYERS, MIN_PLAYERS
from app.models.enums import RoomState
from app.models.player import Player
from app.models.room_event import RoomEvent, RoomEventType


def clamp_max_players(requested: int) -> int:
    """Clamp a requested room capacity into the supported range."""
    return min(max(MIN_PLAYERS, requested), MAX_PLAYERS)


@dataclass
class Room:
    """Represents a Bingo room.

    Players take turns calling numbers in join order. The room only
    gates turns and relays calls; board state lives on the clients.

    Attributes:
        code: Short shareable room code
        max_players: Room capacity (2-5)
        players: Players in join order
        state: Current room state
        current_turn_index: Index of the player whose turn it is (None before start)
        created_at: Timestamp when the room was created
        history: Recorded room events, oldest first

    """

    code: str
    max_players: int = MAX_PLAYERS
    players: list[Player] = field(default_factory=list)
    state: RoomState = RoomState.WAITING
    current_turn_index: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    history: list[RoomEvent] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.max_players = clamp_max_players(self.max_players)

    def add_player(self, player: Player) -> bool:
        """Add a player to the room."""
        if self.is_full():
            return False
        if any(p.id == player.id for p in self.players):
            return False

        self.players.append(player)
        return True

    def remove_player(self, player_id: str) -> int | None:
        """Remove a player from the room.

        Returns:
            The index the player occupied, or None if not seated here

        """
        index = self.get_player_index(player_id)
        if index is not None:
            self.players.pop(index)
        return index

    def get_player(self, player_id: str) -> Player | None:
        """Get a player by ID."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_player_index(self, player_id: str) -> int | None:
        """Get a player's position in turn order."""
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return None

    def is_full(self) -> bool:
        """Check if room is at max capacity."""
        return len(self.players) >= self.max_players

    def is_empty(self) -> bool:
        """Check if the last player has left."""
        return not self.players

    @property
    def host(self) -> Player | None:
        """Get the current host."""
        for player in self.players:
            if player.is_host:
                return player
        return None

    def ensure_host(self) -> Player | None:
        """Promote the first player if nobody hosts the room.

        Returns:
            The newly promoted player, or None if no change was needed

        """
        if not self.players or self.host is not None:
            return None
        self.players[0].is_host = True
        return self.players[0]

    @property
    def current_player(self) -> Player | None:
        """Get the player whose turn it is."""
        if self.current_turn_index is None:
            return None
        if 0 <= self.current_turn_index < len(self.players):
            return self.players[self.current_turn_index]
        return None

    def start_game(self) -> Player | None:
        """Start (or restart) the game with the first player to move."""
        self.state = RoomState.IN_PROGRESS
        self.current_turn_index = 0
        return self.current_player

    def is_players_turn(self, player_id: str) -> bool:
        """Check whether it is this player's turn."""
        index = self.get_player_index(player_id)
        return index is not None and index == self.current_turn_index

    def advance_turn(self) -> Player | None:
        """Pass the turn to the next player in join order."""
        if self.current_turn_index is None or not self.players:
            return None
        self.current_turn_index = (self.current_turn_index + 1) % len(self.players)
        return self.current_player

    def repair_turn(self, removed_index: int) -> Player | None:
        """Re-point the turn index after a player at removed_index left.

        The index wraps modulo the new player count when the departed
        player sat at or before the current turn. It is not shifted back,
        so removing a player seated before the current one hands the turn
        to whoever slid into that slot.

        Returns:
            The current player if the turn index was touched, else None

        """
        # Unstarted rooms have no turn, so leaving one never sends a turnUpdate
        if self.current_turn_index is None or not self.players:
            return None
        if removed_index > self.current_turn_index:
            return None
        self.current_turn_index = self.current_turn_index % len(self.players)
        return self.current_player

    def record_event(
        self,
        event_type: RoomEventType,
        player_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> RoomEvent:
        """Append an event to the room history."""
        event = RoomEvent(
            room_code=self.code,
            event_type=event_type,
            player_id=player_id,
            data=data or {},
        )
        self.history.append(event)
        return event

    def roster(self) -> dict[str, Any]:
        """Build the playersList payload."""
        return {
            "players": [p.to_dict() for p in self.players],
            "maxPlayers": self.max_players,
        }

    def get_summary(self) -> dict[str, Any]:
        """Get summary without history (for listing)."""
        return {
            "roomCode": self.code,
            "state": self.state.value,
            "playerCount": len(self.players),
            "maxPlayers": self.max_players,
            "joinable": not self.is_full(),
            "playerNames": [p.name for p in self.players],
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary including the full history."""
        current = self.current_player
        return {
            **self.get_summary(),
            "players": [p.to_dict() for p in self.players],
            "currentTurnIndex": self.current_turn_index,
            "currentPlayerId": current.id if current else None,
            "createdAt": self.created_at.isoformat(),
            "history": [e.to_dict() for e in self.history],
        }

    def __str__(self) -> str:
        """Return string representation."""
        return (
            f"Room {self.code}: {len(self.players)}/{self.max_players} players, "
            f"State: {self.state.value}"
        )
