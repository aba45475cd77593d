"""Tests for the Room model: capacity, host, and turn rotation."""

import pytest

from app.models.enums import RoomState
from app.models.player import Player
from app.models.room import Room, clamp_max_players
from app.models.room_event import RoomEventType


def make_room(names: list[str], max_players: int = 5) -> Room:
    """Create a room seated with the given players, first one hosting."""
    room = Room(code="ABC123", max_players=max_players)
    for i, name in enumerate(names):
        room.add_player(Player(id=name.lower(), name=name, is_host=i == 0))
    return room


# =============================================================================
# CAPACITY
# =============================================================================


class TestCapacity:
    """Test room capacity rules."""

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [(1, 2), (2, 2), (3, 3), (5, 5), (9, 5), (-4, 2)],
    )
    def test_clamp_max_players(self, requested, expected):
        """Capacity is always clamped into 2-5."""
        assert clamp_max_players(requested) == expected
        assert Room(code="X", max_players=requested).max_players == expected

    def test_add_player_refused_when_full(self):
        """A full room refuses more players and stays unchanged."""
        room = make_room(["Alice", "Bob"], max_players=2)

        assert room.is_full()
        assert not room.add_player(Player(id="carol", name="Carol"))
        assert [p.id for p in room.players] == ["alice", "bob"]

    def test_add_player_refuses_duplicate_id(self):
        """The same connection cannot be seated twice."""
        room = make_room(["Alice"])

        assert not room.add_player(Player(id="alice", name="Alice again"))
        assert len(room.players) == 1

    def test_remove_player_returns_index(self):
        """Removing reports the seat the player occupied."""
        room = make_room(["Alice", "Bob", "Carol"])

        assert room.remove_player("bob") == 1
        assert room.remove_player("bob") is None
        assert [p.id for p in room.players] == ["alice", "carol"]


# =============================================================================
# HOST
# =============================================================================


class TestHost:
    """Test host tracking."""

    def test_ensure_host_promotes_first_player(self):
        """When the host leaves, the first remaining player takes over."""
        room = make_room(["Alice", "Bob", "Carol"])
        room.remove_player("alice")

        new_host = room.ensure_host()

        assert new_host is not None
        assert new_host.id == "bob"
        assert [p.id for p in room.players if p.is_host] == ["bob"]

    def test_ensure_host_noop_when_host_present(self):
        """Nothing changes while a host is still seated."""
        room = make_room(["Alice", "Bob"])
        room.remove_player("bob")

        assert room.ensure_host() is None
        assert room.host.id == "alice"


# =============================================================================
# TURN ORDER
# =============================================================================


class TestTurnOrder:
    """Test turn order mechanics."""

    def test_start_game_gives_first_turn_to_first_player(self):
        """Rule: the first player to join moves first."""
        room = make_room(["Alice", "Bob"])
        assert room.state == RoomState.WAITING
        assert room.current_player is None

        first = room.start_game()

        assert room.state == RoomState.IN_PROGRESS
        assert room.current_turn_index == 0
        assert first.id == "alice"

    def test_advance_turn_wraps(self):
        """Turns rotate in join order and wrap to the start."""
        room = make_room(["Alice", "Bob", "Carol"])
        room.start_game()

        order = [room.advance_turn().id for _ in range(4)]

        assert order == ["bob", "carol", "alice", "bob"]

    def test_restart_resets_turn_but_keeps_history(self):
        """Starting again resets the turn index without clearing history."""
        room = make_room(["Alice", "Bob"])
        room.start_game()
        room.advance_turn()
        room.record_event(RoomEventType.NUMBER_SELECTED, player_id="alice", data={"number": 7})

        room.start_game()

        assert room.current_turn_index == 0
        assert [e.event_type for e in room.history] == [RoomEventType.NUMBER_SELECTED]

    def test_is_players_turn(self):
        """Only the player at the turn index may move."""
        room = make_room(["Alice", "Bob"])
        assert not room.is_players_turn("alice")

        room.start_game()

        assert room.is_players_turn("alice")
        assert not room.is_players_turn("bob")
        assert not room.is_players_turn("nobody")


class TestTurnRepair:
    """Test turn index repair after a player leaves."""

    def test_current_player_leaves(self):
        """Departing current player hands the turn to whoever fills the slot."""
        room = make_room(["Alice", "Bob", "Carol"])
        room.start_game()

        index = room.remove_player("alice")
        current = room.repair_turn(index)

        assert room.current_turn_index == 0
        assert current.id == "bob"

    def test_last_seat_current_player_leaves(self):
        """Turn index wraps to the front when the last seat empties."""
        room = make_room(["Alice", "Bob", "Carol"])
        room.start_game()
        room.advance_turn()
        room.advance_turn()

        index = room.remove_player("carol")
        current = room.repair_turn(index)

        assert room.current_turn_index == 0
        assert current.id == "alice"

    def test_earlier_player_leaves_index_not_shifted(self):
        """Index is wrapped, not shifted, so the player after the gap moves."""
        room = make_room(["Alice", "Bob", "Carol"])
        room.start_game()
        room.advance_turn()  # Bob's turn

        index = room.remove_player("alice")
        current = room.repair_turn(index)

        assert room.current_turn_index == 1
        assert current.id == "carol"

    def test_later_player_leaves(self):
        """Players seated after the current turn leave the index alone."""
        room = make_room(["Alice", "Bob", "Carol"])
        room.start_game()

        index = room.remove_player("carol")

        assert room.repair_turn(index) is None
        assert room.current_turn_index == 0

    def test_no_repair_before_start(self):
        """A room that has not started has no turn to repair."""
        room = make_room(["Alice", "Bob"])

        index = room.remove_player("alice")

        assert room.repair_turn(index) is None
        assert room.current_turn_index is None


class TestSerialization:
    """Test wire representations."""

    def test_roster(self):
        """Roster payload lists players in join order with host flags."""
        room = make_room(["Alice", "Bob"], max_players=4)

        assert room.roster() == {
            "players": [
                {"id": "alice", "name": "Alice", "isHost": True},
                {"id": "bob", "name": "Bob", "isHost": False},
            ],
            "maxPlayers": 4,
        }

    def test_to_dict_includes_history(self):
        """Room detail carries the current player and recorded events."""
        room = make_room(["Alice", "Bob"])
        room.start_game()
        room.record_event(RoomEventType.BINGO_CALLED, player_id="alice")

        data = room.to_dict()

        assert data["roomCode"] == "ABC123"
        assert data["state"] == "IN_PROGRESS"
        assert data["currentPlayerId"] == "alice"
        assert data["history"][0]["event_type"] == "BINGO_CALLED"
