"""Tests for the in-memory room registry."""

from app.constants import ROOM_CODE_ALPHABET
from app.models.player import Player
from app.services.room_registry import RoomRegistry, generate_room_code, normalize_room_code


def scripted_codes(*codes: str):
    """Build a code generator that yields the given codes in order."""
    remaining = iter(codes)
    return lambda _length: next(remaining)


class TestRoomCodes:
    """Tests for room code generation."""

    def test_generated_code_shape(self):
        """Codes are short, uppercase and alphanumeric."""
        code = generate_room_code(6)

        assert len(code) == 6
        assert all(ch in ROOM_CODE_ALPHABET for ch in code)

    def test_collision_is_retried(self):
        """A code already used by an active room is never handed out."""
        registry = RoomRegistry(code_generator=scripted_codes("AAAAAA", "AAAAAA", "BBBBBB"))

        first = registry.create_room("alice", "Alice", 2)
        second = registry.create_room("bob", "Bob", 2)

        assert first.code == "AAAAAA"
        assert second.code == "BBBBBB"

    def test_code_reused_after_deletion(self):
        """Codes of deleted rooms may be drawn again."""
        registry = RoomRegistry(code_generator=scripted_codes("AAAAAA", "AAAAAA"))

        registry.create_room("alice", "Alice", 2)
        registry.remove_connection("alice")
        room = registry.create_room("bob", "Bob", 2)

        assert room.code == "AAAAAA"

    def test_many_rooms_have_unique_codes(self):
        """Codes are unique among active rooms."""
        registry = RoomRegistry()

        codes = [registry.create_room(f"p{i}", f"P{i}", 2).code for i in range(200)]

        assert len(set(codes)) == 200

    def test_normalize(self):
        """Typed codes are trimmed and uppercased."""
        assert normalize_room_code("  ab12cd ") == "AB12CD"


class TestSessions:
    """Tests for room membership bookkeeping."""

    def test_create_room_seats_host(self):
        """The creator is the sole player and host."""
        registry = RoomRegistry()

        room = registry.create_room("alice", "Alice", 9)

        assert room.max_players == 5
        assert [(p.id, p.is_host) for p in room.players] == [("alice", True)]
        assert registry.room_for_connection("alice") is room
        assert registry.get_room(room.code.lower()) is room
        assert room.code in registry

    def test_add_player_refuses_seated_connection(self):
        """A connection sits in at most one room."""
        registry = RoomRegistry()
        first = registry.create_room("alice", "Alice", 3)
        second = registry.create_room("bob", "Bob", 3)

        assert not registry.add_player(second, Player(id="alice", name="Alice"))
        assert registry.room_for_connection("alice") is first
        assert len(second.players) == 1

    def test_remove_last_player_deletes_room(self):
        """Rooms disappear when their last player leaves."""
        registry = RoomRegistry()
        room = registry.create_room("alice", "Alice", 3)

        result = registry.remove_connection("alice")

        assert result == (room, 0)
        assert registry.get_room(room.code) is None
        assert len(registry) == 0
        assert registry.room_for_connection("alice") is None

    def test_remove_unknown_connection(self):
        """Connections in no room are ignored."""
        registry = RoomRegistry()

        assert registry.remove_connection("ghost") is None

    def test_remove_keeps_room_with_players(self):
        """Rooms with players left stay registered."""
        registry = RoomRegistry()
        room = registry.create_room("alice", "Alice", 3)
        registry.add_player(room, Player(id="bob", name="Bob"))

        result = registry.remove_connection("alice")

        assert result == (room, 0)
        assert registry.get_room(room.code) is room
        assert registry.room_for_connection("bob") is room

    def test_active_rooms_and_clear(self):
        """Active rooms are listed oldest first and can be cleared."""
        registry = RoomRegistry()
        first = registry.create_room("alice", "Alice", 2)
        second = registry.create_room("bob", "Bob", 2)

        assert registry.active_rooms() == [first, second]

        registry.clear()

        assert registry.active_rooms() == []
        assert registry.sessions == {}
