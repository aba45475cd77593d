"""Enums for rooms and the websocket protocol."""

from enum import Enum


class RoomState(str, Enum):
    """Room states during the lifecycle."""

    WAITING = "WAITING"
    IN_PROGRESS = "IN_PROGRESS"


class Command(str, Enum):
    """WebSocket commands."""

    # Commands sent to players
    CONNECTED = "connected"
    ROOM_CREATED = "roomCreated"
    JOINED_ROOM = "joinedRoom"
    PLAYERS_LIST = "playersList"
    PLAYER_JOINED = "playerJoined"
    GAME_STARTED = "gameStarted"
    TURN_UPDATE = "turnUpdate"
    NUMBER_SELECTED = "numberSelected"
    BINGO_CALL = "bingoCall"
    ERROR = "error"

    # Commands from client
    CREATE_ROOM = "createRoom"
    JOIN_ROOM = "joinRoom"
    START_GAME = "startGame"
    SELECT_NUMBER = "selectNumber"
    CALL_BINGO = "callBingo"
    LEAVE_ROOM = "leaveRoom"
