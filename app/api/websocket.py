"""WebSocket connection manager and hub."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import TYPE_CHECKING

from fastapi import WebSocket, WebSocketDisconnect

from app.api.responses import Command, ServerMessage

if TYPE_CHECKING:
    from app.api.room_handler import RoomHandler

logger = logging.getLogger(__name__)

_SEND_ERRORS = (WebSocketDisconnect, RuntimeError, ConnectionError, OSError)


class ConnectionManager:
    """Manages WebSocket connections for multiplayer rooms.

    Handles:
    - Connection ids for accepted sockets
    - Message delivery to one connection or a room group
    - Connection lifecycle and disconnect cleanup
    """

    def __init__(self, room_handler: RoomHandler) -> None:
        """Initialize the connection manager."""
        # connection_id -> WebSocket
        self.active_connections: dict[str, WebSocket] = {}
        # Message queue for ordered delivery
        self.message_queue: asyncio.Queue[ServerMessage] = asyncio.Queue()
        self.room_handler = room_handler

    async def connect(self, websocket: WebSocket) -> str:
        """Accept a new WebSocket connection and assign it an id.

        Args:
            websocket: WebSocket connection

        Returns:
            The connection id, which doubles as the player id

        """
        await websocket.accept()

        connection_id = uuid.uuid4().hex
        self.active_connections[connection_id] = websocket
        logger.info("Connection %s opened", connection_id)

        try:
            await websocket.send_json(
                ServerMessage(
                    command=Command.CONNECTED,
                    room_code="",
                    content={"playerId": connection_id},
                    receiver_id=connection_id,
                ).to_dict()
            )
        except _SEND_ERRORS:
            self.active_connections.pop(connection_id, None)
            raise
        return connection_id

    def disconnect(self, connection_id: str) -> list[ServerMessage]:
        """Forget a connection and unseat it from its room.

        Safe to call more than once for the same connection.

        Returns:
            Messages for the players left behind

        """
        if self.active_connections.pop(connection_id, None) is not None:
            logger.info("Connection %s closed", connection_id)
        return self.room_handler.handle_disconnect(connection_id)

    async def send_message(self, message: ServerMessage) -> None:
        """Deliver a message to its receiver or to its room recipients.

        Connections that fail are disconnected and their departure is
        queued for the rest of the room.

        Args:
            message: Message to deliver

        """
        payload = message.to_dict()
        failed = []

        for connection_id in message.targets():
            websocket = self.active_connections.get(connection_id)
            if websocket is None:
                continue
            try:
                await websocket.send_json(payload)
            except _SEND_ERRORS:
                logger.warning("Connection lost to %s", connection_id)
                failed.append(connection_id)

        for connection_id in failed:
            await self.dispatch_messages(self.disconnect(connection_id))

    async def dispatch_messages(self, messages: list[ServerMessage]) -> None:
        """Queue messages for delivery, preserving their order.

        Args:
            messages: Messages to dispatch

        """
        for message in messages:
            await self.message_queue.put(message)

    async def run(self) -> None:
        """Background task to process message queue.

        This runs continuously, processing messages from the queue
        and dispatching them to the appropriate recipients.
        """
        logger.info("WebSocket manager started")

        while True:
            try:
                message = await self.message_queue.get()
            except asyncio.CancelledError:
                logger.info("WebSocket manager shutting down")
                break

            try:
                logger.debug(
                    "Dispatching %s to room %s", message.command.value, message.room_code or "-"
                )
                await self.send_message(message)
            except asyncio.CancelledError:
                logger.info("WebSocket manager shutting down")
                break
            finally:
                self.message_queue.task_done()

    async def handle_connection(self, websocket: WebSocket) -> None:
        """Serve one connection until it closes.

        Args:
            websocket: WebSocket connection

        """
        try:
            connection_id = await self.connect(websocket)
        except _SEND_ERRORS as e:
            logger.warning("Connection dropped during handshake: %s", e)
            return

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))

                data = message.get("text")
                if data is None:
                    logger.warning("Binary frame from %s", connection_id)
                    await self.dispatch_messages(self.room_handler.reject_message(connection_id))
                    continue

                await self.dispatch_messages(self._handle_frame(connection_id, data))

        except WebSocketDisconnect:
            logger.info("Connection %s disconnected", connection_id)

        except (RuntimeError, ConnectionError, OSError) as e:
            logger.warning("Error handling message from %s: %s", connection_id, e)

        finally:
            await self.dispatch_messages(self.disconnect(connection_id))

    def _handle_frame(self, connection_id: str, data: str) -> list[ServerMessage]:
        """Decode one text frame and run the command it carries."""
        try:
            message = json.loads(data)
        except (json.JSONDecodeError, RecursionError):
            logger.warning("Undecodable frame from %s", connection_id)
            return self.room_handler.reject_message(connection_id)

        if not isinstance(message, dict) or not isinstance(message.get("command"), str):
            logger.warning("Malformed frame from %s", connection_id)
            return self.room_handler.reject_message(connection_id)

        command = message["command"]
        content = message.get("content", {})

        logger.info("Received %s from %s", command, connection_id)
        return self.room_handler.handle_command(connection_id, command, content)

    def get_connection_count(self) -> int:
        """Get the number of open connections."""
        return len(self.active_connections)
