"""Room service - tracks which connections joined which rooms and fans events out."""

import logging
import uuid
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from dungeon_relay.config import settings

logger = logging.getLogger(__name__)


class RoomManager:
    """In-memory connection/room table.

    Only touched from the event loop, so no locking. Membership lives as
    long as the connection does.
    """

    def __init__(self):
        self._connections: dict[str, WebSocket] = {}
        self._rooms: dict[str, set[str]] = {}  # connection id -> joined rooms

    def connect(self, websocket: WebSocket) -> str:
        """Register a connection and return its id."""
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = websocket
        self._rooms[connection_id] = set()
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        """Forget a connection and all its memberships."""
        self._connections.pop(connection_id, None)
        self._rooms.pop(connection_id, None)

    def join(self, connection_id: str, room: str) -> None:
        rooms = self._rooms.get(connection_id)
        if rooms is None:
            return
        rooms.add(room)
        logger.info("Client %s joined room: %s", connection_id, room)

    def rooms_of(self, connection_id: str) -> set[str]:
        return set(self._rooms.get(connection_id, ()))

    def members(self, room: str) -> list[str]:
        return [cid for cid, rooms in self._rooms.items() if room in rooms]

    async def broadcast(
        self, room: str, event: str, data: Any, exclude: str | None = None
    ) -> int:
        """Send ``{"event", "data"}`` to every member of ``room`` but ``exclude``.

        Returns the number of connections the event was delivered to. A
        member whose socket is already gone is dropped from the table.
        """
        delivered = 0
        for connection_id in self.members(room):
            if connection_id == exclude:
                continue
            websocket = self._connections.get(connection_id)
            if websocket is None:
                continue
            try:
                await websocket.send_json({"event": event, "data": data})
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                logger.info("Dropping client %s after failed send: %s", connection_id, e)
                self.disconnect(connection_id)
                continue
            delivered += 1
        return delivered

    async def relay_sensor(self, connection_id: str, data: Any) -> int:
        """Forward a sensor payload to the rest of the game room."""
        room = settings.GAME_ROOM
        if room not in self._rooms.get(connection_id, ()):
            return 0
        return await self.broadcast(room, "sensor_update", data, exclude=connection_id)

    def clear(self) -> None:
        self._connections.clear()
        self._rooms.clear()


room_manager = RoomManager()
