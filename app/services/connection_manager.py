# app/services/connection_manager.py
import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

KITCHEN_ROOM = "kitchen"
WAITER_ROOM = "waiter"
ADMIN_ROOM = "admin"
ROLE_ROOMS = (KITCHEN_ROOM, WAITER_ROOM, ADMIN_ROOM)


def order_room(order_id: Any) -> str:
    return f"order:{order_id}"


class ConnectionManager:
    """
    Process-local registry of websocket connections and the rooms they joined.

    Nothing here outlives a connection: when it goes away its memberships go
    with it, and an event emitted while nobody is listening is simply lost.
    """

    def __init__(self):
        self._connections: Dict[str, WebSocket] = {}
        self._rooms: Dict[str, Set[str]] = defaultdict(set)
        self._memberships: Dict[str, Set[str]] = defaultdict(set)

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = websocket
        logger.info("Client connected: %s", connection_id)
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)
        for room in self._memberships.pop(connection_id, set()):
            members = self._rooms.get(room)
            if members is None:
                continue
            members.discard(connection_id)
            if not members:
                del self._rooms[room]
        logger.info("Client disconnected: %s", connection_id)

    def join(self, connection_id: str, room: str) -> None:
        if connection_id not in self._connections:
            raise KeyError(connection_id)
        self._rooms[room].add(connection_id)
        self._memberships[connection_id].add(room)
        logger.info("Client %s joined %s", connection_id, room)

    def leave(self, connection_id: str, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.discard(connection_id)
            if not members:
                del self._rooms[room]
        self._memberships.get(connection_id, set()).discard(room)
        logger.info("Client %s left %s", connection_id, room)

    def rooms_of(self, connection_id: str) -> Set[str]:
        return set(self._memberships.get(connection_id, set()))

    def members(self, rooms: Iterable[str]) -> Set[str]:
        found: Set[str] = set()
        for room in rooms:
            found |= self._rooms.get(room, set())
        return found

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def send_personal(self, connection_id: str, message: Dict[str, Any]) -> bool:
        websocket = self._connections.get(connection_id)
        if websocket is None:
            return False
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.warning("Dropping connection %s after send failure: %s", connection_id, e)
            self.disconnect(connection_id)
            return False
        return True

    async def emit(self, rooms: Iterable[str], message: Dict[str, Any]) -> int:
        """Send ``message`` once to every connection in any of ``rooms``.

        Best effort: failed sends drop the connection and are not retried.
        Returns the number of connections that received the message.
        """
        rooms = list(rooms)
        delivered = 0
        # Snapshot: send_personal may mutate the room sets
        targets: List[str] = sorted(self.members(rooms))
        for connection_id in targets:
            if await self.send_personal(connection_id, message):
                delivered += 1
        logger.debug("Emitted %s to %s (%d connections)", message.get("event"), rooms, delivered)
        return delivered


manager = ConnectionManager()
