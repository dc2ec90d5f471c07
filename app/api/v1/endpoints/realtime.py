# app/api/v1/endpoints/realtime.py
"""
WebSocket endpoint for the realtime channel.

Clients send ``{"event": <name>, "data": ...}`` and get an ``ack`` for every
message. Server pushes use the same envelope.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from app.schemas.realtime import AckSchemas, ClientMessageSchemas, WaiterCallSchemas
from app.services.connection_manager import ROLE_ROOMS, ConnectionManager, manager, order_room
from app.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter()


def get_connection_manager() -> ConnectionManager:
    return manager


def _room_for(event: str, data) -> str:
    """Room named by a join/leave request. Raises ValueError if there is none."""
    _, _, target = event.partition(":")
    if target == "order":
        return order_room(uuid.UUID(str(data)))
    if target in ROLE_ROOMS:
        return target
    raise ValueError(f"Unknown room \"{target}\"")


async def handle_message(
    connection_id: str,
    message: ClientMessageSchemas,
    connections: ConnectionManager,
    notifier: NotificationService,
) -> AckSchemas:
    event = message.event

    if event.startswith("join:") or event.startswith("leave:"):
        try:
            room = _room_for(event, message.data)
        except ValueError as e:
            return AckSchemas(request=event, success=False, message=str(e))
        if event.startswith("join:"):
            try:
                connections.join(connection_id, room)
            except KeyError:
                # Dropped after a failed send
                return AckSchemas(request=event, success=False, message="Connection is closed", room=room)
            return AckSchemas(request=event, success=True, message=f"Joined {room}", room=room)
        connections.leave(connection_id, room)
        return AckSchemas(request=event, success=True, message=f"Left {room}", room=room)

    if event == "waiter:call":
        try:
            call = WaiterCallSchemas.model_validate(message.data or {})
        except ValidationError:
            return AckSchemas(request=event, success=False, message="tableId and tableNumber are required")
        await notifier.waiter_called(call.table_id, call.table_number)
        return AckSchemas(request=event, success=True, message="Waiter has been notified")

    return AckSchemas(request=event, success=False, message=f"Unsupported event \"{event}\"")


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    connections: ConnectionManager = Depends(get_connection_manager),
    notifier: NotificationService = Depends(get_notification_service),
):
    connection_id = await connections.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = ClientMessageSchemas.model_validate_json(raw)
            except ValidationError:
                ack = AckSchemas(request="unknown", success=False, message="Messages must be {\"event\", \"data\"}")
            else:
                ack = await handle_message(connection_id, message, connections, notifier)
            if not await connections.send_personal(connection_id, ack.to_message()):
                logger.info("Closing socket of dropped connection %s", connection_id)
                break
    except WebSocketDisconnect:
        pass
    finally:
        connections.disconnect(connection_id)
