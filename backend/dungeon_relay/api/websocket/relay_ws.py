"""WebSocket endpoint for relaying sensor events between clients in a room."""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from dungeon_relay.services.room_service import room_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def relay_websocket(websocket: WebSocket):
    """WebSocket endpoint for room membership and sensor relay.

    Protocol (every frame is a JSON object):
    - Client sends: {"event": "join", "data": "<room>"}
    - Client sends: {"event": "sensor", "data": <any JSON>}
    - Server sends: {"event": "sensor_update", "data": <payload>} (to other game room members)

    Nothing is sent back to the sender; binary and malformed frames are ignored.
    """
    await websocket.accept()
    connection_id = room_manager.connect(websocket)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            raw = message.get("text")
            if raw is None:
                logger.debug("Ignoring binary frame from %s", connection_id)
                continue
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.debug("Ignoring non-JSON frame from %s", connection_id)
                continue

            if not isinstance(frame, dict):
                logger.debug("Ignoring non-object frame from %s", connection_id)
                continue

            event = frame.get("event")
            data = frame.get("data")

            if event == "join":
                if isinstance(data, str) and data:
                    room_manager.join(connection_id, data)
                else:
                    logger.debug("Ignoring join without room from %s", connection_id)
            elif event == "sensor":
                await room_manager.relay_sensor(connection_id, data)
            else:
                logger.debug("Ignoring unknown event %r from %s", event, connection_id)

    except WebSocketDisconnect:
        logger.debug("Client %s disconnected", connection_id)
    finally:
        room_manager.disconnect(connection_id)
