"""
Relay WebSocket endpoint

Frames are JSON envelopes: {"event": "<name>", "data": {...}}.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from lingua_relay.core.deps import ConnectionsDep, RelayDep
from lingua_relay.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def relay_endpoint(websocket: WebSocket, relay: RelayDep, connections: ConnectionsDep):
    connection_id = await connections.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            await relay.handle(connection_id, data)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected normally for connection {connection_id}")
    except Exception as e:
        logger.error(f"WebSocket error for connection {connection_id}: {e}", exc_info=True)
    finally:
        relay.disconnect(connection_id)
        await connections.disconnect(connection_id)
