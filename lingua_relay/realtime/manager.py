"""
WebSocket connection manager

Every accepted socket gets a connection id, an outbound queue and a writer
task. `send` only enqueues, so publishing to a room never suspends and each
connection receives its messages in publish order.
"""

import asyncio
import uuid
from typing import Any, Dict

from fastapi import WebSocket

from lingua_relay.core.logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    def __init__(self, queue_size: int = 256):
        self.queue_size = queue_size
        # connection_id -> WebSocket
        self.active_connections: Dict[str, WebSocket] = {}
        self._queues: Dict[str, asyncio.Queue] = {}
        self._writers: Dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self.active_connections)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self.active_connections

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self.active_connections[connection_id] = websocket
        self._queues[connection_id] = queue
        self._writers[connection_id] = asyncio.create_task(
            self._writer(connection_id, websocket, queue), name=f"ws-writer:{connection_id}"
        )
        logger.info(f"Connection {connection_id} opened. Total connections: {len(self.active_connections)}")
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        self.active_connections.pop(connection_id, None)
        self._queues.pop(connection_id, None)
        writer = self._writers.pop(connection_id, None)
        if writer is not None and writer is not asyncio.current_task():
            writer.cancel()
            await asyncio.gather(writer, return_exceptions=True)
        logger.info(f"Connection {connection_id} closed")

    def send(self, connection_id: str, message: Dict[str, Any]) -> bool:
        """Queue a message for one connection. Returns False if it cannot be delivered."""
        queue = self._queues.get(connection_id)
        if queue is None:
            return False
        try:
            queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"Outbound queue full for connection {connection_id}; message dropped")
            return False
        return True

    async def _writer(self, connection_id: str, websocket: WebSocket, queue: asyncio.Queue) -> None:
        while True:
            message = await queue.get()
            try:
                await websocket.send_json(message)
            except Exception as e:
                # Connection might be dead; the receive loop performs the cleanup
                logger.warning(f"Error sending to connection {connection_id}: {e}")
                self._queues.pop(connection_id, None)
                return

    async def shutdown(self) -> None:
        for connection_id in list(self.active_connections):
            await self.disconnect(connection_id)
