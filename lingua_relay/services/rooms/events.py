"""
Room lifecycle feed

Mirrors registry actions (created / member_joined / member_left / deleted)
onto a Redis channel for outside observers. The registry stays the only
authority; a failed publish is logged and otherwise ignored.
"""

import asyncio
import json
from typing import Optional, Set

from redis.asyncio import Redis

from lingua_relay.core.logging import get_logger
from lingua_relay.core.time import to_iso

logger = get_logger(__name__)


async def publish_room_event(
    redis: Redis,
    *,
    channel: str,
    action: str,
    room_id: str,
    connection_id: Optional[str] = None,
    label: Optional[str] = None,
) -> None:
    payload = {
        "action": action,
        "room_id": room_id,
        "timestamp": to_iso(),
    }
    if connection_id:
        payload["connection_id"] = connection_id
    if label:
        payload["label"] = label
    await redis.publish(channel, json.dumps(payload))


class RoomEventFeed:
    """Sink handed to RoomRegistry; each event is published from its own task."""

    def __init__(self, redis: Redis, channel: str):
        self.redis = redis
        self.channel = channel
        self._pending: Set[asyncio.Task] = set()

    def __call__(self, action: str, room_id: str, **fields) -> None:
        task = asyncio.get_running_loop().create_task(
            publish_room_event(
                self.redis,
                channel=self.channel,
                action=action,
                room_id=room_id,
                connection_id=fields.get("connection_id"),
                label=fields.get("label"),
            )
        )
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Room event publish failed on {self.channel}: {exc}")

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
