"""
Deferred cleanup of empty rooms.

One cancellable task per room id. When a task fires it hands the room id to
`on_fire`, which is expected to re-check emptiness before deleting anything.
"""

import asyncio
from typing import Callable, Dict

from lingua_relay.core.logging import get_logger

logger = get_logger(__name__)


class RoomSweeper:
    def __init__(self, on_fire: Callable[[str], bool]):
        self._on_fire = on_fire
        self._tasks: Dict[str, asyncio.Task] = {}

    def schedule(self, room_id: str, delay: float) -> asyncio.Task:
        """(Re)schedule cleanup of `room_id`; replaces any pending timer."""
        self.cancel(room_id)
        task = asyncio.get_running_loop().create_task(
            self._fire_later(room_id, delay), name=f"room-cleanup:{room_id}"
        )
        self._tasks[room_id] = task
        logger.debug(f"Cleanup of room {room_id} scheduled in {delay}s")
        return task

    def cancel(self, room_id: str) -> bool:
        task = self._tasks.pop(room_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug(f"Pending cleanup of room {room_id} cancelled")
        return True

    def is_pending(self, room_id: str) -> bool:
        task = self._tasks.get(room_id)
        return task is not None and not task.done()

    async def _fire_later(self, room_id: str, delay: float) -> bool:
        await asyncio.sleep(delay)
        if self._tasks.get(room_id) is asyncio.current_task():
            del self._tasks[room_id]
        return self._on_fire(room_id)

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
