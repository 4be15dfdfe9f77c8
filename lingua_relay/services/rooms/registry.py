"""
Room Registry

Owns every live room and its membership set. All mutation of rooms goes
through this class; callers only ever get read-only snapshots back.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from lingua_relay.core.logging import get_logger, log_event
from lingua_relay.core.time import utc_now
from lingua_relay.services.rooms.sweeper import RoomSweeper

logger = get_logger(__name__)

RoomEventSink = Callable[..., None]


@dataclass
class _Room:
    id: str
    label: str
    created_at: datetime
    # insertion-ordered; values unused
    members: Dict[str, None] = field(default_factory=dict)


@dataclass(frozen=True)
class RoomStats:
    member_count: int
    label: str


@dataclass(frozen=True)
class RoomSnapshot:
    id: str
    label: str
    created_at: datetime
    member_count: int


def generate_room_id() -> str:
    return f"room_{uuid.uuid4().hex}"


class RoomRegistry:
    def __init__(
        self,
        default_label: str = "Unknown Hotel",
        on_event: Optional[RoomEventSink] = None,
    ):
        self.default_label = default_label
        self._rooms: Dict[str, _Room] = {}
        self._on_event = on_event
        self.sweeper = RoomSweeper(self.delete_if_empty)

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def create_room(self, label: Optional[str] = None) -> str:
        room_id = generate_room_id()
        while room_id in self._rooms:
            room_id = generate_room_id()
        self._insert(room_id, label)
        return room_id

    def ensure_room(self, room_id: str) -> bool:
        """Create `room_id` with the default label if unknown. Returns True if created."""
        if room_id in self._rooms:
            return False
        self._insert(room_id, None)
        return True

    def _insert(self, room_id: str, label: Optional[str]) -> None:
        room = _Room(
            id=room_id,
            label=(label or "").strip() or self.default_label,
            created_at=utc_now(),
        )
        self._rooms[room_id] = room
        log_event(
            logger, "INFO",
            domain="room", event="room.created",
            summary="Room created", room_id=room_id, label=room.label,
        )
        self._emit("created", room_id, label=room.label)

    def add_member(self, room_id: str, connection_id: str) -> bool:
        room = self._rooms.get(room_id)
        if room is None:
            logger.warning(f"add_member on unknown room {room_id}; ignored")
            return False
        if connection_id in room.members:
            return False
        room.members[connection_id] = None
        self._emit("member_joined", room_id, connection_id=connection_id)
        return True

    def remove_member(self, room_id: str, connection_id: str) -> bool:
        room = self._rooms.get(room_id)
        if room is None or connection_id not in room.members:
            return False
        del room.members[connection_id]
        self._emit("member_left", room_id, connection_id=connection_id)
        return True

    def members(self, room_id: str) -> Tuple[str, ...]:
        room = self._rooms.get(room_id)
        return tuple(room.members) if room else ()

    def get_stats(self, room_id: str) -> Optional[RoomStats]:
        room = self._rooms.get(room_id)
        if room is None:
            return None
        return RoomStats(member_count=len(room.members), label=room.label)

    def get_room(self, room_id: str) -> Optional[RoomSnapshot]:
        room = self._rooms.get(room_id)
        if room is None:
            return None
        return RoomSnapshot(
            id=room.id,
            label=room.label,
            created_at=room.created_at,
            member_count=len(room.members),
        )

    def delete_if_empty(self, room_id: str) -> bool:
        """Checked delete: a room that regained members is left alone."""
        room = self._rooms.get(room_id)
        if room is None or room.members:
            return False
        del self._rooms[room_id]
        log_event(
            logger, "INFO",
            domain="room", event="room.deleted",
            summary="Cleaned up empty room", room_id=room_id,
        )
        self._emit("deleted", room_id)
        return True

    def schedule_cleanup(self, room_id: str, delay: float) -> None:
        self.sweeper.schedule(room_id, delay)

    def cancel_cleanup(self, room_id: str) -> bool:
        return self.sweeper.cancel(room_id)

    async def shutdown(self) -> None:
        await self.sweeper.shutdown()

    def _emit(self, action: str, room_id: str, **fields) -> None:
        if self._on_event is not None:
            self._on_event(action, room_id, **fields)
