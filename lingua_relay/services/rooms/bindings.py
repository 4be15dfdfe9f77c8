"""
Session Binding

Maps each live connection to exactly one (room, role, language) tuple and
keeps the registry's membership sets in step with it.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from lingua_relay.core.logging import get_logger
from lingua_relay.schemas.events import (
    OutboundEvent,
    Role,
    RoomJoinedPayload,
    RoomStatsPayload,
    UserJoinedPayload,
    UserLeftPayload,
)
from lingua_relay.services.languages import LanguageDirectory
from lingua_relay.services.rooms.registry import RoomRegistry

if TYPE_CHECKING:
    from lingua_relay.realtime.publisher import RoomPublisher

logger = get_logger(__name__)


@dataclass(frozen=True)
class Binding:
    room_id: str
    role: Role
    language: str


class SessionBindings:
    def __init__(
        self,
        registry: RoomRegistry,
        publisher: "RoomPublisher",
        directory: LanguageDirectory,
        cleanup_delay: float = 300.0,
    ):
        self.registry = registry
        self.publisher = publisher
        self.directory = directory
        self.cleanup_delay = cleanup_delay
        self._bindings: Dict[str, Binding] = {}

    def __len__(self) -> int:
        return len(self._bindings)

    def lookup(self, connection_id: str) -> Optional[Binding]:
        return self._bindings.get(connection_id)

    def room_bindings(self, room_id: str) -> List[Tuple[str, Binding]]:
        """Bindings of the room's members, in join order."""
        result = []
        for connection_id in self.registry.members(room_id):
            binding = self._bindings.get(connection_id)
            if binding is not None and binding.room_id == room_id:
                result.append((connection_id, binding))
        return result

    def bind(self, connection_id: str, room_id: str, role: Role, language: str) -> Binding:
        previous = self._bindings.get(connection_id)
        if previous is not None:
            self.registry.remove_member(previous.room_id, connection_id)
            if previous.room_id != room_id:
                self._announce_departure(connection_id, previous)

        self.registry.ensure_room(room_id)
        self.registry.cancel_cleanup(room_id)
        self.registry.add_member(room_id, connection_id)
        binding = Binding(room_id=room_id, role=role, language=language)
        self._bindings[connection_id] = binding

        logger.info(f"Connection {connection_id} joined room {room_id} as {role.value} ({language})")

        language_name = self.directory.display_name(language)
        self.publisher.send(
            connection_id,
            OutboundEvent.ROOM_JOINED,
            RoomJoinedPayload(room=room_id, role=role, language=language_name),
        )
        self.publisher.publish(
            room_id,
            OutboundEvent.USER_JOINED,
            UserJoinedPayload(role=role, language=language_name, user_id=connection_id),
            exclude=connection_id,
        )
        self._publish_stats(room_id)
        return binding

    def unbind(self, connection_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(connection_id, None)
        if binding is None:
            return None
        self.registry.remove_member(binding.room_id, connection_id)
        self._announce_departure(connection_id, binding)
        logger.info(f"Connection {connection_id} left room {binding.room_id}")
        return binding

    def _announce_departure(self, connection_id: str, binding: Binding) -> None:
        if binding.room_id not in self.registry:
            return
        self.publisher.publish(
            binding.room_id,
            OutboundEvent.USER_LEFT,
            UserLeftPayload(role=binding.role, user_id=connection_id),
        )
        stats = self._publish_stats(binding.room_id)
        if stats is not None and stats.member_count == 0:
            self.registry.schedule_cleanup(binding.room_id, self.cleanup_delay)

    def _publish_stats(self, room_id: str):
        stats = self.registry.get_stats(room_id)
        if stats is not None:
            self.publisher.publish(
                room_id,
                OutboundEvent.ROOM_STATS,
                RoomStatsPayload(member_count=stats.member_count, label=stats.label),
            )
        return stats
