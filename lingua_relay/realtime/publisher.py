"""
Room-scoped publishing

A room is a topic whose subscribers are exactly the registry's current
membership set. Delivery is delegated to a transport that accepts one JSON
message per connection without blocking.
"""

from typing import Any, Dict, Optional, Protocol, Union

from lingua_relay.schemas.events import OutboundEvent, RelayModel
from lingua_relay.services.rooms.registry import RoomRegistry

Payload = Union[RelayModel, Dict[str, Any]]


class Transport(Protocol):
    def send(self, connection_id: str, message: Dict[str, Any]) -> bool:
        ...


def envelope(event: OutboundEvent, payload: Payload) -> Dict[str, Any]:
    data = payload.dump() if isinstance(payload, RelayModel) else dict(payload)
    return {"event": event.value, "data": data}


class RoomPublisher:
    def __init__(self, registry: RoomRegistry, transport: Transport):
        self.registry = registry
        self.transport = transport

    def send(self, connection_id: str, event: OutboundEvent, payload: Payload) -> bool:
        return self.transport.send(connection_id, envelope(event, payload))

    def publish(
        self,
        room_id: str,
        event: OutboundEvent,
        payload: Payload,
        exclude: Optional[str] = None,
    ) -> int:
        """Deliver to every current member of `room_id`; returns the delivery count."""
        message = envelope(event, payload)
        delivered = 0
        for connection_id in self.registry.members(room_id):
            if connection_id == exclude:
                continue
            if self.transport.send(connection_id, message):
                delivered += 1
        return delivered
