from lingua_relay.services.rooms.bindings import Binding, SessionBindings
from lingua_relay.services.rooms.registry import RoomRegistry, RoomSnapshot, RoomStats
from lingua_relay.services.rooms.sweeper import RoomSweeper

__all__ = [
    "Binding",
    "RoomRegistry",
    "RoomSnapshot",
    "RoomStats",
    "RoomSweeper",
    "SessionBindings",
]
