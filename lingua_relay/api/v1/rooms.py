"""
Room endpoints

Out-of-band room creation for distributing join links (e.g. as a QR code),
and a read-only room lookup.
"""

from typing import Optional

from fastapi import APIRouter, Request, status

from lingua_relay.core.config import settings
from lingua_relay.core.deps import RelayDep
from lingua_relay.core.errors import NotFoundError
from lingua_relay.core.logging import get_logger
from lingua_relay.core.time import to_iso
from lingua_relay.schemas.rooms import (
    CreateRoomRequest,
    CreateRoomResponse,
    RoomDetailsResponse,
)

logger = get_logger(__name__)

router = APIRouter()


def build_join_url(request: Request, room_id: str) -> str:
    base_url = (settings.public_base_url or str(request.base_url)).rstrip("/")
    return f"{base_url}/?room={room_id}"


@router.post(
    "/generate-room",
    response_model=CreateRoomResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
async def generate_room(
    relay: RelayDep,
    request: Request,
    body: Optional[CreateRoomRequest] = None,
):
    label = body.label if body else None
    room_id = relay.registry.create_room(label)
    join_url = build_join_url(request, room_id)
    client_host = request.client.host if request.client else "unknown"
    logger.info(f"Room {room_id} generated for {client_host}")
    return CreateRoomResponse(room_id=room_id, join_url=join_url, qr_data=join_url)


@router.get("/rooms/{room_id}", response_model=RoomDetailsResponse, response_model_by_alias=True)
async def get_room_details(room_id: str, relay: RelayDep):
    room = relay.registry.get_room(room_id)
    if room is None:
        raise NotFoundError("Room not found", detail=room_id)
    return RoomDetailsResponse(
        room=room.id,
        member_count=room.member_count,
        label=room.label,
        created_at=to_iso(room.created_at),
    )
