"""
Room and language HTTP schemas
"""

from typing import Optional

from pydantic import AliasChoices, Field

from lingua_relay.schemas.events import RelayModel


class CreateRoomRequest(RelayModel):
    label: Optional[str] = Field(default=None, validation_alias=AliasChoices("label", "hotelName"))


class CreateRoomResponse(RelayModel):
    room_id: str
    join_url: str
    qr_data: str


class RoomDetailsResponse(RelayModel):
    room: str
    member_count: int
    label: str
    created_at: str


class LanguageResponse(RelayModel):
    code: str
    name: str
    native: str


class HealthResponse(RelayModel):
    status: str
    timestamp: str
    rooms: int
    connections: int


class SynthesizeRequest(RelayModel):
    text: str = Field(min_length=1, max_length=2000)
    language: str
    speaker: Optional[str] = None
    pitch: float = 0.0
    pace: float = Field(default=1.0, gt=0)
    loudness: float = Field(default=1.0, gt=0)
    sample_rate: int = 22050
