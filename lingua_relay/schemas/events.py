"""
Socket Event Schemas

Inbound and outbound payloads of the relay protocol. Field names are
snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    HOST = "host"
    RECEPTIONIST = "receptionist"
    GUEST = "guest"


# Outward-facing roles always reply in the canonical language
OUTWARD_ROLES = frozenset({Role.GUEST})


def is_outward(role: Role) -> bool:
    return role in OUTWARD_ROLES


class ProcessingStatus(str, Enum):
    RECOGNIZING = "recognizing"
    TRANSLATING = "translating"
    COMPLETE = "complete"
    ERROR = "error"


class InboundEvent(str, Enum):
    JOIN_ROOM = "join_room"
    AUDIO_MESSAGE = "audio_message"
    TEXT_MESSAGE = "text_message"
    GET_ROOM_INFO = "get_room_info"


class OutboundEvent(str, Enum):
    ROOM_JOINED = "room_joined"
    USER_JOINED = "user_joined"
    USER_LEFT = "user_left"
    ROOM_STATS = "room_stats"
    ROOM_INFO = "room_info"
    PROCESSING_STATUS = "processing_status"
    TRANSLATION = "translation"
    ERROR = "error"


class RelayModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Envelope(BaseModel):
    event: str
    data: Dict[str, Any] = Field(default_factory=dict)


# Inbound

class JoinRoomEvent(RelayModel):
    room: str = Field(min_length=1)
    role: Role
    language: Optional[str] = None


class AudioMessageEvent(RelayModel):
    room: str = Field(min_length=1)
    role: Optional[str] = None
    language: Optional[str] = None
    audio_data: Optional[str] = None
    target_language: Optional[str] = None
    mime_type: Optional[str] = None


class TextMessageEvent(RelayModel):
    # text is relayed exactly as typed
    model_config = ConfigDict(str_strip_whitespace=False)

    room: str = Field(min_length=1)
    role: Optional[str] = None
    text: str = ""
    language: Optional[str] = None
    target_language: Optional[str] = None

    @field_validator("room", "role", "language", "target_language", mode="before")
    @classmethod
    def strip_codes(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class GetRoomInfoEvent(RelayModel):
    room: str = Field(min_length=1)


# Outbound

class RoomJoinedPayload(RelayModel):
    room: str
    role: Role
    language: str


class UserJoinedPayload(RelayModel):
    role: Role
    language: str
    user_id: str


class UserLeftPayload(RelayModel):
    role: Role
    user_id: str


class RoomStatsPayload(RelayModel):
    member_count: int
    label: str


class RoomInfoPayload(RelayModel):
    room: str
    member_count: int
    label: str
    created_at: str


class ProcessingStatusPayload(RelayModel):
    status: ProcessingStatus
    speaker: Role
    message_id: Optional[str] = None


class LanguageBlock(RelayModel):
    text: str
    language: str
    language_name: str


class TranslationMessage(RelayModel):
    id: str
    timestamp: str
    room: str
    speaker: Role
    original: LanguageBlock
    translated: LanguageBlock
    confidence: float = Field(ge=0.0, le=1.0)
    speaker_id: str


class ErrorPayload(RelayModel):
    message: str
    detail: Optional[Any] = None
