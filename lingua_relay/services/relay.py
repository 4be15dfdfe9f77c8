"""
Relay Hub

Entry point for inbound socket events. Parses the envelope, applies the
join defaults, and dispatches to Session Binding or the Message Pipeline.
Any AppError raised before a pipeline starts broadcasting becomes an `error`
event for the sending connection only.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from lingua_relay.core.config import Settings
from lingua_relay.core.errors import AppError, NotFoundError, ValidationError
from lingua_relay.core.logging import get_logger
from lingua_relay.core.time import to_iso
from lingua_relay.realtime.publisher import RoomPublisher, Transport
from lingua_relay.schemas.events import (
    AudioMessageEvent,
    Envelope,
    ErrorPayload,
    GetRoomInfoEvent,
    InboundEvent,
    JoinRoomEvent,
    OutboundEvent,
    RoomInfoPayload,
    TextMessageEvent,
)
from lingua_relay.services.languages import LanguageDirectory
from lingua_relay.services.pipeline import MessagePipeline
from lingua_relay.services.rooms.bindings import Binding, SessionBindings
from lingua_relay.services.rooms.registry import RoomEventSink, RoomRegistry
from lingua_relay.services.routing import LanguageRouter
from lingua_relay.services.speech import SpeechStack, build_speech_stack
from lingua_relay.services.speech.base import Recognizer, Translator

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def _describe(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'payload'}: {error['msg']}"
        for error in exc.errors()
    )


def parse_event(model: Type[M], data: Any, message: str) -> M:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(message, detail=_describe(e)) from e


class RelayHub:
    def __init__(
        self,
        transport: Transport,
        recognizer: Recognizer,
        translator: Translator,
        *,
        directory: Optional[LanguageDirectory] = None,
        default_language: str = "hi-IN",
        default_label: str = "Unknown Hotel",
        fallback_target_language: str = "hi-IN",
        cleanup_delay: float = 300.0,
        collaborator_timeout: float = 30.0,
        max_audio_bytes: int = 2_000_000,
        default_mime_type: str = "audio/webm",
        on_room_event: Optional[RoomEventSink] = None,
        speech: Optional[SpeechStack] = None,
    ):
        self.transport = transport
        self.directory = directory or LanguageDirectory(default_language=default_language)
        self.default_language = default_language
        self.speech = speech

        self.registry = RoomRegistry(default_label=default_label, on_event=on_room_event)
        self.publisher = RoomPublisher(self.registry, transport)
        self.bindings = SessionBindings(
            self.registry, self.publisher, self.directory, cleanup_delay=cleanup_delay
        )
        self.router = LanguageRouter(self.bindings, self.directory, fallback_target_language)
        self.pipeline = MessagePipeline(
            self.bindings,
            self.publisher,
            self.router,
            recognizer,
            translator,
            self.directory,
            timeout=collaborator_timeout,
            max_audio_bytes=max_audio_bytes,
            default_mime_type=default_mime_type,
        )

        self._tasks: Set[asyncio.Task] = set()
        self._handlers: Dict[str, Callable[[str, Dict[str, Any]], None]] = {
            InboundEvent.JOIN_ROOM.value: self.join_room,
            InboundEvent.AUDIO_MESSAGE.value: self.audio_message,
            InboundEvent.TEXT_MESSAGE.value: self.text_message,
            InboundEvent.GET_ROOM_INFO.value: self.get_room_info,
        }

    @classmethod
    def from_settings(
        cls,
        transport: Transport,
        settings: Settings,
        on_room_event: Optional[RoomEventSink] = None,
        speech: Optional[SpeechStack] = None,
    ) -> "RelayHub":
        speech = speech or build_speech_stack(settings)
        return cls(
            transport,
            speech.recognizer,
            speech.translator,
            directory=LanguageDirectory(
                reply_language=settings.reply_language,
                default_language=settings.default_join_language,
            ),
            default_language=settings.default_join_language,
            default_label=settings.default_room_label,
            fallback_target_language=settings.fallback_target_language,
            cleanup_delay=settings.room_cleanup_delay_seconds,
            collaborator_timeout=settings.collaborator_timeout_seconds,
            max_audio_bytes=settings.max_audio_bytes,
            default_mime_type=settings.default_audio_mime_type,
            on_room_event=on_room_event,
            speech=speech,
        )

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def handle(self, connection_id: str, raw: Any) -> None:
        """Dispatch one inbound frame (JSON text or an already-decoded dict)."""
        try:
            if isinstance(raw, (str, bytes)):
                try:
                    raw = json.loads(raw)
                except json.JSONDecodeError as e:
                    raise ValidationError("Invalid JSON") from e
            envelope = parse_event(Envelope, raw, "Malformed event envelope")
            handler = self._handlers.get(envelope.event)
            if handler is None:
                raise ValidationError(f"Unknown event '{envelope.event}'")
            handler(connection_id, envelope.data)
        except AppError as e:
            self._reject(connection_id, e)

    def join_room(self, connection_id: str, data: Dict[str, Any]) -> Binding:
        event = parse_event(JoinRoomEvent, data, "room and role are required")
        language = event.language or self.default_language
        return self.bindings.bind(connection_id, event.room, event.role, language)

    def get_room_info(self, connection_id: str, data: Dict[str, Any]) -> RoomInfoPayload:
        event = parse_event(GetRoomInfoEvent, data, "room is required")
        room = self.registry.get_room(event.room)
        if room is None:
            raise NotFoundError("Room not found", detail=event.room)
        info = RoomInfoPayload(
            room=room.id,
            member_count=room.member_count,
            label=room.label,
            created_at=to_iso(room.created_at),
        )
        self.publisher.send(connection_id, OutboundEvent.ROOM_INFO, info)
        return info

    def audio_message(self, connection_id: str, data: Dict[str, Any]) -> asyncio.Task:
        event = parse_event(AudioMessageEvent, data, "Invalid message payload")
        return self._spawn(connection_id, self.pipeline.process_audio(connection_id, event))

    def text_message(self, connection_id: str, data: Dict[str, Any]) -> asyncio.Task:
        event = parse_event(TextMessageEvent, data, "Invalid message payload")
        return self._spawn(connection_id, self.pipeline.process_text(connection_id, event))

    def disconnect(self, connection_id: str) -> Optional[Binding]:
        # In-flight pipelines of this connection keep running for the rest of the room
        return self.bindings.unbind(connection_id)

    def _spawn(self, connection_id: str, work: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._guard(connection_id, work))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guard(self, connection_id: str, work: Awaitable[Any]) -> Any:
        try:
            return await work
        except AppError as e:
            self._reject(connection_id, e)
            return None

    def _reject(self, connection_id: str, exc: AppError) -> None:
        logger.info(f"Rejected event from {connection_id}: {exc.code}: {exc.message}")
        self.publisher.send(
            connection_id,
            OutboundEvent.ERROR,
            ErrorPayload(message=exc.message, detail=exc.detail),
        )

    async def drain(self) -> None:
        """Wait for every in-flight pipeline to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.registry.shutdown()
        if self.speech is not None:
            await self.speech.aclose()
