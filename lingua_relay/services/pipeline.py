"""
Message Pipeline

One pipeline instance per inbound audio or text message:

    authorize -> [recognize] -> translate -> broadcast -> complete

Authorization and payload validation happen before anything is broadcast and
surface as exceptions to the caller. Once the first status has gone out, every
failure ends in a `processing_status=error` broadcast plus an `error` event to
the sender, so the room always sees a terminal status.
"""

import asyncio
import base64
import binascii
import time
import uuid
from typing import Awaitable, Optional, TypeVar

from lingua_relay.core.errors import AuthorizationError, CollaboratorError, ValidationError
from lingua_relay.core.logging import get_logger, log_event
from lingua_relay.core.time import to_iso
from lingua_relay.realtime.publisher import RoomPublisher
from lingua_relay.schemas.events import (
    AudioMessageEvent,
    ErrorPayload,
    LanguageBlock,
    OutboundEvent,
    ProcessingStatus,
    ProcessingStatusPayload,
    Role,
    TextMessageEvent,
    TranslationMessage,
)
from lingua_relay.services.languages import LanguageDirectory
from lingua_relay.services.rooms.bindings import Binding, SessionBindings
from lingua_relay.services.routing import LanguageRouter, Route
from lingua_relay.services.speech.base import Recognizer, Translator

logger = get_logger(__name__)

MAX_CONFIDENCE = 1.0

T = TypeVar("T")


def new_message_id() -> str:
    return f"msg_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_CONFIDENCE, float(value)))


class MessagePipeline:
    def __init__(
        self,
        bindings: SessionBindings,
        publisher: RoomPublisher,
        router: LanguageRouter,
        recognizer: Recognizer,
        translator: Translator,
        directory: LanguageDirectory,
        *,
        timeout: float = 30.0,
        max_audio_bytes: int = 2_000_000,
        default_mime_type: str = "audio/webm",
    ):
        self.bindings = bindings
        self.publisher = publisher
        self.router = router
        self.recognizer = recognizer
        self.translator = translator
        self.directory = directory
        self.timeout = timeout
        self.max_audio_bytes = max_audio_bytes
        self.default_mime_type = default_mime_type

    def authorize(self, connection_id: str, room_id: str) -> Binding:
        binding = self.bindings.lookup(connection_id)
        if binding is None or binding.room_id != room_id:
            raise AuthorizationError("Not authorized for this room")
        return binding

    def decode_audio(self, audio_data: Optional[str]) -> bytes:
        if not audio_data or not isinstance(audio_data, str):
            raise ValidationError("Audio payload too large or missing")
        # cheap size check before decoding
        if (len(audio_data) * 3) // 4 > self.max_audio_bytes:
            raise ValidationError("Audio payload too large or missing")
        if audio_data.startswith("data:") and "," in audio_data:
            audio_data = audio_data.split(",", 1)[1]
        try:
            audio = base64.b64decode(audio_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("Audio payload is not valid base64") from e
        if not audio or len(audio) > self.max_audio_bytes:
            raise ValidationError("Audio payload too large or missing")
        return audio

    async def process_audio(
        self, connection_id: str, event: AudioMessageEvent
    ) -> Optional[TranslationMessage]:
        speaker = self.authorize(connection_id, event.room)
        audio = self.decode_audio(event.audio_data)
        mime_type = event.mime_type or self.default_mime_type
        message_id = new_message_id()

        try:
            self._status(event.room, ProcessingStatus.RECOGNIZING, speaker.role, message_id)
            transcript = await self._call(
                "Speech recognition",
                self.recognizer.recognize(audio, speaker.language, mime_type),
            )
            if not isinstance(transcript.text, str) or not transcript.text.strip():
                raise CollaboratorError("No speech recognized in audio")

            self._status(event.room, ProcessingStatus.TRANSLATING, speaker.role, message_id)
            route = self.router.route_audio(connection_id, speaker, event.target_language)
            speaker_id = (
                transcript.speaker_segments[0].speaker_id
                if transcript.speaker_segments
                else connection_id
            )
            return await self._translate_and_broadcast(
                message_id,
                event.room,
                speaker.role,
                transcript.text,
                route,
                base_confidence=transcript.confidence,
                speaker_id=speaker_id,
            )
        except Exception as e:
            self._fail(connection_id, event.room, speaker.role, message_id, "Failed to process audio message", e)
            return None

    async def process_text(
        self, connection_id: str, event: TextMessageEvent
    ) -> Optional[TranslationMessage]:
        speaker = self.authorize(connection_id, event.room)
        if not event.text.strip():
            raise ValidationError("Message text is required")
        message_id = new_message_id()

        try:
            self._status(event.room, ProcessingStatus.TRANSLATING, speaker.role, message_id)
            route = self.router.route_text(
                connection_id, speaker, event.language, event.target_language
            )
            return await self._translate_and_broadcast(
                message_id,
                event.room,
                speaker.role,
                event.text,
                route,
                base_confidence=MAX_CONFIDENCE,
                speaker_id=connection_id,
            )
        except Exception as e:
            self._fail(connection_id, event.room, speaker.role, message_id, "Failed to process text message", e)
            return None

    async def _translate_and_broadcast(
        self,
        message_id: str,
        room_id: str,
        speaker: Role,
        text: str,
        route: Route,
        *,
        base_confidence: float,
        speaker_id: str,
    ) -> TranslationMessage:
        if route.is_passthrough:
            translated_text = text
            confidence = MAX_CONFIDENCE
        else:
            result = await self._call(
                "Translation",
                self.translator.translate(text, route.source, route.target),
            )
            if not isinstance(result.text, str):
                raise CollaboratorError("Translation returned no text")
            translated_text = result.text
            confidence = min(_clamp(base_confidence), _clamp(result.confidence))

        message = TranslationMessage(
            id=message_id,
            timestamp=to_iso(),
            room=room_id,
            speaker=speaker,
            original=LanguageBlock(
                text=text,
                language=route.source,
                language_name=self.directory.display_name(route.source),
            ),
            translated=LanguageBlock(
                text=translated_text,
                language=route.target,
                language_name=self.directory.display_name(route.target),
            ),
            confidence=confidence,
            speaker_id=speaker_id,
        )
        self.publisher.publish(room_id, OutboundEvent.TRANSLATION, message)
        self._status(room_id, ProcessingStatus.COMPLETE, speaker, message_id)
        log_event(
            logger, "INFO",
            domain="pipeline", event="message.complete",
            summary="Message relayed",
            room_id=room_id, message_id=message_id,
            route=f"{route.source}->{route.target}",
            passthrough=route.is_passthrough,
        )
        return message

    async def _call(self, what: str, awaitable: Awaitable[T]) -> T:
        """Await a collaborator with a timeout; every failure becomes CollaboratorError."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise CollaboratorError(f"{what} timed out", detail=f"no response within {self.timeout}s") from e
        except CollaboratorError:
            raise
        except Exception as e:
            raise CollaboratorError(f"{what} failed", detail=str(e)) from e

    def _status(
        self, room_id: str, status: ProcessingStatus, speaker: Role, message_id: str
    ) -> None:
        self.publisher.publish(
            room_id,
            OutboundEvent.PROCESSING_STATUS,
            ProcessingStatusPayload(status=status, speaker=speaker, message_id=message_id),
        )

    def _fail(
        self,
        connection_id: str,
        room_id: str,
        speaker: Role,
        message_id: str,
        message: str,
        exc: Exception,
    ) -> None:
        if isinstance(exc, CollaboratorError):
            detail = exc.message if exc.detail is None else f"{exc.message}: {exc.detail}"
            logger.error(f"Pipeline {message_id} in room {room_id} failed: {detail}")
        else:
            detail = str(exc)
            logger.error(f"Pipeline {message_id} in room {room_id} crashed: {exc}", exc_info=True)
        self._status(room_id, ProcessingStatus.ERROR, speaker, message_id)
        self.publisher.send(
            connection_id, OutboundEvent.ERROR, ErrorPayload(message=message, detail=detail)
        )
