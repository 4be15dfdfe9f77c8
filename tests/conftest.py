"""
Conftest
"""

import asyncio
import os
from typing import Any, Dict, List, Optional, Tuple

# Must be set before lingua_relay.core.config is imported
os.environ.setdefault("MOCK_LATENCY_SECONDS", "0")
os.environ.setdefault("SPEECH_PROVIDER", "MOCK")
os.environ.setdefault("TRANSLATION_PROVIDER", "MOCK")
os.environ.setdefault("ROOM_EVENTS_ENABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient

from lingua_relay.services.relay import RelayHub
from lingua_relay.services.speech.base import SpeakerSegment, Transcript, TranslationResult


class RecordingTransport:
    """Stands in for the WebSocket connection manager."""

    def __init__(self):
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    def send(self, connection_id: str, message: Dict[str, Any]) -> bool:
        self.sent.append((connection_id, message))
        return True

    def events(self, connection_id: Optional[str] = None, event: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            message["data"]
            for target, message in self.sent
            if (connection_id is None or target == connection_id)
            and (event is None or message["event"] == event)
        ]

    def names(self, connection_id: str) -> List[str]:
        return [message["event"] for target, message in self.sent if target == connection_id]

    def clear(self) -> None:
        self.sent.clear()


class FakeRecognizer:
    def __init__(self, text: str = "कितना पैसा?", confidence: float = 0.9):
        self.result = Transcript(
            text=text,
            confidence=confidence,
            speaker_segments=[SpeakerSegment(speaker_id="speaker_1", text=text)],
        )
        self.error: Optional[Exception] = None
        self.delay = 0.0
        self.calls: List[Tuple[bytes, str, str]] = []

    async def recognize(self, audio: bytes, language_hint: str, mime_type: str) -> Transcript:
        self.calls.append((audio, language_hint, mime_type))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


class FakeTranslator:
    def __init__(self, confidence: float = 0.95):
        self.confidence = confidence
        self.error: Optional[Exception] = None
        self.delay = 0.0
        self.calls: List[Tuple[str, str, str]] = []

    async def translate(self, text: str, source_language: str, target_language: str) -> TranslationResult:
        self.calls.append((text, source_language, target_language))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return TranslationResult(
            text=f"[{target_language}] {text}",
            confidence=self.confidence,
            source_language=source_language,
            target_language=target_language,
        )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
async def hub(transport, recognizer, translator):
    relay = RelayHub(
        transport,
        recognizer,
        translator,
        cleanup_delay=0.05,
        collaborator_timeout=0.2,
        max_audio_bytes=1024,
    )
    yield relay
    await relay.shutdown()


@pytest.fixture
async def client():
    from lingua_relay.main import app, lifespan

    async with lifespan(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c


