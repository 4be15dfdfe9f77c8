"""
Mock speech client for development without API keys.
"""

import asyncio
import io
import wave
from typing import Optional

from lingua_relay.services.speech.base import (
    SpeakerSegment,
    SynthesizedAudio,
    Transcript,
    TranslationResult,
    VoiceOptions,
)

MOCK_TRANSCRIPTIONS = {
    "hi-IN": "कितना पैसा?",
    "bn-IN": "কত টাকা?",
    "ta-IN": "எவ்வளவு பணம்?",
    "te-IN": "ఎంత డబ్బు?",
    "en-IN": "How much money?",
}

# Also serves as the fallback phrasebook of TranslationService
PHRASEBOOK = {
    "कितना पैसा?": "How much money?",
    "How much money?": "कितना पैसा?",
    "Hello": "नमस्ते",
    "नमस्ते": "Hello",
    "Thank you": "धन्यवाद",
    "धन्यवाद": "Thank you",
    "How much?": "कितना?",
    "Good morning": "सुप्रभात",
    "I need a room": "मुझे एक कमरा चाहिए",
    "मुझे एक कमरा चाहिए": "I need a room",
    "Rs 3000": "Rs 3000",
}


class MockSpeechClient:
    def __init__(self, latency: float = 0.3):
        self.latency = latency

    async def _delay(self, scale: float = 1.0) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency * scale)

    async def transcribe(
        self, audio: bytes, language_code: str = "hi-IN", mime_type: str = "audio/webm"
    ) -> Transcript:
        await self._delay(4 / 3)
        text = MOCK_TRANSCRIPTIONS.get(language_code, "Sample text")
        return Transcript(
            text=text,
            confidence=0.95,
            language_detected=language_code,
            speaker_segments=[SpeakerSegment(speaker_id="speaker_1", text=text)],
        )

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        await self._delay()
        return TranslationResult(
            text=PHRASEBOOK.get(text, f"Translated: {text}"),
            confidence=0.95,
            source_language=source_language,
            target_language=target_language,
        )

    async def synthesize(
        self, text: str, language: str = "hi-IN", options: Optional[VoiceOptions] = None
    ) -> SynthesizedAudio:
        await self._delay()
        sample_rate = (options or VoiceOptions()).sample_rate
        # 100 ms of silence per word keeps the length plausible
        frames = max(1, len(text.split())) * sample_rate // 10
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(sample_rate)
            wav.writeframes(b"\x00\x00" * frames)
        return SynthesizedAudio(audio=buffer.getvalue(), content_type="audio/wav")

    async def aclose(self) -> None:
        return None
