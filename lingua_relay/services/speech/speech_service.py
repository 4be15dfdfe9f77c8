"""
Speech Services

Recognition and synthesis front-ends over a provider client.
"""

import time
from typing import Optional

from lingua_relay.core.logging import get_logger
from lingua_relay.services.speech.base import SynthesizedAudio, Transcript, VoiceOptions

logger = get_logger(__name__)


class RecognitionService:
    def __init__(self, client):
        self.client = client

    async def recognize(self, audio: bytes, language_hint: str, mime_type: str) -> Transcript:
        start_time = time.time()
        transcript = await self.client.transcribe(audio, language_hint, mime_type)
        latency = (time.time() - start_time) * 1000
        logger.info(
            f"Recognized {len(audio)} bytes ({mime_type}, hint={language_hint}) "
            f"in {latency:.0f}ms, confidence={transcript.confidence:.2f}"
        )
        return transcript


class SynthesisService:
    def __init__(self, client):
        self.client = client

    async def synthesize(
        self, text: str, language: str, options: Optional[VoiceOptions] = None
    ) -> SynthesizedAudio:
        start_time = time.time()
        result = await self.client.synthesize(text, language, options)
        latency = (time.time() - start_time) * 1000
        logger.info(f"Synthesized {len(result.audio)} bytes for {language} in {latency:.0f}ms")
        return result
