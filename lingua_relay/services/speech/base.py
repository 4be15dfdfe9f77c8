"""
Collaborator contracts

The relay treats recognition, translation and synthesis as opaque
request/response services. Adapters implement these protocols.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


@dataclass
class SpeakerSegment:
    speaker_id: str
    text: str
    start: float = 0.0
    end: float = 0.0


@dataclass
class Transcript:
    text: str
    confidence: float = 0.95
    language_detected: Optional[str] = None
    speaker_segments: List[SpeakerSegment] = field(default_factory=list)


@dataclass
class TranslationResult:
    text: str
    confidence: float = 0.95
    source_language: Optional[str] = None
    target_language: Optional[str] = None


@dataclass
class VoiceOptions:
    speaker: Optional[str] = None
    pitch: float = 0.0
    pace: float = 1.0
    loudness: float = 1.0
    sample_rate: int = 22050
    enable_preprocessing: bool = True
    model: Optional[str] = None


@dataclass
class SynthesizedAudio:
    audio: bytes
    content_type: str = "audio/wav"


class Recognizer(Protocol):
    async def recognize(self, audio: bytes, language_hint: str, mime_type: str) -> Transcript:
        ...


class Translator(Protocol):
    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        ...


class Synthesizer(Protocol):
    async def synthesize(
        self, text: str, language: str, options: Optional[VoiceOptions] = None
    ) -> SynthesizedAudio:
        ...
