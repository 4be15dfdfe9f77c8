"""
Speech collaborators: recognition, translation and synthesis.
"""

from dataclasses import dataclass, field
from typing import Any, List

from lingua_relay.core.config import Settings
from lingua_relay.core.logging import get_logger
from lingua_relay.services.speech.clients.mock_client import MockSpeechClient
from lingua_relay.services.speech.speech_service import RecognitionService, SynthesisService
from lingua_relay.services.speech.translation_service import TranslationService

logger = get_logger(__name__)


@dataclass
class SpeechStack:
    recognizer: RecognitionService
    translator: TranslationService
    synthesizer: SynthesisService
    clients: List[Any] = field(default_factory=list)

    async def aclose(self) -> None:
        for client in self.clients:
            await client.aclose()


def _sarvam_client(settings: Settings):
    from lingua_relay.services.speech.clients.sarvam_client import SarvamClient

    return SarvamClient(
        api_key=settings.sarvam_api_key,
        base_url=settings.sarvam_base_url,
        stt_model=settings.sarvam_stt_model,
        tts_model=settings.sarvam_tts_model,
        translate_model=settings.sarvam_translate_model,
        speaker_gender=settings.sarvam_speaker_gender,
        tone=settings.sarvam_tone,
        timeout=settings.collaborator_timeout_seconds,
    )


def build_speech_stack(settings: Settings) -> SpeechStack:
    """Pick provider clients from settings; mock when a key is missing."""
    mock = MockSpeechClient(latency=settings.mock_latency_seconds)
    clients: List[Any] = []

    if settings.use_mock_speech:
        logger.info("Mock speech API enabled (set SARVAM_API_KEY for production)")
        speech_client = mock
    else:
        logger.info("Using Sarvam speech API")
        speech_client = _sarvam_client(settings)
        clients.append(speech_client)

    if settings.use_mock_translation:
        translation_client, provider = mock, "MOCK"
    elif settings.translation_provider == "OPENAI":
        from lingua_relay.services.speech.clients.openai_client import OpenAITranslator

        translation_client = OpenAITranslator(settings.openai_api_key, settings.openai_model)
        clients.append(translation_client)
        provider = "OPENAI"
    else:
        translation_client = speech_client if not settings.use_mock_speech else _sarvam_client(settings)
        if translation_client not in clients:
            clients.append(translation_client)
        provider = "SARVAM"

    return SpeechStack(
        recognizer=RecognitionService(speech_client),
        translator=TranslationService(
            translation_client,
            provider=provider,
            fallback_enabled=settings.translation_fallback_enabled,
        ),
        synthesizer=SynthesisService(speech_client),
        clients=clients,
    )
