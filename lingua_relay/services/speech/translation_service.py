"""
Translation Service

Wraps the configured translation provider. The optional phrasebook fallback
is a policy of this collaborator; callers only ever see a result or an error.
"""

import time

from lingua_relay.core.errors import CollaboratorError
from lingua_relay.core.logging import get_logger
from lingua_relay.services.speech.base import TranslationResult
from lingua_relay.services.speech.clients.mock_client import PHRASEBOOK

logger = get_logger(__name__)


class TranslationService:
    def __init__(self, client, provider: str = "MOCK", fallback_enabled: bool = False):
        self.client = client
        self.provider = provider
        self.fallback_enabled = fallback_enabled

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        """
        Translate text.
        Returns the provider's result, or a phrasebook result with zero
        confidence when the provider fails and fallback is enabled.
        """
        start_time = time.time()
        try:
            result = await self.client.translate(text, source_language, target_language)
        except Exception as e:
            logger.error(f"Translation failed with {self.provider}: {e}")
            if not self.fallback_enabled:
                if isinstance(e, CollaboratorError):
                    raise
                raise CollaboratorError("Failed to translate text", detail=str(e)) from e
            result = self.fallback(text, source_language, target_language)

        latency = (time.time() - start_time) * 1000
        logger.info(f"Translated {source_language}->{target_language} via {self.provider} in {latency:.0f}ms")
        return result

    @staticmethod
    def fallback(text: str, source_language: str, target_language: str) -> TranslationResult:
        return TranslationResult(
            text=PHRASEBOOK.get(text, f"[Translation unavailable: {text}]"),
            confidence=0.0,
            source_language=source_language,
            target_language=target_language,
        )
