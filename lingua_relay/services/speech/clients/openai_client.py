"""
OpenAI Client wrapper

Alternative translation provider backed by chat completions.
"""

from typing import List, Optional

from openai import AsyncOpenAI

from lingua_relay.core.logging import get_logger
from lingua_relay.services.languages import directory
from lingua_relay.services.speech.base import TranslationResult

logger = get_logger(__name__)


class OpenAITranslator:
    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", client: Optional[AsyncOpenAI] = None):
        if client is None and not api_key:
            raise ValueError("OpenAI API key not provided")
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key)

    async def chat_completion(self, messages: List[dict], temperature: float = 0.3) -> str:
        """Standard chat completion"""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"OpenAI Chat Error: {e}")
            raise

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        source_name = directory.display_name(source_language) or source_language
        target_name = directory.display_name(target_language) or target_language
        system_prompt = f"""
You are a professional interpreter at a hotel front desk.
Translate the following text from {source_name} to {target_name}.
Keep the tone polite and concise.
Only output the translated text.
"""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": text},
        ]
        translated = await self.chat_completion(messages)
        return TranslationResult(
            text=translated.strip(),
            confidence=0.9,
            source_language=source_language,
            target_language=target_language,
        )

    async def aclose(self) -> None:
        await self.client.close()
