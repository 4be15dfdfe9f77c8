"""
Sarvam Client wrapper

Handles speech-to-text, text translation and text-to-speech against the
Sarvam HTTP API.
"""

import base64
from typing import Any, Dict, Optional

import httpx

from lingua_relay.core.errors import CollaboratorError
from lingua_relay.core.logging import get_logger
from lingua_relay.services.languages import (
    audio_filename,
    ensure_region_code,
    speaker_for_language,
    to_translate_source,
    to_translate_target,
)
from lingua_relay.services.speech.base import (
    SpeakerSegment,
    SynthesizedAudio,
    Transcript,
    TranslationResult,
    VoiceOptions,
)

logger = get_logger(__name__)

DEFAULT_CONFIDENCE = 0.95


def _describe_http_error(exc: httpx.HTTPError) -> Dict[str, Any]:
    detail: Dict[str, Any] = {"error": str(exc) or exc.__class__.__name__}
    if isinstance(exc, httpx.HTTPStatusError):
        detail["status"] = exc.response.status_code
        detail["body"] = exc.response.text[:500]
    return detail


def _confidence(result: Dict[str, Any]) -> float:
    value = result.get("confidence")
    return DEFAULT_CONFIDENCE if value is None else float(value)


class SarvamClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.sarvam.ai",
        stt_model: str = "saarika:v2.5",
        tts_model: str = "bulbul:v2",
        translate_model: str = "mayura:v1",
        speaker_gender: str = "Male",
        tone: str = "formal",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("Sarvam API key not provided")
        self.api_key = api_key
        self.stt_model = stt_model
        self.tts_model = tts_model
        self.translate_model = translate_model
        self.speaker_gender = speaker_gender
        self.tone = tone
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"api-subscription-key": api_key},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def transcribe(
        self, audio: bytes, language_code: str = "hi-IN", mime_type: str = "audio/webm"
    ) -> Transcript:
        language = ensure_region_code(language_code)
        files = {"file": (audio_filename(mime_type), audio, mime_type)}
        data = {"language_code": language, "model": self.stt_model}

        try:
            response = await self._client.post("/speech-to-text", files=files, data=data)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPError as e:
            detail = _describe_http_error(e)
            logger.error(f"Sarvam transcription error: {detail}")
            raise CollaboratorError("Failed to transcribe audio", detail=detail) from e
        except ValueError as e:
            raise CollaboratorError("Speech-to-text returned invalid JSON") from e

        transcript = result.get("transcript")
        if not isinstance(transcript, str):
            raise CollaboratorError("Speech-to-text response missing transcript")

        entries = (result.get("diarized_transcript") or {}).get("entries") or []
        segments = [
            SpeakerSegment(
                speaker_id=str(entry.get("speaker_id") or "speaker_1"),
                text=entry.get("text") or "",
                start=float(entry.get("start_time_seconds") or 0.0),
                end=float(entry.get("end_time_seconds") or 0.0),
            )
            for entry in entries
        ]
        if not segments:
            segments = [SpeakerSegment(speaker_id="speaker_1", text=transcript)]

        return Transcript(
            text=transcript,
            confidence=_confidence(result),
            language_detected=result.get("language_code") or language,
            speaker_segments=segments,
        )

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> TranslationResult:
        src = to_translate_source(source_language)
        tgt = to_translate_target(target_language)
        common = {
            "speaker_gender": self.speaker_gender,
            "mode": self.tone,
            "model": self.translate_model,
        }
        # Some API variants only accept the second set of field names
        payloads = [
            {"input": text, "source_language_code": src, "target_language_code": tgt, **common},
            {"text": text, "source_language": src, "target_language": tgt, **common},
        ]

        last_detail: Dict[str, Any] = {}
        for attempt, payload in enumerate(payloads, start=1):
            try:
                response = await self._client.post("/translate", json=payload)
                response.raise_for_status()
                result = response.json()
            except httpx.HTTPError as e:
                last_detail = _describe_http_error(e)
                logger.error(f"Sarvam translate error (attempt {attempt}): {last_detail}")
                continue
            except ValueError:
                last_detail = {"error": "invalid JSON"}
                continue

            translated = result.get("translated_text") or result.get("text")
            if not isinstance(translated, str):
                raise CollaboratorError("Translation response missing translated_text")
            return TranslationResult(
                text=translated,
                confidence=_confidence(result),
                source_language=src,
                target_language=tgt,
            )

        raise CollaboratorError("Failed to translate text", detail=last_detail)

    async def synthesize(
        self, text: str, language: str = "hi-IN", options: Optional[VoiceOptions] = None
    ) -> SynthesizedAudio:
        options = options or VoiceOptions()
        payload = {
            "text": text,
            "target_language_code": ensure_region_code(language),
            "speaker": options.speaker or speaker_for_language(language),
            "pitch": options.pitch,
            "pace": options.pace,
            "loudness": options.loudness,
            "speech_sample_rate": options.sample_rate,
            "enable_preprocessing": options.enable_preprocessing,
            "model": options.model or self.tts_model,
        }
        preview = text[:50] + ("…" if len(text) > 50 else "")
        logger.info(f"Sarvam TTS request: lang={payload['target_language_code']} speaker={payload['speaker']} text={preview!r}")

        try:
            response = await self._client.post("/text-to-speech", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            detail = _describe_http_error(e)
            logger.error(f"Sarvam TTS error: {detail}")
            raise CollaboratorError("Failed to generate speech", detail=detail) from e

        content_type = response.headers.get("content-type", "audio/mpeg")
        if "json" in content_type:
            try:
                body = response.json()
                encoded = (body.get("audios") or [None])[0] or body.get("audio")
                audio = base64.b64decode(encoded) if encoded else b""
            except (ValueError, TypeError) as e:
                raise CollaboratorError("Text-to-speech returned malformed audio") from e
            content_type = "audio/wav"
        else:
            audio = response.content

        if not audio:
            raise CollaboratorError("No audio data received from text-to-speech")
        return SynthesizedAudio(audio=audio, content_type=content_type)
