"""
Text-to-speech for client-side playback of translated messages.
"""

import asyncio

from fastapi import APIRouter, Response

from lingua_relay.core.config import settings
from lingua_relay.core.deps import RelayDep
from lingua_relay.core.errors import CollaboratorError
from lingua_relay.schemas.rooms import SynthesizeRequest
from lingua_relay.services.speech.base import VoiceOptions

router = APIRouter()


@router.post("/tts")
async def synthesize(body: SynthesizeRequest, relay: RelayDep):
    options = VoiceOptions(
        speaker=body.speaker,
        pitch=body.pitch,
        pace=body.pace,
        loudness=body.loudness,
        sample_rate=body.sample_rate,
    )
    try:
        result = await asyncio.wait_for(
            relay.speech.synthesizer.synthesize(body.text, body.language, options),
            timeout=settings.collaborator_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise CollaboratorError("Speech synthesis timed out") from e
    return Response(content=result.audio, media_type=result.content_type)
