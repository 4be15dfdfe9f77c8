"""
Message Pipeline Tests
"""

import asyncio
import base64

import pytest

from lingua_relay.core.errors import AuthorizationError, CollaboratorError, ValidationError
from lingua_relay.schemas.events import Role, TextMessageEvent

AUDIO = base64.b64encode(b"\x1aE\xdf\xa3 webm bytes").decode()


async def send(hub, connection_id, event, **data):
    await hub.handle(connection_id, {"event": event, "data": data})
    await hub.drain()


@pytest.fixture
async def room(hub, transport):
    hub.bindings.bind("a", "r1", Role.HOST, "en-IN")
    hub.bindings.bind("b", "r1", Role.GUEST, "hi-IN")
    transport.clear()
    return hub


def statuses(transport, connection_id):
    return [data["status"] for data in transport.events(connection_id, "processing_status")]


@pytest.mark.asyncio
async def test_guest_text_is_translated_to_reply_language(room, transport, translator):
    await send(room, "b", "text_message", room="r1", text="नमस्ते")

    assert translator.calls == [("नमस्ते", "hi-IN", "en-IN")]
    for connection_id in ("a", "b"):
        [message] = transport.events(connection_id, "translation")
        assert message["original"] == {"text": "नमस्ते", "language": "hi-IN", "languageName": "Hindi"}
        assert message["translated"]["language"] == "en-IN"
        assert message["translated"]["languageName"] == "English"
        assert message["speaker"] == "guest"
        assert message["speakerId"] == "b"
        assert message["room"] == "r1"
        assert statuses(transport, connection_id) == ["translating", "complete"]


@pytest.mark.asyncio
async def test_host_text_targets_guest_language(room, transport, translator):
    await send(room, "a", "text_message", room="r1", text="Hello")

    assert translator.calls == [("Hello", "en-IN", "hi-IN")]
    [message] = transport.events("b", "translation")
    assert message["original"]["language"] == "en-IN"
    assert message["translated"] == {"text": "[hi-IN] Hello", "language": "hi-IN", "languageName": "Hindi"}
    assert message["confidence"] == pytest.approx(0.95)


@pytest.mark.asyncio
async def test_event_order_for_one_message(room, transport):
    await send(room, "b", "text_message", room="r1", text="नमस्ते")

    assert transport.names("a") == ["processing_status", "translation", "processing_status"]
    message_ids = {data["messageId"] for data in transport.events("a", "processing_status")}
    assert message_ids == {transport.events("a", "translation")[0]["id"]}


@pytest.mark.asyncio
async def test_unauthorized_room_only_errors_to_sender(room, transport, translator):
    hub = room
    hub.bindings.bind("c", "r2", Role.GUEST, "ta-IN")
    transport.clear()

    await send(hub, "c", "text_message", room="r1", text="hi")
    await send(hub, "nobody", "audio_message", room="r1", audioData=AUDIO)

    assert transport.events("c", "error") == [{"message": "Not authorized for this room"}]
    assert transport.events("nobody", "error") == [{"message": "Not authorized for this room"}]
    assert transport.events(event="processing_status") == []
    assert transport.events(event="translation") == []
    assert translator.calls == []


@pytest.mark.asyncio
async def test_authorize_raises_for_unbound_connection(room):
    with pytest.raises(AuthorizationError):
        await room.pipeline.process_text("stranger", TextMessageEvent(room="r1", text="hi"))


@pytest.mark.asyncio
async def test_same_language_skips_translation(room, transport, translator):
    await send(room, "a", "text_message", room="r1", text="Welcome", targetLanguage="en-IN")

    assert translator.calls == []
    [message] = transport.events("a", "translation")
    assert message["translated"]["text"] == message["original"]["text"] == "Welcome"
    assert message["confidence"] == 1.0
    assert statuses(transport, "a") == ["translating", "complete"]


@pytest.mark.asyncio
async def test_same_language_skip_holds_when_translator_is_down(room, transport, translator):
    translator.error = CollaboratorError("down")

    await send(room, "b", "text_message", room="r1", text="Namaste", language="en-IN")

    [message] = transport.events("b", "translation")
    assert message["translated"]["text"] == "Namaste"
    assert translator.calls == []


@pytest.mark.asyncio
async def test_explicit_target_overrides_routing(room, translator):
    await send(room, "b", "text_message", room="r1", text="नमस्ते", targetLanguage="ta-IN")

    assert translator.calls == [("नमस्ते", "hi-IN", "ta-IN")]


@pytest.mark.asyncio
async def test_auto_target_resolves_to_a_concrete_language(room, transport, translator):
    await send(room, "b", "text_message", room="r1", text="नमस्ते", targetLanguage="auto")

    assert translator.calls == [("नमस्ते", "hi-IN", "en-IN")]
    [message] = transport.events("a", "translation")
    assert message["translated"] == {"text": "[en-IN] नमस्ते", "language": "en-IN", "languageName": "English"}


@pytest.mark.asyncio
async def test_audio_message_runs_full_pipeline(room, transport, recognizer, translator):
    await send(room, "b", "audio_message", room="r1", audioData=AUDIO, mimeType="audio/ogg")

    assert recognizer.calls == [(base64.b64decode(AUDIO), "hi-IN", "audio/ogg")]
    assert translator.calls == [("कितना पैसा?", "hi-IN", "en-IN")]
    assert statuses(transport, "a") == ["recognizing", "translating", "complete"]
    [message] = transport.events("a", "translation")
    assert message["speakerId"] == "speaker_1"
    # lower of recognition (0.9) and translation (0.95)
    assert message["confidence"] == pytest.approx(0.9)


@pytest.mark.asyncio
async def test_audio_defaults_mime_type(room, recognizer):
    await send(room, "b", "audio_message", room="r1", audioData=AUDIO)
    assert recognizer.calls[0][2] == "audio/webm"


@pytest.mark.asyncio
async def test_recognition_failure_reports_error(room, transport, recognizer, translator):
    recognizer.error = CollaboratorError("Failed to transcribe audio")

    await send(room, "b", "audio_message", room="r1", audioData=AUDIO)

    assert statuses(transport, "a") == ["recognizing", "error"]
    assert statuses(transport, "b") == ["recognizing", "error"]
    [error] = transport.events("b", "error")
    assert error["message"] == "Failed to process audio message"
    assert "Failed to transcribe audio" in error["detail"]
    assert transport.events("a", "error") == []
    assert transport.events(event="translation") == []
    assert translator.calls == []


@pytest.mark.asyncio
async def test_unexpected_recognizer_exception_is_a_collaborator_failure(room, transport, recognizer):
    recognizer.error = RuntimeError("socket closed")

    await send(room, "b", "audio_message", room="r1", audioData=AUDIO)

    assert statuses(transport, "a")[-1] == "error"
    assert "socket closed" in transport.events("b", "error")[0]["detail"]


@pytest.mark.asyncio
async def test_empty_transcript_is_an_error(room, transport, recognizer):
    recognizer.result.text = "   "

    await send(room, "b", "audio_message", room="r1", audioData=AUDIO)

    assert statuses(transport, "a") == ["recognizing", "error"]
    assert transport.events(event="translation") == []


@pytest.mark.asyncio
async def test_translation_failure_reports_error(room, transport, translator):
    translator.error = CollaboratorError("Failed to translate text")

    await send(room, "a", "text_message", room="r1", text="Hello")

    assert statuses(transport, "b") == ["translating", "error"]
    assert transport.events("a", "error")[0]["message"] == "Failed to process text message"
    assert transport.events(event="translation") == []


@pytest.mark.asyncio
async def test_collaborator_timeout_is_a_failure(room, transport, translator):
    translator.delay = 1.0  # hub timeout is 0.2s

    await send(room, "a", "text_message", room="r1", text="Hello")

    assert statuses(transport, "b") == ["translating", "error"]
    assert "timed out" in transport.events("a", "error")[0]["detail"]


@pytest.mark.asyncio
async def test_invalid_audio_is_rejected_before_broadcast(room, transport, recognizer):
    too_big = base64.b64encode(b"\x00" * 2048).decode()

    await send(room, "b", "audio_message", room="r1")
    await send(room, "b", "audio_message", room="r1", audioData="not base64!!")
    await send(room, "b", "audio_message", room="r1", audioData=too_big)

    errors = [data["message"] for data in transport.events("b", "error")]
    assert errors == [
        "Audio payload too large or missing",
        "Audio payload is not valid base64",
        "Audio payload too large or missing",
    ]
    assert transport.events(event="processing_status") == []
    assert recognizer.calls == []


@pytest.mark.asyncio
async def test_empty_text_is_rejected(room, transport):
    with pytest.raises(ValidationError):
        await room.pipeline.process_text("a", TextMessageEvent(room="r1", text=""))
    assert transport.sent == []


@pytest.mark.asyncio
async def test_whitespace_only_text_is_rejected(room, transport):
    with pytest.raises(ValidationError):
        await room.pipeline.process_text("a", TextMessageEvent(room="r1", text=" \n\t"))
    assert transport.sent == []


@pytest.mark.asyncio
async def test_text_is_relayed_exactly_as_sent(room, transport, translator):
    await send(room, "a", "text_message", room=" r1 ", text="  Welcome\n")

    assert translator.calls == [("  Welcome\n", "en-IN", "hi-IN")]
    [message] = transport.events("b", "translation")
    assert message["original"]["text"] == "  Welcome\n"


@pytest.mark.asyncio
async def test_pipeline_finishes_after_sender_disconnects(room, transport, recognizer):
    recognizer.delay = 0.05

    await room.handle("b", {"event": "audio_message", "data": {"room": "r1", "audioData": AUDIO}})
    await asyncio.sleep(0.01)
    room.disconnect("b")
    await room.drain()

    assert statuses(transport, "a") == ["recognizing", "translating", "complete"]
    assert len(transport.events("a", "translation")) == 1


@pytest.mark.asyncio
async def test_concurrent_messages_are_independent(room, transport, translator, recognizer):
    recognizer.delay = 0.05

    await room.handle("b", {"event": "audio_message", "data": {"room": "r1", "audioData": AUDIO}})
    await room.handle("a", {"event": "text_message", "data": {"room": "r1", "text": "Hello"}})
    assert room.in_flight == 2
    await room.drain()

    messages = transport.events("a", "translation")
    assert {m["speaker"] for m in messages} == {"host", "guest"}
    assert [s for s in statuses(transport, "a") if s == "complete"] == ["complete", "complete"]


@pytest.mark.asyncio
async def test_failure_in_one_pipeline_does_not_affect_another(room, transport, translator):
    calls = []

    async def flaky(text, source, target):
        calls.append(text)
        if text == "boom":
            raise CollaboratorError("bad input")
        await asyncio.sleep(0.01)
        return await type(translator).translate(translator, text, source, target)

    translator.translate = flaky

    await room.handle("a", {"event": "text_message", "data": {"room": "r1", "text": "boom"}})
    await room.handle("a", {"event": "text_message", "data": {"room": "r1", "text": "Hello"}})
    await room.drain()

    [message] = transport.events("b", "translation")
    assert message["original"]["text"] == "Hello"
    assert sorted(statuses(transport, "b")) == ["complete", "error", "translating", "translating"]
    assert room.registry.get_stats("r1").member_count == 2
