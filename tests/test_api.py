"""
HTTP endpoint tests
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["rooms"] == 0
    assert data["connections"] == 0
    assert data["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_generate_room_with_hotel_name(client: AsyncClient):
    response = await client.post("/api/generate-room", json={"hotelName": "Taj Palace"})
    assert response.status_code == 200
    data = response.json()
    room_id = data["roomId"]
    assert room_id.startswith("room_")
    assert data["joinUrl"] == f"http://test/?room={room_id}"
    assert data["qrData"] == data["joinUrl"]

    details = await client.get(f"/api/rooms/{room_id}")
    assert details.status_code == 200
    body = details.json()
    assert body["label"] == "Taj Palace"
    assert body["memberCount"] == 0


@pytest.mark.asyncio
async def test_generate_room_without_body_uses_default_label(client: AsyncClient):
    response = await client.post("/api/generate-room")
    assert response.status_code == 200

    details = await client.get(f"/api/rooms/{response.json()['roomId']}")
    assert details.json()["label"] == "Unknown Hotel"


@pytest.mark.asyncio
async def test_unknown_room_returns_error_body(client: AsyncClient):
    response = await client.get("/api/rooms/room_missing")
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "not_found"
    assert error["message"] == "Room not found"
    assert error["detail"] == "room_missing"


@pytest.mark.asyncio
async def test_list_languages(client: AsyncClient):
    response = await client.get("/api/languages")
    assert response.status_code == 200
    codes = {lang["code"] for lang in response.json()}
    assert {"hi-IN", "en-IN", "od-IN"} <= codes


@pytest.mark.asyncio
async def test_tts_returns_audio(client: AsyncClient):
    response = await client.post("/api/tts", json={"text": "Hello there", "language": "en-IN"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert response.content[:4] == b"RIFF"


@pytest.mark.asyncio
async def test_tts_rejects_empty_text(client: AsyncClient):
    response = await client.post("/api/tts", json={"text": "", "language": "en-IN"})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"
