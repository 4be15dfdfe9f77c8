"""
API Router configuration
"""

from fastapi import APIRouter

from lingua_relay.api.v1 import health, languages, rooms, speech, ws_relay

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(rooms.router, tags=["rooms"])
api_router.include_router(languages.router, tags=["languages"])
api_router.include_router(speech.router, tags=["speech"])
api_router.include_router(ws_relay.router, tags=["websocket"])
