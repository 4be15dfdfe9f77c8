"""
FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from lingua_relay import __version__
from lingua_relay.api.v1.router import api_router
from lingua_relay.core.config import settings
from lingua_relay.core.errors import (
    AppError,
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from lingua_relay.core.logging import RequestIDMiddleware, get_logger, setup_logging
from lingua_relay.infra.redis import close_redis_pool, get_redis, init_redis_pool
from lingua_relay.realtime.manager import ConnectionManager
from lingua_relay.services.relay import RelayHub
from lingua_relay.services.rooms.events import RoomEventFeed

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()

    feed = None
    if settings.room_events_enabled:
        await init_redis_pool()
        feed = RoomEventFeed(get_redis(), settings.room_events_channel)

    connections = ConnectionManager()
    relay = RelayHub.from_settings(connections, settings, on_room_event=feed)
    app.state.connections = connections
    app.state.relay = relay
    logger.info("Relay started")

    yield

    # Shutdown
    await relay.shutdown()
    await connections.shutdown()
    if feed is not None:
        await feed.drain()
        await close_redis_pool()
    logger.info("Relay stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Lingua Relay",
        description="Room-based speech and text translation relay",
        version=__version__,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    # Routes
    app.include_router(api_router, prefix=settings.api_prefix)

    # Exception Handlers
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app


app = create_app()
