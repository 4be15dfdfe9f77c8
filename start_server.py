"""
Start the Lingua Relay server
"""
import os

import uvicorn

from lingua_relay.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 8000))
    logger.info(f"Starting Lingua Relay on {host}:{port}")

    try:
        uvicorn.run(
            "lingua_relay.main:app",
            host=host,
            port=port,
            reload=os.getenv("RELOAD", "false").lower() == "true",
            log_level="info",
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
