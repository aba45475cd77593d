"""FastAPI main application."""

import asyncio
import contextlib
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.room_handler import RoomHandler
from app.api.routes import router
from app.api.websocket import ConnectionManager
from app.config import Settings, settings
from app.services.room_registry import RoomRegistry

# Configure logging for the app (must be after imports but before app usage)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stdout,
)
# Set app loggers to INFO level
logging.getLogger("app").setLevel(logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown events.

    Handles:
    - WebSocket manager background task
    - Dropping all rooms on shutdown
    """
    # Startup
    websocket_task = asyncio.create_task(app.state.connection_manager.run())
    logger.info("Room server ready")

    yield

    # Shutdown
    websocket_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await websocket_task

    app.state.room_registry.clear()


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application with its own room registry.

    Args:
        config: Settings to build the app from

    Returns:
        The configured FastAPI app

    """
    app = FastAPI(
        title="Bingo Room Server",
        description="Room and turn coordination for multiplayer Bingo",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Room state lives on the app, one registry per process
    app.state.room_registry = RoomRegistry(code_length=config.room_code_length)
    app.state.room_handler = RoomHandler(
        app.state.room_registry, default_max_players=config.default_max_players
    )
    app.state.connection_manager = ConnectionManager(app.state.room_handler)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info",
    )


if __name__ == "__main__":
    main()
