"""
FastAPI application factory for Status Bot.

Provides:
- Application creation with proper lifecycle management
- Router registration
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from loguru import logger

from statusbot import __version__
from statusbot.server.routers import system_router, webhook_router
from statusbot.server.runtime import BotRuntime

if TYPE_CHECKING:
    from statusbot.config.schema import Config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown:
    - Startup: Build the runtime (unless one was injected), start the directory refresher
    - Shutdown: Stop the refresher, close HTTP clients
    """
    logger.info("Starting Status Bot server...")

    if app.state.runtime is None:
        app.state.runtime = BotRuntime.from_config(app.state.config)

    runtime: BotRuntime = app.state.runtime
    await runtime.start()

    yield

    logger.info("Shutting down Status Bot server...")
    await runtime.shutdown()


def create_app(
    config: "Config",
    runtime: BotRuntime | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Status Bot configuration
        runtime: Optional prebuilt runtime; built from config on startup if omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Status Bot",
        description="Sets Virtual RC desk statuses from Zulip direct messages",
        version=__version__,
        lifespan=lifespan,
    )

    # Store state before lifespan runs
    app.state.config = config
    app.state.runtime = runtime

    app.include_router(system_router, tags=["System"])
    app.include_router(webhook_router, tags=["Webhook"])

    return app
