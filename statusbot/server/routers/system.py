"""
System routes for Status Bot.

Provides:
- / - Heartbeat
- /health - Health check with directory state
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from statusbot.server.dependencies import RuntimeDep

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def heartbeat():
    """Heartbeat for uptime checks."""
    return "Hello World!"


@router.get("/health")
async def health_check(runtime: RuntimeDep):
    """
    Health check.

    Returns OK plus the size and age of the desk directory.
    """
    return JSONResponse(runtime.get_status())
