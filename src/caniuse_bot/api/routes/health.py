"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter

from caniuse_bot import __version__
from caniuse_bot.constants import HEALTH_PATH

router = APIRouter(tags=["health"])


@router.get(HEALTH_PATH)
async def health() -> dict[str, str]:
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }
