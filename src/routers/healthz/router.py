import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.config.database import async_session_manager
from src.config.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"


class ReadinessResponse(BaseModel):
    status: str
    database: bool
    telegram_configured: bool


async def ping_database() -> bool:
    try:
        async with async_session_manager(auto_commit=False) as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database ping failed: {e!r}")
        return False
    return True


def get_database_probe():
    """Dependency returning the database ping. Override in tests."""
    return ping_database


@router.get("/", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running.
    """
    return HealthCheckResponse(status="healthy")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(probe=Depends(get_database_probe)) -> ReadinessResponse:
    """
    Whether the database answers. A missing Telegram setup only disables notifications.
    """
    database_ok = await probe()
    return ReadinessResponse(
        status="ready" if database_ok else "degraded",
        database=database_ok,
        telegram_configured=settings.telegram_configured,
    )
