import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from leavedesk.config import get_settings
from leavedesk.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service liveness plus the result of a database round trip."""

    status: Literal["ok", "degraded"]
    database: Literal["ok", "unavailable"]
    version: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report degraded, not failed, when PostgreSQL cannot be reached."""
    settings = get_settings()
    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database query failed")
        database: Literal["ok", "unavailable"] = "unavailable"
    else:
        database = "ok"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        database=database,
        version=settings.app_version,
        environment=settings.environment,
    )
