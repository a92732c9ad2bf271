import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = "0.1.0"


@router.get("/", response_model=HealthCheckResponse)
async def health_check(session: AsyncSession = Depends(get_async_session)) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API and its database are reachable.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        return HealthCheckResponse(status="degraded", database="unreachable")
    return HealthCheckResponse(status="healthy", database="ok")
