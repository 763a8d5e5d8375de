from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_session
from app.core.logging import logger

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check that also round-trips the database.

    Returns:
        200 {"status": "healthy"} or 503 {"status": "unavailable"}
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "healthy"}
