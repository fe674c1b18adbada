import logging
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.db.database import db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Health check endpoint, including a database round trip."""
    try:
        await db.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check database error: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "unavailable"}
        )
    return {"status": "ok", "database": "ok"}
