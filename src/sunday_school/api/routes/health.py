"""
Health check API route
"""

from fastapi import APIRouter, HTTPException
from sunday_school.database.connection import get_db_pool
from sunday_school.utils.helpers import utc_now

router = APIRouter()

@router.get("")
async def health_check():
    """
    Health check - reports healthy only when the database answers SELECT 1
    """
    db_pool = get_db_pool()

    try:
        if db_pool is None:
            raise RuntimeError("Database pool not initialized")

        async with db_pool.acquire() as conn:
            await conn.fetchval("SELECT 1")

        return {
            "status": "healthy",
            "timestamp": utc_now().isoformat(),
            "database": "connected"
        }

    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")
