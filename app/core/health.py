"""
Health check for the relational store.
"""
import time
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.logging_config import get_logger

logger = get_logger("app.health")


def check_database_connection(db: Session) -> Dict[str, Any]:
    """
    Run ``SELECT 1`` against the store.

    Returns:
        Dict with status, database state, timestamp and response time
    """
    start_time = time.time()
    result: Dict[str, Any] = {
        "status": "healthy",
        "database": "connected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        result["status"] = "unhealthy"
        result["database"] = "disconnected"
        result["error"] = str(e)
        logger.error(f"Database health check failed: {e}")

    result["response_time_ms"] = round((time.time() - start_time) * 1000, 2)
    return result
