from fastapi import APIRouter, HTTPException
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from catalog.core.database import SessionLocal
from catalog.models import City, Destination
from datetime import datetime
from typing import Dict, Any
import logging
import time

logger = logging.getLogger(__name__)

router = APIRouter()


def check_database() -> Dict[str, Any]:
    """Round-trip to the database and measure it."""
    started = time.perf_counter()
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1")).scalar()
            return {
                "status": "healthy",
                "dialect": db.get_bind().dialect.name,
                "latency_ms": round((time.perf_counter() - started) * 1000, 2),
            }
        finally:
            db.close()
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


def check_catalog() -> Dict[str, Any]:
    """Counts of what the catalog currently serves."""
    try:
        db = SessionLocal()
        try:
            return {
                "status": "healthy",
                "city_count": db.query(func.count(City.id)).scalar(),
                "active_destination_count": db.query(func.count(Destination.id))
                .filter(Destination.active.is_(True))
                .scalar(),
                "region_count": db.query(func.count(func.distinct(City.region))).scalar(),
            }
        finally:
            db.close()
    except SQLAlchemyError as e:
        logger.error(f"Catalog health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


@router.get("/healthz")
def health_check():
    """
    Readiness: database reachable and catalog tables readable.
    Answers 503 with the same body when any check fails.
    """
    checks = {"database": check_database()}
    if checks["database"]["status"] == "healthy":
        checks["catalog"] = check_catalog()

    healthy = all(check["status"] == "healthy" for check in checks.values())
    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "checks": checks,
        "version": "1.0.0",
    }

    if not healthy:
        raise HTTPException(status_code=503, detail=response)

    return response


@router.get("/health")
async def liveness():
    """Liveness only; does not touch the database."""
    return {"status": "ok", "timestamp": datetime.now().isoformat()}
