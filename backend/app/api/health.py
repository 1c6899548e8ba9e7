"""
Health check routes.
Readiness/liveness probes for the load balancer.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime
import time
import logging

from app.db.database import get_db
from app.db.repositories import CachedTourRepository, FlightPackageRepository
from app.core.rate_limiting import limiter, HEALTH_LIMIT
from app.services.keyword_index import KeywordIndexStore, get_keyword_index

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

_STARTUP_TIME = time.time()


@router.get("/")
@limiter.limit(HEALTH_LIMIT)
def health_check(
    request: Request,
    db: Session = Depends(get_db),
    store: KeywordIndexStore = Depends(get_keyword_index),
):
    """
    Database connectivity, catalog size, keyword index status, uptime.
    Safe when db is None.
    """
    index_stats = store.stats()
    health = {
        "status": "healthy",
        "database": "unavailable",
        "packages": 0,
        "tours": 0,
        "keyword_index": {
            "built": store.is_built(),
            "packages": index_stats["packages"],
            "built_at": index_stats["built_at"],
        },
        "uptime_seconds": int(time.time() - _STARTUP_TIME),
        "timestamp": datetime.utcnow().isoformat(),
    }

    if db is None:
        health["status"] = "degraded"
        return health

    health["database"] = "available"
    health["packages"] = FlightPackageRepository(db).count_published()
    health["tours"] = CachedTourRepository(db).count()
    return health


@router.get("/ready")
@limiter.limit(HEALTH_LIMIT)
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Ready only when the database answers."""
    if db is None:
        return {"ready": False, "error": "database unavailable", "timestamp": datetime.utcnow().isoformat()}
    try:
        db.execute(text("SELECT 1"))
        return {"ready": True, "timestamp": datetime.utcnow().isoformat()}
    except Exception as e:
        logger.error(f"Readiness check failed: {str(e)}")
        return {"ready": False, "error": str(e)}


@router.get("/live")
def liveness_check():
    """Liveness probe."""
    return {"alive": True, "uptime_seconds": int(time.time() - _STARTUP_TIME), "timestamp": datetime.utcnow().isoformat()}
