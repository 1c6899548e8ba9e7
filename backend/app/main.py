"""
Flights and Packages Search -- FastAPI Application
Fuzzy site search and holiday-type finder for the storefront.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager, suppress
import logging
import logging.config
from datetime import datetime
import time
import asyncio

from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.core.monitoring import build_logging_config
from app.core.rate_limiting import limiter, rate_limit_handler
from app.db.database import SessionLocal, init_db, mark_unavailable
from app.db.repositories import FlightPackageRepository
from app.services.catalog import package_to_indexable
from app.services.keyword_index import keyword_index
from app.api import health, routes_holiday_search, routes_search

logging.config.dictConfig(build_logging_config(settings.log_level, settings.log_format))
logger = logging.getLogger(__name__)


def rebuild_keyword_index() -> int:
    """Full keyword index rebuild from published packages. Returns package count."""
    db = SessionLocal()
    try:
        packages = FlightPackageRepository(db).get_published()
        keyword_index.build(package_to_indexable(p) for p in packages)
        return len(packages)
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Keyword index refresh background task
# ---------------------------------------------------------------------------
async def _keyword_index_refresh_task(interval_minutes: int):
    """Rebuild the keyword index on a fixed interval to pick up catalog edits."""
    while True:
        await asyncio.sleep(interval_minutes * 60)
        try:
            count = await asyncio.to_thread(rebuild_keyword_index)
            logger.info(f"Keyword index refresh: {count} packages")
        except Exception as e:
            logger.warning(f"Keyword index refresh error: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment} | Workers: {settings.api_workers}")

    db_ready = False
    for attempt in range(1, 4):
        try:
            init_db()
            db_ready = True
            logger.info("Database initialized successfully")
            break
        except Exception as e:
            if attempt < 3:
                logger.warning(f"Database init attempt {attempt}/3 failed: {e}, retrying in 2s...")
                await asyncio.sleep(2)
            else:
                if settings.enforce_real_data:
                    logger.error(f"Database init failed after 3 attempts, aborting startup: {e}")
                    raise RuntimeError(f"Database init failed: {e}")
                logger.warning(f"Database init failed after 3 attempts, running degraded: {e}")
                mark_unavailable()

    if db_ready and settings.keyword_index_build_on_startup:
        try:
            count = rebuild_keyword_index()
            logger.info(f"Keyword index warm: {count} packages")
        except Exception as e:
            logger.warning(f"Keyword index build skipped: {e}")

    refresh_task = None
    if settings.keyword_index_refresh_minutes > 0:
        refresh_task = asyncio.create_task(
            _keyword_index_refresh_task(settings.keyword_index_refresh_minutes)
        )
        logger.info(f"Keyword index refresh every {settings.keyword_index_refresh_minutes}m")

    logger.info("Application startup complete -- ready to serve")

    yield

    if refresh_task is not None:
        refresh_task.cancel()
        with suppress(asyncio.CancelledError):
            await refresh_task
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Fuzzy site search and holiday-type finder for flight packages and tours.",
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

# GZip compression (min 500 bytes)
app.add_middleware(GZipMiddleware, minimum_size=500)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.middleware("http")
async def request_middleware(request: Request, call_next):
    """Log requests with timing and add security headers."""
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID", "")

    response = await call_next(request)

    elapsed = time.perf_counter() - start
    response.headers["X-Process-Time"] = f"{elapsed:.3f}"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if request_id:
        response.headers["X-Request-ID"] = request_id

    logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.3f}s")
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions gracefully."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(routes_search.router, prefix=settings.api_prefix)
app.include_router(routes_holiday_search.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root -- API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "health": f"{settings.api_prefix}/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
