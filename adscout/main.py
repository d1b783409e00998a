"""ADSCOUT — FastAPI Application Entry Point.

Scrapes Facebook Ad Library results for India into a per-user ads table.
"""

import os

import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adscout.config import settings
from adscout.core.catalog import CATALOG_VERSION
from adscout.database import init_db, test_connection
from adscout.api.ads_routes import router as ads_router
from adscout.core.logging import get_logger

logger = get_logger("main")

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 ADSCOUT starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    logger.info(f"🧭 Ingestion mode: {settings.ingestion_mode.value}")
    if test_connection():
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — scrapes will fail to save")
    yield
    logger.info("ADSCOUT shut down")


app = FastAPI(
    title="ADSCOUT",
    description="Pull Facebook Ad Library results for India and store them per user.",
    version="1.0.0",
    lifespan=lifespan,
)

# Routers
app.include_router(ads_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "adscout",
        "version": "1.0.0",
        "ingestion_mode": settings.ingestion_mode.value,
        "catalog_version": CATALOG_VERSION,
    }


@app.get("/debug/db", tags=["System"])
async def debug_db():
    """Debug endpoint — check database connectivity."""
    from adscout.database import _mask_url, db_url

    backend = "postgresql" if db_url.startswith("postgresql") else "sqlite"
    return {
        "connected": test_connection(),
        "backend": backend,
        "url": _mask_url(db_url),
        "environment": "serverless" if IS_SERVERLESS else "local",
    }


def run() -> None:
    """Serve the app with uvicorn (local / container entry point)."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
