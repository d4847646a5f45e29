"""
BrightNest API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database and Redis connections
- Payment provider and document storage clients
- CORS middleware
- API routing
- Health check endpoints
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from brightnest.api import api_router
from brightnest.core.config import settings
from brightnest.core.database import async_session_maker, close_db, init_db
from brightnest.core.payments import init_payment_client, is_payment_provider_available
from brightnest.core.redis import close_redis, init_redis, is_redis_healthy
from brightnest.core.storage import get_storage


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection
    - Database connection
    - Stripe client and S3 storage (both optional)
    """
    # Startup
    print(f"Starting BrightNest API in {settings.python_env} mode...")

    # Initialize Redis (rate limits fall back to memory without it)
    try:
        await init_redis()
        print("[OK] Redis connected")
    except Exception as e:
        print(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Database
    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    if init_payment_client() is not None:
        print("[OK] Payment provider configured")
    else:
        print("[SKIP] Payment provider not configured")

    if get_storage().is_configured:
        print("[OK] Document storage configured")
    else:
        print("[SKIP] Document storage not configured; uploads disabled")

    yield  # Application runs here

    # Shutdown
    print("Shutting down BrightNest API...")

    await close_redis()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="BrightNest API",
    description="BrightNest childcare registration and waitlist API",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to BrightNest API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness check: the database must answer.

    Redis, payments and document storage are reported but optional.
    """
    checks = {
        "database": "ok",
        "redis": "ok" if await is_redis_healthy() else "unavailable",
        "payments": "configured" if is_payment_provider_available() else "disabled",
        "storage": "configured" if get_storage().is_configured else "disabled",
    }

    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        checks["database"] = f"error: {e}"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "checks": checks},
        )

    return {"status": "ready", "checks": checks}
