"""
FastAPI application entrypoint.

Lifespan:
  • On startup: verify DB connectivity, report email readiness.
  • On shutdown: dispose the engine cleanly.

Routers:
  • /feedback     — widget submissions (+ notification email)
  • /analytics    — feedback insights for the dashboard
  • /projects     — project administration and widget keys
  • /diagnostics  — email provider checks
  • /health       — shallow liveness probe
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import engine, ping_database
from app.routers.analytics import router as analytics_router
from app.routers.diagnostics import router as diagnostics_router
from app.routers.feedback import router as feedback_router
from app.routers.projects import router as projects_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""

    # Startup: verify DB is reachable
    try:
        await ping_database()
        logger.info("Database connection verified ✓")
    except Exception:
        logger.warning(
            "Could not reach the database on startup. "
            "The app will start, but requests will fail until the DB is available."
        )

    # Startup: notifications are optional, but say so loudly
    if not settings.NOTIFICATION_EMAIL:
        logger.warning("NOTIFICATION_EMAIL is not set; feedback emails are disabled")
    elif not (settings.BREVO_API_KEY or settings.RESEND_API_KEY):
        logger.warning("No email provider credentials set; feedback emails will fail")

    yield  # ← application runs here

    # Shutdown: clean up connection pool
    await engine.dispose()
    logger.info("Database engine disposed ✓")


# ── App ─────────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        "Feedback collection backend: "
        "widget ingestion, email notifications, and dashboard insights."
    ),
    lifespan=lifespan,
)

# The widget posts from customer sites, so CORS is open by default.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key"],
)

# Mount routers
app.include_router(feedback_router, prefix="/feedback")
app.include_router(analytics_router, prefix="/analytics")
app.include_router(projects_router, prefix="/projects")
app.include_router(diagnostics_router, prefix="/diagnostics")


# ── Health check ────────────────────────────────────────────
@app.get(
    "/health",
    tags=["System"],
    summary="Liveness probe",
)
async def health_check() -> dict[str, str]:
    """Shallow health check; confirms the process is alive."""
    return {"status": "healthy"}
