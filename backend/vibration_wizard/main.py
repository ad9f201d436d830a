"""
FastAPI application entry point for the vibration test planner.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from vibration_wizard.config import get_settings
from vibration_wizard.db.database import SessionLocal, init_db
from vibration_wizard.core.templates import MISSION_TEMPLATES, load_default_library
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Vibration Test Planner API")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")

    app.state.template_library = load_default_library()
    logger.info(
        f"Loaded {len(app.state.template_library)} PSD templates and "
        f"{len(MISSION_TEMPLATES)} mission templates"
    )

    yield

    logger.info("Shutting down Vibration Test Planner API")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Backend API for deriving accelerated vibration and thermal-cycling test plans from field mission profiles",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from vibration_wizard.api import psd, missions, equivalency, thermal, reliability, fixture, plan, export  # noqa: E402

for module in (psd, missions, equivalency, thermal, reliability, fixture, plan, export):
    app.include_router(module.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()

        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "database": "connected",
            "psd_templates": len(getattr(app.state, "template_library", None) or ()),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "error": str(e)
        }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Vibration & Thermal-Cycling Test Planner API",
        "version": settings.app_version,
        "docs": "/api/docs",
        "endpoints": {
            "psd": "/api/psd",
            "missions": "/api/missions",
            "equivalency": "/api/equivalency",
            "thermal": "/api/thermal",
            "reliability": "/api/reliability",
            "fixture": "/api/fixture",
            "plan": "/api/plan",
            "export": "/api/export"
        }
    }
