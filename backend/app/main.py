"""License Manager - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import dispose_engine, get_session_factory
from app.core.env_validation import validate_environment
from app.core.errors import setup_exception_handlers
from app.routers import (
    administrators_router,
    customers_router,
    users_router,
    servers_router,
    licenses_router,
    purchase_orders_router,
    license_ledgers_router,
    license_audit_router,
)
from app.services.lookups import seed_lookup_tables

# CRITICAL: Validate environment before proceeding
# This will hard-fail (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    if settings.seed_lookups:
        async with get_session_factory()() as session:
            await seed_lookup_tables(session)
    yield
    # Shutdown
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="License management back office: customers, servers, purchase orders and the license lifecycle.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

setup_exception_handlers(app)

# CORS - Dynamically configured from ALLOWED_ORIGINS environment variable
# In production, wildcard (*) is blocked by env_validation.py
allowed_origins = settings.cors_origins

# Log resolved CORS origins at startup for visibility
logger.info(f"CORS configured with origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(administrators_router, prefix=settings.api_v1_prefix)
app.include_router(customers_router, prefix=settings.api_v1_prefix)
app.include_router(users_router, prefix=settings.api_v1_prefix)
app.include_router(servers_router, prefix=settings.api_v1_prefix)
app.include_router(licenses_router, prefix=settings.api_v1_prefix)
app.include_router(purchase_orders_router, prefix=settings.api_v1_prefix)
app.include_router(license_ledgers_router, prefix=settings.api_v1_prefix)  # Legacy ledger
app.include_router(license_audit_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
