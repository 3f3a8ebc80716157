"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
import logging_config
import models  # noqa: F401  registers every table on Base.metadata
from api import router as api_router
from api.errors import install_exception_handlers
from api.v1 import health
from db import close_db, init_db

# Setup logging
logging_config.setup_logging(config.settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    await init_db(app)
    yield
    # Shutdown
    await close_db(app)


# Create FastAPI app
app = FastAPI(
    title="OneFlow Backend",
    description="Multi-tenant project and financial operations API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(logging_config.RequestIdMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

# Include API router
app.include_router(api_router.api_router, prefix=config.settings.API_PREFIX)
app.include_router(health.router, tags=["health"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "OneFlow Backend API",
        "version": "0.1.0",
    }
