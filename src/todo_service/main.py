"""FastAPI application entrypoint with Lambda handler."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from .auth import auth_guard
from .config import settings
from .errors import register_error_handlers
from .routes import ai, auth, health, todos

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info(f"Starting {settings.service_name} in {settings.environment} mode (timezone={settings.timezone})")
    yield
    logger.info(f"Shutting down {settings.service_name}")


app = FastAPI(
    title="Todo Service",
    description="Task management with AI task parsing and period analysis via Claude",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

register_error_handlers(app)

# Routing guard for the app and login pages
app.middleware("http")(auth_guard)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(ai.router)
app.include_router(auth.router)
app.include_router(todos.router)

# Lambda handler via Mangum
handler = Mangum(app, lifespan="off")
