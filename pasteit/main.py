"""
FastAPI application entry point.

This module sets up:
- FastAPI application with middleware
- Exception handlers
- Rate limiting
- API routes
- CORS configuration
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from pasteit.api.routes import admin, auth, health, pastes, users
from pasteit.core.config import settings
from pasteit.core.handlers import (
    app_exception_handler,
    general_exception_handler,
    rate_limit_handler,
    validation_exception_handler,
)
from pasteit.core.lifespan import lifespan
from pasteit.core.logging import setup_logging
from pasteit.core.rate_limit import limiter
from pasteit.exceptions import AppException
from pasteit.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


# ============================================================================
# FastAPI Application
# ============================================================================
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description=settings.description,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Attach rate limiter to app
app.state.limiter = limiter


# ============================================================================
# Exception Handlers
# ============================================================================
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_exception_handler(Exception, general_exception_handler)


# ============================================================================
# Middleware Setup (last added runs first)
# ============================================================================
# Default rate limit for routes without their own limit
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(RequestLoggingMiddleware)

# Wraps request logging so log records carry the request ID
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    SecurityHeadersMiddleware,
    enable_hsts=settings.is_production,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# API Routes
# ============================================================================
api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(pastes.router)
api_router.include_router(users.router)
api_router.include_router(admin.router)

app.include_router(health.router)
app.include_router(api_router)


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "pasteit.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
