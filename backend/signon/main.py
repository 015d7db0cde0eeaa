"""FastAPI main application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from signon.api import admin, auth, login, my
from signon.config import settings
from signon.core.database import close_db, init_db
from signon.core.logging_config import setup_logging
from signon.middleware.error_handler import ErrorHandlerMiddleware
from signon.middleware.request_logging import RequestLoggingMiddleware
from signon.services.identity.errors import UnknownProvider

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    _logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)

    await init_db()

    yield

    _logger.info("Shutting down %s", settings.APP_NAME)
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handler - Catch uncaught exceptions
app.add_middleware(ErrorHandlerMiddleware)

# Request logging - Request IDs and timing
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(UnknownProvider)
async def unknown_provider_handler(request: Request, exc: UnknownProvider):
    """Unconfigured providers look exactly like a missing route."""
    _logger.info("Request for unknown provider %r", exc.provider)
    return JSONResponse(status_code=404, content={"detail": "Not Found"})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(login.router, tags=["Login"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(my.router, prefix="/my", tags=["My"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
