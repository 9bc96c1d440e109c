"""
FastAPI application entry point.

Sets up the message board API with logging, CORS, table creation and the
consolidated router.
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables first
load_dotenv()

# Import configuration
from .config import get_settings
from .config.database import engine, Base

# Import consolidated API router
from .routes import router as api_router

# Get settings instance
settings = get_settings()


def configure_logging(log_level: str, log_file: str = None) -> None:
    """Route application logs to stderr, and to a file when one is configured."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=handlers,
    )


configure_logging(settings.log_level, settings.log_file)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Anonymous message board: boards, threads and replies",
    version=settings.app_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Ensure the boards table exists on startup
@app.on_event("startup")
def _ensure_database_initialized():
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (%s)", engine.url.render_as_string(hide_password=True))

# Include routers
app.include_router(api_router)  # All API routes from consolidated router

# Root endpoint
@app.get("/")
def read_root():
    """Health check endpoint."""
    return {
        "message": "Message board backend is running!",
        "version": settings.app_version,
        "environment": settings.environment
    }
