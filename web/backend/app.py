#!/usr/bin/env python3
"""
Tulen API - FastAPI Application

Peer tutor matching: bubbles, study requests, ranked teacher suggestions,
matches, ratings and in-app notifications.

Usage:
    python main.py serve

Then open:
    - http://localhost:5000/docs - API Documentation (Swagger UI)
    - http://localhost:5000/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI, HTTPException

from core.lifecycle.exceptions import TulenError
from .config import get_config
from .exceptions import (
    service_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import (
    skills_router,
    bubbles_router,
    study_requests_router,
    matches_router,
    notifications_router,
    profile_router
)

# Load configuration
config = get_config()

# Configure logging
logging.basicConfig(
    level=config.logging.level,
    format=config.logging.format
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Tulen API",
    description="API for peer tutor matching inside study bubbles",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Register exception handlers
app.add_exception_handler(TulenError, service_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(skills_router)
app.include_router(bubbles_router)
app.include_router(study_requests_router)
app.include_router(matches_router)
app.include_router(notifications_router)
app.include_router(profile_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "tulen-api"}


def main():
    """Run the web server."""
    import uvicorn

    logger.info(f"Starting Tulen API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    main()
