"""TaskETA main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasketa import __version__
from tasketa.api import router
from tasketa.config import settings
from tasketa.tasks import stop_all_refreshes

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("tasketa")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting TaskETA server...")
    logger.info(f"Environment: {settings.env.value}")
    logger.info(f"Refresh interval: {settings.refresh_interval_seconds}s")

    yield

    logger.info("Shutting down TaskETA server...")
    stopped = await stop_all_refreshes()
    if stopped:
        logger.info(f"Stopped {stopped} running refresh chains")
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="TaskETA",
    description="Remaining-time estimates for long-running search cluster tasks",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

# Include API router
app.include_router(router)


def main():
    """Entry point for the HTTP server."""
    uvicorn.run(
        "tasketa.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
