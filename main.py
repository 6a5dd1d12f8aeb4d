#!/usr/bin/env python3

"""
Main application entry point for the linkshelf bookmarking service.

Architecture: FastAPI application over an async SQLAlchemy database.
Key Features: Lifecycle management, problem-style error responses, CORS configuration,
uploaded media served under /storage.
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from linkshelf import __version__
from linkshelf.api import (
    archives_router,
    auth_router,
    links_router,
    tags_router,
    users_router,
)
from linkshelf.api.problems import register_problem_handlers
from linkshelf.config import settings
from linkshelf.db import close_db, init_db
from linkshelf.utils.logger import cleanup_old_logs, setup_logger

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...")
    try:
        removed = cleanup_old_logs()
        if removed:
            logger.info(f"Removed {removed} old log file(s).")

        logger.info("Initializing database...")
        await init_db()
        logger.info("Database initialization complete.")
    except Exception as e:
        logger.critical(f"Startup error: {e}")
        raise SystemExit(f"Startup failed: {e}") from e

    logger.info("linkshelf API startup successful.")
    yield

    logger.info("linkshelf API shutdown...")
    await close_db()
    logger.info("Shutdown complete.")


def create_app():
    app = FastAPI(title="linkshelf API", version=__version__, lifespan=lifespan)

    register_problem_handlers(app)

    app.include_router(auth_router)
    app.include_router(tags_router)
    app.include_router(links_router)
    app.include_router(archives_router)
    app.include_router(users_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    Path(settings.media_root).mkdir(parents=True, exist_ok=True)
    app.mount(
        "/storage",
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="storage",
    )

    return app


app = create_app()


def main():
    """
    Start the FastAPI application with uvicorn.
    """
    port = int(settings.server_port)
    host = settings.server_host

    logger.info(f"Starting linkshelf API server on {host}:{port}")

    try:
        uvicorn.run(
            "main:app" if settings.server_workers > 1 else app,
            host=host,
            port=port,
            workers=settings.server_workers,
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
