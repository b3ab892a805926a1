"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), registers exception handlers, serves uploaded media and
includes all API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from quillpress import __version__
from quillpress.core.database import async_session_maker, engine, init_db
from quillpress.core.logging_config import get_logger, setup_logging
from quillpress.core.monitoring import initialize_logfire

from .api.v1 import (
    blog,
    categories,
    comments,
    dashboard,
    health,
    media,
    pages,
    site_settings,
    tags,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.scheduler import PublishingScheduler

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Initializes the database on startup and, when enabled, runs the scheduled
    publishing loop for the lifetime of the process.
    """
    # Startup
    try:
        logger.info("Starting up QuillPress Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    scheduler = None
    if settings.scheduler.enabled:
        scheduler = PublishingScheduler(async_session_maker, settings.scheduler.interval_seconds)
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    # Shutdown
    logger.info("Shutting down QuillPress Server...")
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    QuillPress Server API

    Backend of a blog/CMS: posts with auto-tagging and scheduling, tags and categories,
    comments, a media library, pages with version history, menus, widgets, appearance
    and site settings, plus the public blog read path and RSS feed.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app, engine)

upload_dir = Path(settings.media.upload_dir)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(settings.media.public_prefix, StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

app.include_router(health.router, tags=["health"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users")
app.include_router(tags.admin_router, prefix=f"{constant.API_V1_STR}/blog/admin/tags")
app.include_router(blog.router, prefix=f"{constant.API_V1_STR}/blog")
app.include_router(tags.public_router, prefix=f"{constant.API_V1_STR}/tags")
app.include_router(categories.router, prefix=f"{constant.API_V1_STR}/categories")
app.include_router(comments.router, prefix=f"{constant.API_V1_STR}/comments")
app.include_router(media.router, prefix=f"{constant.API_V1_STR}/media")
app.include_router(site_settings.router, prefix=f"{constant.API_V1_STR}/settings")
app.include_router(pages.router, prefix=f"{constant.API_V1_STR}/pages")
app.include_router(dashboard.router, prefix=f"{constant.API_V1_STR}/dashboard")
# Root-level verification files (e.g. /google1234.html) must be matched last.
app.include_router(site_settings.verification_router)
