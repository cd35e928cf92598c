import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import clicks, pages
from .config import Settings, get_settings
from .core.error_handlers import setup_error_handlers
from .core.logging_config import setup_logging
from .core.rate_limit import enforce_rate_limit, setup_rate_limit
from .database import Database
from .middleware.security import SecurityHeadersMiddleware
from .migrations import migrate
from .services.backup import BackupScheduler
from .utils.geo import GeoResolver

logger = logging.getLogger(__name__)


class PublicFiles(StaticFiles):
    """Static files with .js always served as application/javascript"""

    def file_response(self, full_path, stat_result, scope, status_code=200):
        response = super().file_response(full_path, stat_result, scope, status_code)
        if str(full_path).endswith(".js"):
            response.headers["Content-Type"] = "application/javascript"
        return response


def create_app(
    settings: Optional[Settings] = None,
    geo_resolver: Optional[Callable[[str], str]] = None
) -> FastAPI:
    """
    Build the application.

    The database, geolocation client and backup scheduler are opened in the
    lifespan handler and released when the server shuts down.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.DATABASE_URL)
        migrate(database.engine)
        app.state.database = database

        resolver = geo_resolver or GeoResolver(settings.GEO_API_URL, settings.GEO_TIMEOUT)
        app.state.geo_resolver = resolver

        scheduler = BackupScheduler(database, settings.BACKUP_DIR, settings.BACKUP_INTERVAL_HOURS * 3600)
        if database.is_sqlite:
            scheduler.start()
        app.state.backup_scheduler = scheduler

        logger.info("Link tracker started, redirecting to %s", settings.REDIRECT_URL)
        try:
            yield
        finally:
            logger.info("Shutting down...")
            await scheduler.stop()
            if geo_resolver is None:
                resolver.close()
            database.close()
            logger.info("Server stopped.")

    # Initialize FastAPI app
    app = FastAPI(
        title="Link Tracker",
        description="Tracking redirector with click analytics",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings

    # Setup rate limiter, keyed on the client address
    setup_rate_limit(app, settings.RATE_LIMIT)

    setup_error_handlers(app)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(clicks.router, prefix="/api", tags=["clicks"], dependencies=[Depends(enforce_rate_limit)])
    app.include_router(pages.router, tags=["pages"])

    static_path = settings.FRONTEND_DIR / "static"
    if static_path.exists():
        app.mount("/static", PublicFiles(directory=str(static_path)), name="static")
    else:
        logger.warning("Static directory %s not found, /static is disabled", static_path)

    return app


def run() -> None:
    """Start the server; uvicorn handles SIGINT/SIGTERM with a graceful shutdown."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "tracker.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None
    )


if __name__ == "__main__":
    run()
