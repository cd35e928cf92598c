import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..utils.html import get_404_page, message_page

logger = logging.getLogger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """Install global error handlers"""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        """HTML pages for browser-facing errors, JSON for the API"""
        if request.url.path.startswith("/api"):
            return await http_exception_handler(request, exc)

        if exc.status_code == 404:
            return HTMLResponse(content=get_404_page(), status_code=404)

        if exc.status_code == 401:
            return HTMLResponse(
                content=message_page(
                    "Restricted access",
                    "Authentication is required to open the admin panel."
                ),
                status_code=401,
                headers=getattr(exc, "headers", None)
            )

        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Log with stack trace and show a generic page"""
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__)
        )
        return HTMLResponse(
            content=message_page("Server error", "Something went wrong. Please try again later."),
            status_code=500
        )
