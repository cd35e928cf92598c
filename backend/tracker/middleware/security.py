from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.security import generate_nonce


def build_csp(nonce: str) -> str:
    directives = {
        "default-src": "'self'",
        "script-src": f"'self' 'nonce-{nonce}'",
        "script-src-attr": "'none'",
        "style-src": f"'self' 'nonce-{nonce}'",
        "style-src-attr": "'unsafe-inline'",
        "img-src": "'self' data: https:",
        "connect-src": "'self'",
        "font-src": "'self'",
        "object-src": "'none'",
        "base-uri": "'self'",
        "frame-ancestors": "'none'",
    }
    return "; ".join(f"{name} {value}" for name, value in directives.items())


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Per-request CSP nonce and security headers"""

    async def dispatch(self, request: Request, call_next):
        nonce = generate_nonce()
        request.state.nonce = nonce

        response = await call_next(request)

        response.headers["Content-Security-Policy"] = build_csp(nonce)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"

        return response
