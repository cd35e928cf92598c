import time
import logging

from fastapi import HTTPException, Request, status
from limits import parse
from slowapi import Limiter

from ..utils.geo import normalize_ip
from ..utils.validators import get_client_ip

logger = logging.getLogger(__name__)

RATE_LIMIT_SCOPE = "global"


def client_ip_key(request: Request) -> str:
    """Rate limit key: the visitor's address, taken from X-Forwarded-For behind a proxy"""
    settings = request.app.state.settings
    return normalize_ip(get_client_ip(request, trust_proxy=settings.TRUST_PROXY)) or "unknown"


def setup_rate_limit(app, rate_limit: str) -> None:
    """In-memory limiter holding one window per client address"""
    app.state.limiter = Limiter(key_func=client_ip_key, default_limits=[rate_limit])
    app.state.rate_limit = parse(rate_limit)


def hit_rate_limit(request: Request) -> bool:
    """
    Count this request against the client's window.

    Returns:
        True if the request is within the limit, False otherwise
    """
    limiter: Limiter = request.app.state.limiter
    rate_limit = request.app.state.rate_limit
    if not limiter.enabled:
        return True

    key = client_ip_key(request)
    if limiter.limiter.hit(rate_limit, key, RATE_LIMIT_SCOPE):
        return True

    logger.warning("Rate limit %s exceeded by %s on %s", rate_limit, key, request.url.path)
    return False


async def enforce_rate_limit(request: Request) -> None:
    """
    Dependency rejecting clients over the limit.

    Raises:
        HTTPException: 429 with Retry-After
    """
    if hit_rate_limit(request):
        return

    limiter: Limiter = request.app.state.limiter
    reset_time, _ = limiter.limiter.get_window_stats(request.app.state.rate_limit, client_ip_key(request), RATE_LIMIT_SCOPE)
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests, please try again later.",
        headers={"Retry-After": str(max(1, int(reset_time - time.time()) + 1))},
    )
