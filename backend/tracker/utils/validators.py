from typing import Optional

MAX_HEADER_LENGTH = 512


def get_client_ip(request, trust_proxy: bool = True) -> str:
    """
    Get client IP address from request.

    Args:
        request: FastAPI request object
        trust_proxy: Honour X-Forwarded-For set by a reverse proxy

    Returns:
        Client IP address
    """
    # Check for X-Forwarded-For header (if behind proxy)
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP in the chain
            return forwarded.split(",")[0].strip()

    # Otherwise use client.host
    return request.client.host if request.client else "unknown"


def clean_header(value: Optional[str], default: str) -> str:
    """Header value truncated to the column size, or default if empty"""
    if not value:
        return default
    return value[:MAX_HEADER_LENGTH]
