import re
import ipaddress
import logging
from typing import Optional

import httpx

from ..models import LOCAL_COUNTRY, UNKNOWN_COUNTRY

logger = logging.getLogger(__name__)

DEFAULT_GEO_API_URL = "http://ip-api.com/json"

# Private IP patterns
PRIVATE_IP_PATTERNS = [
    re.compile(r'^127\.'),  # Loopback
    re.compile(r'^10\.'),  # Class A private
    re.compile(r'^172\.(1[6-9]|2[0-9]|3[0-1])\.'),  # Class B private
    re.compile(r'^192\.168\.'),  # Class C private
    re.compile(r'^169\.254\.'),  # Link-local
    re.compile(r'^::1$'),  # IPv6 loopback
    re.compile(r'^f[cd][0-9a-f]{2}:', re.IGNORECASE),  # IPv6 unique local
    re.compile(r'^fe[89ab][0-9a-f]:', re.IGNORECASE),  # IPv6 link-local
]


def normalize_ip(ip: Optional[str]) -> Optional[str]:
    """Strip the IPv4-mapped IPv6 prefix (::ffff:1.2.3.4 -> 1.2.3.4)"""
    if not ip:
        return ip
    try:
        mapped = ipaddress.IPv6Address(ip).ipv4_mapped
    except ValueError:
        return ip
    return str(mapped) if mapped else ip


def is_ip_address(value: Optional[str]) -> bool:
    """Check that value parses as an IPv4 or IPv6 address"""
    if not value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_private_ip(ip: Optional[str]) -> bool:
    """Check if IP address is private/local"""
    if not ip:
        return True
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        # Not a plain address (e.g. carries a port); match on the prefix
        return any(pattern.match(ip) for pattern in PRIVATE_IP_PATTERNS)

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        address = address.ipv4_mapped
    return address.is_private or address.is_loopback or address.is_link_local


def get_country(ip: str, client: httpx.Client, api_url: str = DEFAULT_GEO_API_URL) -> str:
    """
    Get country name for an IP address from ip-api.com.

    Private and loopback addresses return "local" without a request, and
    anything that is not an IP address returns "unknown" without one.
    Any failure returns "unknown"; this function does not raise.
    """
    if is_private_ip(ip):
        return LOCAL_COUNTRY
    if not is_ip_address(ip):
        return UNKNOWN_COUNTRY

    try:
        response = client.get(
            f"{api_url.rstrip('/')}/{ip}",
            params={"fields": "status,country"}
        )

        if response.status_code == 200:
            data = response.json()
            if isinstance(data, dict) and data.get("status") == "success" and data.get("country"):
                return data["country"]
            logger.warning("Geolocation lookup for %s returned no country: %r", ip, data)
        else:
            logger.warning("Geolocation lookup for %s failed with HTTP %s", ip, response.status_code)
    except Exception as e:
        logger.warning("Geolocation lookup for %s failed: %s", ip, e)

    return UNKNOWN_COUNTRY


class GeoResolver:
    """Callable country resolver owning a pooled HTTP client"""

    def __init__(self, api_url: str = DEFAULT_GEO_API_URL, timeout: float = 3.0,
                 client: Optional[httpx.Client] = None):
        self.api_url = api_url
        self.client = client or httpx.Client(timeout=timeout)

    def __call__(self, ip: str) -> str:
        return get_country(ip, self.client, self.api_url)

    def close(self) -> None:
        self.client.close()
