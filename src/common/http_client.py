"""
Shared HTTP Client Configuration.

Provides standardized HTTP client creation and the header sets used for the
AngelList API and for the public profile pages.

Usage:
    from src.common.http_client import create_api_client, create_scraper_client

    # For the JSON API
    client = create_api_client()

    # For profile pages that need browser-like headers
    client = create_scraper_client()
"""

from typing import Mapping, Optional

import httpx

from ..config.settings import settings


# =============================================================================
# User-Agent / Header Constants
# =============================================================================

# Bot identifier - Use for the JSON API
USER_AGENT_BOT = "AngelListEnrichment/1.0 (Company Enrichment Bot)"

# Browser-like User-Agent - profile pages block obvious bots
USER_AGENT_BROWSER = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Disguise headers for profile page fetches. Applied per header, only where
# the caller did not supply its own value.
DEFAULT_SCRAPE_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT_BROWSER,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.8",
    "Cache-Control": "max-age=0",
}


def with_default_headers(
    headers: Optional[Mapping[str, str]],
    defaults: Mapping[str, str] = DEFAULT_SCRAPE_HEADERS,
) -> dict[str, str]:
    """
    Fill in missing headers from `defaults` without overriding caller values.

    Header names are compared case-insensitively, so a caller-supplied
    ``user-agent`` wins over the default ``User-Agent``.

    Args:
        headers: Caller-supplied headers (may be None)
        defaults: Fallback values

    Returns:
        New dict with caller headers plus any missing defaults
    """
    merged = dict(headers or {})
    present = {name.lower() for name in merged}
    for name, value in defaults.items():
        if name.lower() not in present:
            merged[name] = value
    return merged


# =============================================================================
# HTTP Client Factory
# =============================================================================

def create_scraper_client(
    user_agent: str = USER_AGENT_BROWSER,
    timeout: Optional[float] = None,
    max_connections: Optional[int] = None,
    max_keepalive: Optional[int] = None,
    follow_redirects: bool = True,
    extra_headers: Optional[dict] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create a standardized async HTTP client for profile page fetches.

    Args:
        user_agent: User-Agent string (use constants above)
        timeout: Request timeout in seconds (default: settings.scrape_timeout)
        max_connections: Maximum concurrent connections
        max_keepalive: Maximum keepalive connections
        follow_redirects: Whether to follow HTTP redirects
        extra_headers: Additional headers to include
        transport: Optional transport override (e.g. httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient

    Example:
        async with create_scraper_client() as client:
            response = await client.get(url)
    """
    headers = {"User-Agent": user_agent}
    if extra_headers:
        headers.update(extra_headers)

    return httpx.AsyncClient(
        timeout=timeout or settings.scrape_timeout,
        headers=headers,
        limits=httpx.Limits(
            max_connections=max_connections or settings.max_connections,
            max_keepalive_connections=max_keepalive or settings.max_keepalive,
        ),
        follow_redirects=follow_redirects,
        transport=transport,
    )


def create_api_client(
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create the async HTTP client shared by all directory API clients.

    Args:
        timeout: Request timeout (default: settings.request_timeout)
        transport: Optional transport override (e.g. httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient for JSON API calls
    """
    return httpx.AsyncClient(
        timeout=timeout or settings.request_timeout,
        headers={
            "User-Agent": USER_AGENT_BOT,
            "Accept": "application/json",
        },
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive,
        ),
        follow_redirects=True,
        transport=transport,
    )
