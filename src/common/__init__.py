"""
Common utilities and shared modules.
"""

from .http_client import (
    create_api_client,
    create_scraper_client,
    with_default_headers,
    DEFAULT_SCRAPE_HEADERS,
    USER_AGENT_BOT,
    USER_AGENT_BROWSER,
)
from .url_utils import clean_domain, is_valid_url

__all__ = [
    # HTTP client utilities
    "create_api_client",
    "create_scraper_client",
    "with_default_headers",
    "DEFAULT_SCRAPE_HEADERS",
    "USER_AGENT_BOT",
    "USER_AGENT_BROWSER",
    # URL utilities
    "clean_domain",
    "is_valid_url",
]
