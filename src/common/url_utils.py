"""
Shared URL validation and domain normalization utilities.

Domain identity is the strongest match signal the enrichment stage has, so
every comparison of a website against a query domain goes through
clean_domain() on both sides.
"""

import re
from typing import Optional
from urllib.parse import urlparse

# Invalid placeholder values sometimes present in directory payloads
INVALID_URL_PLACEHOLDERS = {
    "not mentioned", "not specified", "unknown", "n/a", "none", "",
    "null", "undefined", "n.a.", "na", "not available", "not provided",
}

# Bare domain (no scheme) such as "segment.io" or "www.segment.io/about"
DOMAIN_PATTERN = re.compile(r'^[a-z0-9][a-z0-9.-]*\.[a-z]{2,}$')


def is_valid_url(url: Optional[str]) -> bool:
    """
    Check if URL is a real URL (not a placeholder or invalid).

    Examples:
        >>> is_valid_url("https://example.com")
        True
        >>> is_valid_url("n/a")
        False
    """
    if not url:
        return False

    url_lower = url.lower().strip()
    if url_lower in INVALID_URL_PLACEHOLDERS:
        return False

    if url_lower.startswith("www."):
        return True
    return url_lower.startswith("http://") or url_lower.startswith("https://")


def clean_domain(url_or_domain: Optional[str]) -> Optional[str]:
    """
    Reduce a URL or domain to its bare, lower-cased host name.

    Strips scheme, credentials, port, path, query and a leading "www.".

    Examples:
        >>> clean_domain("https://www.Segment.io/about")
        "segment.io"
        >>> clean_domain("segment.io")
        "segment.io"
        >>> clean_domain("not a domain")
        None
    """
    if not url_or_domain:
        return None

    text = str(url_or_domain).strip().lower()
    if not text or text in INVALID_URL_PLACEHOLDERS:
        return None

    if "://" not in text:
        text = f"http://{text}"

    host = urlparse(text).hostname or ""
    host = host.rstrip(".")
    if host.startswith("www."):
        host = host[4:]

    if not DOMAIN_PATTERN.match(host):
        return None
    return host
