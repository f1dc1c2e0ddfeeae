"""
Error taxonomy shared by the directory client and the enrichment stage.

Every failure that terminates a run is an EnrichmentError subclass and is
handed to the stage's completion callback. "No query" and "no match" are not
errors: they complete the run normally.
"""

from typing import Optional


class EnrichmentError(Exception):
    """Base class for failures that abort an enrichment run."""
    pass


class TransportError(EnrichmentError):
    """Network, DNS or timeout failure talking to AngelList."""
    pass


class FetchError(TransportError):
    """The profile page fetch failed or returned no response."""
    pass


class ParseError(EnrichmentError):
    """A directory response was not valid JSON or had an unexpected shape."""
    pass


class BadStatusError(EnrichmentError):
    """The profile page returned a status other than 200."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f"AngelList bad status code {status_code}")


class DirectoryAPIError(EnrichmentError):
    """AngelList answered with a structured error payload."""

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"AngelList API error {kind}{detail}")


class RateLimitError(DirectoryAPIError):
    """Error payload for an exhausted per-credential quota (``over_limit``)."""
    pass


class OtherAPIError(DirectoryAPIError):
    """Any other error payload; rotating credentials does not help."""
    pass
