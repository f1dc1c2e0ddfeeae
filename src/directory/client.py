"""
AngelList Directory API Client.

Thin async client over the two AngelList v1 endpoints the enrichment stage
needs:
- GET /search?query=...&type=Startup  -> list of candidate startups
- GET /startups/{id}                  -> full startup profile

A client is bound to exactly one credential. Rotating credentials means
building a new client (see build_client); the underlying httpx.AsyncClient is
owned by the caller and shared between clients.

AngelList reports quota and auth problems as a JSON object with an "error"
key instead of the usual payload. search() turns that into an explicit
SearchOk / RateLimited / ApiError outcome so callers never inspect JSON shape.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..common.errors import ParseError, TransportError, OtherAPIError, RateLimitError
from ..config.settings import Credential, settings
from .models import (
    OVER_LIMIT,
    ApiError,
    CompanyProfile,
    RateLimited,
    SearchOk,
    SearchOutcome,
    StartupSummary,
)

logger = logging.getLogger(__name__)


class AngelListClient:
    """
    AngelList API client bound to a single credential.

    Usage:
        async with create_api_client() as http:
            client = AngelListClient(credential, http)
            outcome = await client.search("segment.io")
    """

    def __init__(
        self,
        credential: Optional[Credential],
        http: httpx.AsyncClient,
        api_url: Optional[str] = None,
    ):
        self.credential = credential
        self.http = http
        self.api_url = (api_url or settings.angellist_api_url).rstrip("/")

    @property
    def client_id(self) -> Optional[str]:
        return self.credential.client_id if self.credential else None

    def _auth_params(self) -> Dict[str, str]:
        if self.credential is None:
            return {}
        return {"access_token": self.credential.token}

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET an API path and decode the JSON body.

        Raises:
            TransportError: On network errors/timeouts, or a non-JSON error status
            ParseError: On a 2xx response whose body is not valid JSON
        """
        url = f"{self.api_url}/{path.lstrip('/')}"
        query = dict(params or {})
        query.update(self._auth_params())

        try:
            response = await self.http.get(url, params=query)
        except httpx.TimeoutException as e:
            raise TransportError(f"AngelList API timeout for {path}: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"AngelList API request failed for {path}: {e}") from e

        # Quota exhaustion without an error body
        if response.status_code == 429 and not response.content:
            return {"error": OVER_LIMIT, "message": "HTTP 429"}

        try:
            return json.loads(response.text) if response.text.strip() else None
        except ValueError as e:
            if response.status_code >= 400:
                raise TransportError(
                    f"AngelList API status {response.status_code} for {path}"
                ) from e
            raise ParseError(f"Invalid JSON from AngelList {path}: {e}") from e

    async def search(self, query: str, type_filter: Optional[str] = None) -> SearchOutcome:
        """
        Search the directory for startups matching `query`.

        Args:
            query: Company name or domain
            type_filter: Result type filter (default: settings.search_type_filter)

        Returns:
            SearchOk with candidates (possibly empty), RateLimited, or ApiError
        """
        body = await self._get_json(
            "search",
            {"query": query, "type": type_filter or settings.search_type_filter},
        )

        if not body:
            return SearchOk(results=[])

        if isinstance(body, dict) and body.get("error"):
            kind = str(body.get("error"))
            message = body.get("message") or body.get("error_description")
            if kind == OVER_LIMIT:
                return RateLimited(reason=kind, message=message)
            return ApiError(reason=kind, message=message)

        if not isinstance(body, list):
            raise ParseError(f"Unexpected search payload type {type(body).__name__}")

        try:
            results = [StartupSummary.model_validate(item) for item in body]
        except ValidationError as e:
            raise ParseError(f"Malformed search result: {e}") from e
        return SearchOk(results=results)

    async def get_startup(self, startup_id: int) -> Dict[str, Any]:
        """
        Fetch the raw profile document for a startup id.

        Raises:
            RateLimitError / OtherAPIError: On an error payload
            ParseError: If the body is not a JSON object
        """
        body = await self._get_json(f"startups/{startup_id}")

        if not isinstance(body, dict):
            raise ParseError(f"Unexpected startup payload for id {startup_id}")

        if body.get("error"):
            kind = str(body.get("error"))
            message = body.get("message")
            if kind == OVER_LIMIT:
                raise RateLimitError(kind, message)
            raise OtherAPIError(kind, message)

        return body


def parse_profile(raw: Dict[str, Any]) -> CompanyProfile:
    """Validate a raw startup document into a CompanyProfile."""
    try:
        return CompanyProfile.model_validate(raw)
    except ValidationError as e:
        raise ParseError(f"Malformed startup profile: {e}") from e


def build_client(
    credential: Optional[Credential],
    http: httpx.AsyncClient,
    api_url: Optional[str] = None,
) -> AngelListClient:
    """Default client factory: one AngelListClient per credential."""
    return AngelListClient(credential, http, api_url=api_url)
