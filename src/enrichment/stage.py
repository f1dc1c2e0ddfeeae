"""
AngelList Enrichment Stage - find a person's company on AngelList.

Pipeline per person (one network call outstanding at a time):
    derive query -> search -> fetch startup -> validate match
      -> merge profile -> scrape funding page -> merge funding

Host contract:
- wait(person, context): True iff there is something to search for
- run(person, context, done): enriches in place, calls done(err) exactly once

Credential failover: a search answered with an error payload moves the shared
credential cursor forward. Only ``over_limit`` is retried (same query, next
credential), and a run never retries more than len(credentials) - 1 times.
"""

import inspect
import logging
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Tuple, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..common.errors import EnrichmentError, OtherAPIError, RateLimitError
from ..common.http_client import create_api_client, create_scraper_client
from ..config.settings import Credential, settings
from ..directory.client import AngelListClient, build_client, parse_profile
from ..directory.models import RateLimited, SearchOk, StartupSummary
from .credentials import CredentialPool
from .funding import scrape_funding
from .matcher import is_match
from .merger import DIRECTORY_KEY, deep_merge, merge_funding, merge_profile
from .query import derive_domain_query, derive_query, lookup

logger = logging.getLogger(__name__)


class StageState(str, Enum):
    """Steps of a single enrichment run."""
    IDLE = "idle"
    QUERY_DERIVED = "query_derived"
    SEARCHED = "searched"
    DETAIL_FETCHED = "detail_fetched"
    VALIDATED = "validated"
    MERGED = "merged"
    SKIPPED = "skipped"  # Candidate did not match
    FUNDING_SCRAPED = "funding_scraped"
    FUNDING_SKIPPED = "funding_skipped"  # No profile page URL
    DONE = "done"
    FAILED = "failed"


class StageOptions(BaseModel):
    """Options accepted by create_stage()."""
    client_id: Optional[str] = Field(default=None, alias="clientId")
    token: Optional[str] = None
    credentials: Optional[List[Credential]] = None
    headers: Optional[Dict[str, str]] = None  # Overrides for the scrape request
    api_url: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def build_pool(self) -> CredentialPool:
        if self.credentials:
            return CredentialPool(self.credentials, rotatable=True)
        if self.client_id and self.token:
            return CredentialPool([Credential(client_id=self.client_id, token=self.token)], rotatable=False)
        return CredentialPool([])

    @classmethod
    def from_settings(cls) -> "StageOptions":
        return cls(credentials=settings.credential_pool)


ClientFactory = Callable[[Optional[Credential], httpx.AsyncClient], AngelListClient]
DoneCallback = Callable[[Optional[BaseException]], Any]


class AngelListStage:
    """
    Enrichment stage shared by any number of concurrent runs.

    Runs share the credential pool and the HTTP clients; everything else is
    per run. Close with aclose() (or use as an async context manager).
    """

    def __init__(
        self,
        options: Optional[StageOptions] = None,
        client_factory: Optional[ClientFactory] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.options = options or StageOptions()
        self.pool = self.options.build_pool()
        self.headers = self.options.headers
        self.type_filter = settings.search_type_filter
        self._client_factory = client_factory or partial(build_client, api_url=self.options.api_url)
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._scrape_http: Optional[httpx.AsyncClient] = None

    # ----- Lifecycle -----

    async def _get_http(self) -> httpx.AsyncClient:
        """Get or create the API HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = create_api_client(transport=self._transport)
        return self._http

    async def _get_scrape_http(self) -> httpx.AsyncClient:
        """Get or create the profile page HTTP client."""
        if self._scrape_http is None or self._scrape_http.is_closed:
            self._scrape_http = create_scraper_client(transport=self._transport)
        return self._scrape_http

    async def aclose(self):
        """Close the HTTP clients."""
        for client in (self._http, self._scrape_http):
            if client and not client.is_closed:
                await client.aclose()
        self._http = None
        self._scrape_http = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    # ----- Host contract -----

    def wait(self, person: Mapping[str, Any], context: Optional[Mapping[str, Any]] = None) -> bool:
        """True iff a search term can be derived for `person`."""
        return derive_query(person) is not None

    async def run(
        self,
        person: MutableMapping[str, Any],
        context: Optional[MutableMapping[str, Any]],
        done: DoneCallback,
    ) -> None:
        """
        Enrich `person` and report through `done` exactly once.

        done(None) on success, no-op or no match; done(error) on failure.
        Cancellation is reported too: done(CancelledError), then re-raised.
        """
        trace = [StageState.IDLE]
        error: Optional[BaseException] = None
        try:
            await self._pipeline(person, context, trace)
        except EnrichmentError as e:
            logger.warning(f"AngelList enrichment failed: {e}")
            error = e
        except Exception as e:
            logger.error(f"Unexpected error in AngelList enrichment: {e}", exc_info=True)
            error = e
        except BaseException as e:
            # Cancellation; reported, then propagated
            error = e
            raise
        finally:
            self._transition(trace, StageState.FAILED if error is not None else StageState.DONE)
            result = done(error)
            if inspect.isawaitable(result):
                await result

    # ----- Pipeline -----

    @staticmethod
    def _transition(trace: List[StageState], state: StageState) -> None:
        logger.debug(f"AngelList stage {trace[-1].value} -> {state.value}")
        trace.append(state)

    async def enrich(
        self,
        person: MutableMapping[str, Any],
        context: Optional[MutableMapping[str, Any]] = None,
    ) -> StageState:
        """
        Run the pipeline for one person.

        Returns:
            The last state reached before DONE: IDLE (no query), SEARCHED (no
            candidates), SKIPPED (no match), FUNDING_SKIPPED or FUNDING_SCRAPED

        Raises:
            EnrichmentError: Any failure; the person may be partially merged
                only if the funding scrape failed after the profile merge
        """
        trace = [StageState.IDLE]
        await self._pipeline(person, context, trace)
        return trace[-1]

    async def _pipeline(
        self,
        person: MutableMapping[str, Any],
        context: Optional[MutableMapping[str, Any]],
        trace: List[StageState],
    ) -> None:
        if context is None:
            context = {}

        query = derive_query(person)
        if not query:
            return
        self._transition(trace, StageState.QUERY_DERIVED)
        logger.debug(f"Querying AngelList with query {query}")

        results, client = await self._search(query)
        self._transition(trace, StageState.SEARCHED)
        if not results:
            logger.debug(f"No AngelList results found for {query}")
            return

        candidate = results[0]
        raw = await client.get_startup(candidate.id)
        profile = parse_profile(raw)
        self._transition(trace, StageState.DETAIL_FETCHED)

        is_domain_query = query == derive_domain_query(person)
        matched = is_match(profile, query, is_domain_query)
        self._transition(trace, StageState.VALIDATED)
        if not matched:
            logger.debug(
                f"Skipping AngelList company profile for query {query} with name: {profile.name}"
            )
            self._transition(trace, StageState.SKIPPED)
            return

        deep_merge(context, {DIRECTORY_KEY: {"company": {"api": raw}}})
        merge_profile(profile, person)
        self._transition(trace, StageState.MERGED)
        logger.debug(f"Got AngelList company profile for query {query}")

        # Read back from the person: a URL recorded by an earlier stage is
        # scraped even when this profile has none.
        profile_url = lookup(person, "company", DIRECTORY_KEY, "url")
        if not profile_url:
            self._transition(trace, StageState.FUNDING_SKIPPED)
            return

        summary = await scrape_funding(
            profile_url,
            self.headers,
            client=await self._get_scrape_http(),
        )
        self._transition(trace, StageState.FUNDING_SCRAPED)
        if summary is None:
            return

        deep_merge(context, {DIRECTORY_KEY: {"company": {"scrape": summary.to_dict()}}})
        merge_funding(summary, person)
        logger.info(
            f"Enriched {profile.name} from AngelList: {len(summary.rounds)} rounds, "
            f"total funding {summary.total}"
        )

    async def _search(self, query: str) -> Tuple[List[StartupSummary], AngelListClient]:
        """
        Search with credential failover.

        Returns:
            (candidates, client that produced them)

        Raises:
            RateLimitError: Every credential this run may use was over its limit
            OtherAPIError: Any other error payload (never retried)
        """
        http = await self._get_http()
        index, credential = self.pool.current()
        client = self._client_factory(credential, http)
        retries = 0

        while True:
            outcome = await client.search(query, self.type_filter)
            if isinstance(outcome, SearchOk):
                return outcome.results, client

            logger.debug(f"AngelList returned error {outcome.reason} for query {query}")
            if isinstance(outcome, RateLimited):
                error: EnrichmentError = RateLimitError(outcome.reason, outcome.message)
            else:
                error = OtherAPIError(outcome.reason, outcome.message)

            if not self.pool.rotatable or retries >= len(self.pool) - 1:
                raise error

            retries += 1
            index, credential = await self.pool.rotate(index)
            client = self._client_factory(credential, http)

            if not isinstance(outcome, RateLimited):
                raise error
            logger.info(f"Retrying AngelList search for {query} with credential {index}")


def create_stage(
    options: Union[StageOptions, Mapping[str, Any], None] = None,
    **kwargs,
) -> AngelListStage:
    """
    Build an AngelList stage.

    Args:
        options: {"clientId", "token"} or {"credentials": [...]} plus optional
            "headers"; defaults to the configured settings
        **kwargs: Passed to AngelListStage (client_factory, transport)
    """
    if options is None:
        stage_options = StageOptions.from_settings()
    elif isinstance(options, StageOptions):
        stage_options = options
    else:
        stage_options = StageOptions.model_validate(dict(options))
    return AngelListStage(stage_options, **kwargs)
