"""
Tests for the AngelList funding round scraper.

Run with: pytest tests/test_funding.py -v
"""

import httpx
import pytest

from src.common.errors import BadStatusError, FetchError, TransportError
from src.common.http_client import DEFAULT_SCRAPE_HEADERS
from src.enrichment.funding import (
    FundingRound,
    FundingSummary,
    parse_amount,
    parse_funding_html,
    scrape_funding,
)
from tests.test_helpers import page_transport

PROFILE_URL = "https://angel.co/segment-io"


class TestParseAmount:
    """Tests for currency label parsing."""

    def test_currency_formatted(self):
        assert parse_amount("$500,000") == 500000

    def test_plain_number(self):
        assert parse_amount("80000") == 80000

    def test_unparsable_counts_as_zero(self):
        assert parse_amount("Undisclosed") == 0
        assert parse_amount("") == 0
        assert parse_amount(None) == 0

    def test_partial_numbers_count_as_zero(self):
        assert parse_amount("$1.5M") == 0
        assert parse_amount("$2B") == 0
        assert parse_amount("$1,200,000 USD") == 0

    def test_surrounding_whitespace(self):
        assert parse_amount("  $80,000 ") == 80000


class TestParseFundingHtml:
    """Tests for funding round extraction."""

    def test_total_and_order(self, funding_html):
        summary = parse_funding_html(funding_html)
        assert summary.total == 580000
        assert summary.rounds[0].type == "Seed"
        assert summary.rounds == [
            FundingRound(type="Seed", amount=80000),
            FundingRound(type="Series A", amount=500000),
        ]

    def test_zero_rounds_is_none(self, no_funding_html):
        assert parse_funding_html(no_funding_html) is None
        assert parse_funding_html("") is None

    def test_same_document_same_summary(self, funding_html):
        assert parse_funding_html(funding_html) == parse_funding_html(funding_html)

    def test_round_with_bad_amount_keeps_round(self):
        html = """
        <div class="startup_round"><div class="type">Seed</div><div class="raised">Undisclosed</div></div>
        <div class="startup_round"><div class="type">Series A</div><div class="raised">$1,000</div></div>
        """
        summary = parse_funding_html(html)
        assert summary.total == 1000
        assert [r.type for r in summary.rounds] == ["Seed", "Series A"]
        assert summary.rounds[0].amount == 0

    def test_abbreviated_amount_does_not_inflate_total(self):
        html = """
        <div class="startup_round"><div class="type">Seed</div><div class="raised">$80,000</div></div>
        <div class="startup_round"><div class="type">Series A</div><div class="raised">$1.5M</div></div>
        """
        summary = parse_funding_html(html)
        assert summary.total == 80000
        assert summary.rounds[1] == FundingRound(type="Series A", amount=0)

    def test_to_dict(self, funding_html):
        data = parse_funding_html(funding_html).to_dict()
        assert data["total"] == 580000
        assert data["rounds"][1] == {"type": "Series A", "amount": 500000}


class TestScrapeFunding:
    """Tests for the profile page fetch."""

    @pytest.mark.asyncio
    async def test_scrape_success(self, funding_html):
        transport = page_transport({PROFILE_URL: (200, funding_html)})
        async with httpx.AsyncClient(transport=transport) as client:
            summary = await scrape_funding(PROFILE_URL, None, client=client)

        assert isinstance(summary, FundingSummary)
        assert summary.total == 580000

    @pytest.mark.asyncio
    async def test_scrape_no_rounds(self, no_funding_html):
        transport = page_transport({PROFILE_URL: (200, no_funding_html)})
        async with httpx.AsyncClient(transport=transport) as client:
            assert await scrape_funding(PROFILE_URL, client=client) is None

    @pytest.mark.asyncio
    async def test_default_disguise_headers(self, funding_html):
        seen = []
        transport = page_transport({PROFILE_URL: (200, funding_html)}, seen)
        async with httpx.AsyncClient(transport=transport) as client:
            await scrape_funding(PROFILE_URL, client=client)

        headers = seen[0].headers
        for name, value in DEFAULT_SCRAPE_HEADERS.items():
            assert headers[name] == value

    @pytest.mark.asyncio
    async def test_caller_headers_win_per_header(self, funding_html):
        seen = []
        transport = page_transport({PROFILE_URL: (200, funding_html)}, seen)
        async with httpx.AsyncClient(transport=transport) as client:
            await scrape_funding(
                PROFILE_URL,
                {"user-agent": "CustomAgent/2.0", "Accept-Language": "de-DE"},
                client=client,
            )

        headers = seen[0].headers
        assert headers["User-Agent"] == "CustomAgent/2.0"
        assert headers["Accept-Language"] == "de-DE"
        assert headers["Cache-Control"] == DEFAULT_SCRAPE_HEADERS["Cache-Control"]
        assert headers["Accept"] == DEFAULT_SCRAPE_HEADERS["Accept"]

    @pytest.mark.asyncio
    async def test_bad_status(self):
        transport = page_transport({PROFILE_URL: (503, "busy")})
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(BadStatusError) as exc_info:
                await scrape_funding(PROFILE_URL, client=client)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_redirect_status_is_not_200(self):
        transport = page_transport({PROFILE_URL: (301, "")})
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(BadStatusError):
                await scrape_funding(PROFILE_URL, client=client)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(FetchError) as exc_info:
                await scrape_funding(PROFILE_URL, client=client)
        assert isinstance(exc_info.value, TransportError)
