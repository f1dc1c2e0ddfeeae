"""
Funding Round Scraper - AngelList public profile pages.

The API does not expose funding, but each startup page lists its rounds as:

    <div class="startup_round">
        <div class="type">Seed</div>
        <div class="raised">$80,000</div>
    </div>

scrape_funding() fetches the page with browser-like headers and hands the
body to parse_funding_html(), which is a pure function of the document.
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import List, Mapping, Optional

import httpx
from bs4 import BeautifulSoup

from ..common.errors import BadStatusError, FetchError
from ..common.http_client import create_scraper_client, with_default_headers

logger = logging.getLogger(__name__)

ROUND_SELECTOR = ".startup_round"
ROUND_TYPE_SELECTOR = ".type"
ROUND_RAISED_SELECTOR = ".raised"

WHOLE_AMOUNT = re.compile(r'\s*(\d+)\s*')


@dataclass(frozen=True)
class FundingRound:
    """One funding round as listed on the profile page."""
    type: str
    amount: int


@dataclass(frozen=True)
class FundingSummary:
    """All rounds found on a page, in document order, plus their sum."""
    total: int
    rounds: List[FundingRound] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def parse_amount(raw: Optional[str]) -> int:
    """
    Normalize a currency label such as "$1,500,000" to an integer.

    "$" and "," are stripped and what is left must be a plain integer. Any
    other label ("Undisclosed", "$1.5M", "$2B") never raises: it counts as 0
    so a bad label cannot inflate the total.

    Examples:
        >>> parse_amount("$500,000")
        500000
        >>> parse_amount("$1.5M")
        0
    """
    if not raw:
        return 0
    cleaned = raw.replace("$", "").replace(",", "")
    m = WHOLE_AMOUNT.fullmatch(cleaned)
    if not m:
        logger.warning(f"Unparsable funding amount {raw!r}, counting as 0")
        return 0
    return int(m.group(1))


def parse_funding_html(html: str) -> Optional[FundingSummary]:
    """
    Extract funding rounds from a profile page.

    Returns:
        FundingSummary, or None when the page lists no rounds
    """
    soup = BeautifulSoup(html or "", "lxml")
    rounds: List[FundingRound] = []

    for round_el in soup.select(ROUND_SELECTOR):
        type_el = round_el.select_one(ROUND_TYPE_SELECTOR)
        raised_el = round_el.select_one(ROUND_RAISED_SELECTOR)
        round_type = type_el.get_text(strip=True) if type_el else ""
        raised = raised_el.get_text(strip=True) if raised_el else ""
        rounds.append(FundingRound(type=round_type, amount=parse_amount(raised)))

    if not rounds:
        return None

    return FundingSummary(total=sum(r.amount for r in rounds), rounds=rounds)


async def scrape_funding(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[FundingSummary]:
    """
    Fetch an AngelList profile page and extract its funding rounds.

    Args:
        url: Profile page URL (company.angelList.url)
        headers: Caller headers; missing ones default to a browser fingerprint
        client: Optional shared client (a scraper client is created otherwise)

    Returns:
        FundingSummary, or None if the page lists no rounds

    Raises:
        FetchError: Transport failure or no response
        BadStatusError: Any status other than 200
    """
    request_headers = with_default_headers(headers)

    owns_client = client is None
    if owns_client:
        client = create_scraper_client()

    try:
        try:
            response = await client.get(url, headers=request_headers)
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if response is None:
        raise FetchError(f"No response received for {url}")
    if response.status_code != 200:
        raise BadStatusError(response.status_code, url)

    summary = parse_funding_html(response.text)
    if summary is None:
        logger.debug(f"No funding rounds listed on {url}")
    else:
        logger.debug(f"Found {len(summary.rounds)} funding rounds on {url} (total {summary.total})")
    return summary
