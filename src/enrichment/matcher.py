"""
Match validation: is this AngelList startup the company we searched for?

AngelList search is fuzzy and always returns *something*, so merging the first
hit blindly would attach strangers' funding data to people. Two policies:

- Domain query + profile website: the cleaned domains must be identical.
- Otherwise: the normalized names must be near-identical
  (difflib ratio >= NAME_MATCH_THRESHOLD).
"""

import logging
import re
from difflib import SequenceMatcher
from typing import Optional

from ..common.url_utils import clean_domain
from ..directory.models import CompanyProfile

logger = logging.getLogger(__name__)

# Minimum SequenceMatcher ratio between normalized names
NAME_MATCH_THRESHOLD = 0.8

LEGAL_SUFFIX_PATTERN = re.compile(
    r'[,\s]*\b(inc|incorporated|llc|ltd|limited|corp|corporation|co|company|gmbh|plc|lp|sa|ag)\.?$'
)

# "segment.io" style names typed into the company field
TLD_SUFFIX_PATTERN = re.compile(r'\.(com|io|co|net|org|ai|me|ly|app)$')


def normalize_company_name(name: Optional[str]) -> str:
    """
    Canonical form for name comparison.

    Examples:
        >>> normalize_company_name("Machine Zone, Inc.")
        "machinezone"
        >>> normalize_company_name("segment.io")
        "segment"
    """
    if not name:
        return ""

    text = name.lower().strip()
    text = TLD_SUFFIX_PATTERN.sub("", text)
    # Strip repeatedly for "Foo Holdings Co., Ltd."
    previous = None
    while previous != text:
        previous = text
        text = LEGAL_SUFFIX_PATTERN.sub("", text).strip()
    return re.sub(r'[^a-z0-9]', '', text)


def names_match(candidate: Optional[str], query: Optional[str]) -> bool:
    """Check if two company names refer to the same company."""
    norm_candidate = normalize_company_name(candidate)
    norm_query = normalize_company_name(query)
    if not norm_candidate or not norm_query:
        return False

    if norm_candidate == norm_query:
        return True

    ratio = SequenceMatcher(None, norm_candidate, norm_query).ratio()
    return ratio >= NAME_MATCH_THRESHOLD


def is_match(profile: CompanyProfile, query: str, is_domain_query: bool = False) -> bool:
    """
    Decide whether `profile` describes the company behind `query`.

    Args:
        profile: Startup profile fetched for the first search hit
        query: The search term that produced it
        is_domain_query: True when `query` came from an email/company domain

    Returns:
        True if the profile should be merged into the person
    """
    if is_domain_query and profile.company_url:
        profile_domain = clean_domain(profile.company_url)
        query_domain = clean_domain(query)
        matched = profile_domain is not None and profile_domain == query_domain
        if not matched:
            logger.debug(f"Domain mismatch: {profile_domain} != {query_domain}")
        return matched

    if not profile.name:
        return False
    return names_match(profile.name, query)
