"""Company enrichment from the AngelList startup directory."""

from .credentials import CredentialPool
from .funding import FundingRound, FundingSummary, parse_funding_html, scrape_funding
from .matcher import is_match, names_match
from .merger import FIELD_MAPPINGS, merge_funding, merge_profile
from .query import derive_domain_query, derive_query
from .stage import AngelListStage, StageOptions, StageState, create_stage

__all__ = [
    "CredentialPool",
    "FundingRound",
    "FundingSummary",
    "parse_funding_html",
    "scrape_funding",
    "is_match",
    "names_match",
    "FIELD_MAPPINGS",
    "merge_funding",
    "merge_profile",
    "derive_domain_query",
    "derive_query",
    "AngelListStage",
    "StageOptions",
    "StageState",
    "create_stage",
]
