"""AngelList directory API client and payload schemas."""

from .client import AngelListClient, build_client, parse_profile
from .models import (
    OVER_LIMIT,
    ApiError,
    CompanyProfile,
    RateLimited,
    SearchOk,
    SearchOutcome,
    StartupSummary,
    Tag,
)

__all__ = [
    "AngelListClient",
    "build_client",
    "parse_profile",
    "OVER_LIMIT",
    "ApiError",
    "CompanyProfile",
    "RateLimited",
    "SearchOk",
    "SearchOutcome",
    "StartupSummary",
    "Tag",
]
