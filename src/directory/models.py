"""
Pydantic schemas for AngelList directory payloads.

Only the fields the enrichment stage reads are declared; everything else in
the payload is kept as extra data so the raw profile can be attached to the
run context untouched.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

OVER_LIMIT = "over_limit"


class StartupSummary(BaseModel):
    """One candidate returned by the search endpoint."""
    id: int
    name: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class Tag(BaseModel):
    """Market or location tag attached to a startup."""
    id: Optional[int] = None
    name: Optional[str] = None
    display_name: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class CompanyProfile(BaseModel):
    """Detailed startup record from ``startups/{id}``."""
    id: Optional[int] = None
    name: Optional[str] = None
    logo_url: Optional[str] = None
    product_desc: Optional[str] = None
    high_concept: Optional[str] = None
    angellist_url: Optional[str] = None
    follower_count: Optional[int] = None
    company_url: Optional[str] = None
    crunchbase_url: Optional[str] = None
    twitter_url: Optional[str] = None
    blog_url: Optional[str] = None
    markets: List[Tag] = Field(default_factory=list)
    locations: List[Tag] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("markets", "locations", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """AngelList sends null instead of [] for untagged startups."""
        return v if v is not None else []


# ----- Tagged search outcome -----

@dataclass(frozen=True)
class SearchOk:
    """Search succeeded; results may be empty."""
    results: List[StartupSummary] = field(default_factory=list)


@dataclass(frozen=True)
class RateLimited:
    """Search rejected because the active credential is over its quota."""
    reason: str = OVER_LIMIT
    message: Optional[str] = None


@dataclass(frozen=True)
class ApiError:
    """Search rejected with any other structured error payload."""
    reason: str
    message: Optional[str] = None


SearchOutcome = Union[SearchOk, RateLimited, ApiError]
