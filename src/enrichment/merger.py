"""
Copy AngelList profile and funding data onto ``person["company"]``.

FIELD_MAPPINGS is the single source of truth for which profile fields land
where. A mapping is applied only when its accessor returns a present value,
so a profile without e.g. a description never clears one an earlier stage
already wrote.
"""

from typing import Any, Callable, Dict, MutableMapping, Optional, Tuple

from ..common.url_utils import is_valid_url
from ..directory.models import CompanyProfile
from .funding import FundingSummary

# Namespace under person.company for AngelList-specific fields
DIRECTORY_KEY = "angelList"


def _url(value: Optional[str]) -> Optional[str]:
    """Drop placeholder URLs ("n/a", "unknown") some payloads carry."""
    return value if is_valid_url(value) else None


def _first_location(profile: CompanyProfile) -> Optional[str]:
    if not profile.locations:
        return None
    return profile.locations[0].display_name


FieldMapping = Tuple[Tuple[str, ...], Callable[[CompanyProfile], Any]]

FIELD_MAPPINGS: Tuple[FieldMapping, ...] = (
    (("name",), lambda p: p.name),
    (("image_url",), lambda p: _url(p.logo_url)),
    (("description",), lambda p: p.product_desc),
    (("concept",), lambda p: p.high_concept),
    ((DIRECTORY_KEY, "followers"), lambda p: p.follower_count),
    ((DIRECTORY_KEY, "url"), lambda p: _url(p.angellist_url)),
    (("website",), lambda p: _url(p.company_url)),
    (("crunchbase", "url"), lambda p: _url(p.crunchbase_url)),
    (("twitter", "url"), lambda p: _url(p.twitter_url)),
    (("blog_url",), lambda p: _url(p.blog_url)),
    (("location",), _first_location),
)


def _is_present(value: Any) -> bool:
    """None and empty strings/containers count as absent."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return False
    return True


def _set_path(target: MutableMapping[str, Any], path: Tuple[str, ...], value: Any) -> None:
    node = target
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, MutableMapping):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value


def build_patch(profile: CompanyProfile) -> Dict[str, Any]:
    """Project a profile through FIELD_MAPPINGS into a nested patch dict."""
    patch: Dict[str, Any] = {}
    for path, accessor in FIELD_MAPPINGS:
        value = accessor(profile)
        if _is_present(value):
            _set_path(patch, path, value)
    return patch


def deep_merge(target: MutableMapping[str, Any], patch: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Merge `patch` into `target` in place.

    Nested mappings merge key by key; lists and scalars overwrite.
    """
    for key, value in patch.items():
        existing = target.get(key)
        if isinstance(value, MutableMapping) and isinstance(existing, MutableMapping):
            deep_merge(existing, value)
        elif isinstance(value, MutableMapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


def _company(person: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    company = person.get("company")
    if not isinstance(company, MutableMapping):
        company = {}
        person["company"] = company
    return company


def merge_profile(profile: CompanyProfile, person: MutableMapping[str, Any]) -> None:
    """Copy the mapped profile fields (and market tags) onto person["company"]."""
    company = _company(person)
    deep_merge(company, build_patch(profile))

    if profile.markets:
        names = [m.display_name for m in profile.markets if m.display_name]
        company["tags"] = ", ".join(names)


def merge_funding(summary: FundingSummary, person: MutableMapping[str, Any]) -> None:
    """Fold a scraped funding summary into person["company"]."""
    company = _company(person)
    if summary.total is not None:
        company["funding"] = summary.total
    if summary.rounds is not None:
        directory = company.get(DIRECTORY_KEY)
        if not isinstance(directory, MutableMapping):
            directory = {}
            company[DIRECTORY_KEY] = directory
        directory["funding_rounds"] = [
            {"type": r.type, "amount": r.amount} for r in summary.rounds
        ]
