"""
Search term derivation for the AngelList stage.

Precedence: company email domain > the person's own email domain > company
name. Domains flagged disposable or personal (gmail.com, mailinator.com...)
say nothing about the employer and are skipped.

Person records come from upstream stages with inconsistent key casing, so
lookups here are case-insensitive ("Company.Name" == "company.name").
"""

from typing import Any, Mapping, Optional

from ..common.url_utils import clean_domain


def lookup(record: Any, *keys: str) -> Any:
    """
    Walk nested mappings by key, ignoring key case.

    Returns None as soon as a level is missing or not a mapping.
    """
    current = record
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        if key in current:
            current = current[key]
            continue
        wanted = key.lower()
        for candidate, value in current.items():
            if isinstance(candidate, str) and candidate.lower() == wanted:
                current = value
                break
        else:
            return None
    return current


def _interesting(domain: Any) -> Optional[str]:
    """Cleaned domain name unless flagged disposable/personal."""
    if isinstance(domain, Mapping):
        if lookup(domain, "disposable") or lookup(domain, "personal"):
            return None
        return clean_domain(lookup(domain, "name"))
    if isinstance(domain, str):
        return clean_domain(domain)
    return None


def get_company_name(person: Mapping[str, Any]) -> Optional[str]:
    name = lookup(person, "company", "name")
    if not isinstance(name, str):
        return None
    name = name.strip()
    return name or None


def get_interesting_domain(person: Mapping[str, Any]) -> Optional[str]:
    """The person's email domain, if it is a work domain."""
    return _interesting(lookup(person, "domain"))


def get_company_domain(person: Mapping[str, Any]) -> Optional[str]:
    """The domain recorded on the person's company, if it is a work domain."""
    return _interesting(lookup(person, "company", "domain"))


def derive_domain_query(person: Mapping[str, Any]) -> Optional[str]:
    """Domain-based search term only (None when the query would be a name)."""
    return get_company_domain(person) or get_interesting_domain(person)


def derive_query(person: Mapping[str, Any]) -> Optional[str]:
    """
    Best available AngelList search term for `person`.

    Returns:
        Company domain, else email domain, else company name, else None.
        None means there is nothing to look up.
    """
    return derive_domain_query(person) or get_company_name(person)
