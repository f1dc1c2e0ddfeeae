"""
Command line runner for the AngelList enrichment stage.

Credentials come from the environment / .env (ANGELLIST_CLIENT_ID +
ANGELLIST_TOKEN, or ANGELLIST_CREDENTIALS as a JSON list).

USAGE:
    # Look up by company name
    python -m src.cli --company-name "Segment"

    # Look up by work email domain, print the raw payloads too
    python -m src.cli --domain segment.com --show-context

    # Enrich a person record from a JSON file
    python -m src.cli --json person.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config.settings import settings
from .enrichment.stage import create_stage

logger = logging.getLogger(__name__)


def build_person(args: argparse.Namespace) -> Dict[str, Any]:
    """Assemble a person record from CLI arguments."""
    person: Dict[str, Any] = {}
    if args.json:
        person = json.loads(Path(args.json).read_text(encoding="utf-8"))

    company = person.setdefault("company", {})
    if args.company_name:
        company["name"] = args.company_name
    if args.company_domain:
        company["domain"] = args.company_domain
    if args.domain:
        person["domain"] = {"name": args.domain, "disposable": False, "personal": False}
    if not company:
        del person["company"]
    return person


async def run_enrichment_cli(person: Dict[str, Any], show_context: bool = False) -> int:
    """
    Enrich one person and print the result.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    context: Dict[str, Any] = {}
    errors: List[Optional[BaseException]] = []

    async with create_stage() as stage:
        if not stage.wait(person, context):
            print("Nothing to search for: need a company name or a work domain.")
            return 1
        await stage.run(person, context, errors.append)

    error = errors[0] if errors else None
    if error is not None:
        print(f"\n=== Enrichment failed ===\n{error}")
        return 1

    print("\n=== Enriched person ===")
    print(json.dumps(person, indent=2, default=str))
    if show_context:
        print("\n=== Context ===")
        print(json.dumps(context, indent=2, default=str))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Enrich a person with AngelList company data")
    parser.add_argument("--company-name", help="Company name to search for")
    parser.add_argument("--company-domain", help="Domain recorded on the person's company")
    parser.add_argument("--domain", help="The person's work email domain")
    parser.add_argument("--json", help="Path to a JSON person record")
    parser.add_argument("--show-context", action="store_true", help="Print the raw API/scrape payloads")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    person = build_person(args)
    return asyncio.run(run_enrichment_cli(person, show_context=args.show_context))


if __name__ == "__main__":
    sys.exit(main())
