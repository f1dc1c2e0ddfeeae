"""
Pytest fixtures for test infrastructure.

This module is automatically loaded by pytest and provides shared fixtures.
For fake collaborators (directory clients, HTTP transports), see test_helpers.py.
"""

import pytest

from tests.test_helpers import SEGMENT_LOGO


# =============================================================================
# Shared fixtures
# =============================================================================
@pytest.fixture
def segment_profile():
    """Raw AngelList startups/{id} payload for Segment."""
    return {
        "id": 58552,
        "name": "Segment",
        "logo_url": SEGMENT_LOGO,
        "product_desc": "Segment collects customer data and sends it anywhere.",
        "high_concept": "Customer data infrastructure",
        "angellist_url": "https://angel.co/segment-io",
        "follower_count": 1432,
        "company_url": "https://segment.com",
        "crunchbase_url": "http://www.crunchbase.com/company/segment-io",
        "twitter_url": "https://twitter.com/segment",
        "blog_url": "https://segment.com/blog",
        "markets": [
            {"id": 10, "name": "analytics", "display_name": "Analytics"},
            {"id": 11, "name": "developer_apis", "display_name": "Developer APIs"},
        ],
        "locations": [
            {"id": 1692, "name": "san_francisco", "display_name": "San Francisco"},
        ],
        "quality": 9,
    }


@pytest.fixture
def funding_html():
    """Profile page listing two funding rounds."""
    return """
    <html><body>
      <div class="past_financing">
        <div class="startup_round">
          <div class="date">Oct 2011</div>
          <div class="type"> Seed </div>
          <div class="raised">
            $80,000
          </div>
        </div>
        <div class="startup_round">
          <div class="date">May 2012</div>
          <div class="type">Series A</div>
          <div class="raised">$500,000</div>
        </div>
      </div>
    </body></html>
    """


@pytest.fixture
def no_funding_html():
    """Profile page without any funding rounds."""
    return "<html><body><div class='profile'>Stealth startup</div></body></html>"
