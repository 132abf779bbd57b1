"""
Shared fixtures: listing markup builders and a network-free page fetcher.
"""

import pytest
import requests


ENTRY_TEMPLATE = """
<div class="programmeListItem">
  <div class="programmeListTitleBar">
    <h3>{link}</h3>
    <p class="fullDate">{deadline}</p>
  </div>
  <div class="infoDetailsLeft"><p>{intro}</p><p>More details on the programme page.</p></div>
  <dl class="taxonomy-keyFacts">{facts}</dl>
</div>
"""


def build_entry(
    slug="awards-for-all-england",
    title="Awards for All England",
    deadline="Application Deadline: 31 December 2030",
    intro="Small grants for community groups & charities.",
    facts=None,
    href=None,
):
    if facts is None:
        facts = (
            "<dt>Funding Size:</dt><dd>&#xA3;300 - &#xA3;10,000</dd>"
            "<dt>Total Available:</dt><dd>&#xA3;40 million</dd>"
            "<dt>Organisation Type:</dt>"
            "<dd>Voluntary or community organisation<br>School<br>Statutory body<br></dd>"
            "<dt>Area:</dt><dd>England</dd>"
        )
    if href is None:
        href = f"/funding/programmes/{slug}"
    link = f'<a href=" {href} ">{title}</a>' if href else title
    return ENTRY_TEMPLATE.format(link=link, deadline=deadline, intro=intro, facts=facts)


def build_page(*entries):
    return (
        "<html><body><h1>Funding finder</h1><div class='programmeList'>"
        + "".join(entries)
        + "</div></body></html>"
    )


class FakeFetcher:
    """Serves canned listing pages; pages listed in `failing` raise ConnectionError."""

    def __init__(self, pages=None, failing=()):
        self.pages = pages or {}
        self.failing = set(failing)
        self.requested = []

    def fetch_page(self, url_base, page):
        self.requested.append((url_base, page))
        if (url_base, page) in self.failing:
            raise requests.ConnectionError(f"Connection refused: {url_base}{page}")
        return self.pages.get((url_base, page), "<html><body></body></html>")


@pytest.fixture
def make_entry():
    return build_entry


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def fake_fetcher_cls():
    return FakeFetcher


@pytest.fixture
def listing_urls():
    from src.core.models import Language

    return {
        Language.EN: "https://example.test/funding-finder?cpage=",
        Language.CY: "https://example.test/welsh/funding-finder?cpage=",
    }
