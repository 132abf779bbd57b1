"""
Splits funding finder listing pages into programme entries.
"""

import logging
from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from src.core.constants import (
    PROGRAMME_ENTRY_SELECTOR,
    SITE_BASE_URL,
    TITLE_BAR_SELECTOR,
)


logger = logging.getLogger(__name__)


def split_programmes(page_html: str) -> List[str]:
    """
    Get the raw HTML of every programme entry on a listing page.

    Args:
        page_html: Full listing page HTML

    Returns:
        Entry fragments in document order
    """
    soup = BeautifulSoup(page_html, "html.parser")
    entries = [str(entry) for entry in soup.select(PROGRAMME_ENTRY_SELECTOR)]
    logger.debug(f"Found {len(entries)} programme entries")
    return entries


def extract_programme_links(page_html: str, base_url: str = SITE_BASE_URL) -> List[str]:
    """
    Get the absolute URL of every programme on a listing page.

    Args:
        page_html: Full listing page HTML
        base_url: Site root to resolve relative links against

    Returns:
        Programme URLs in document order (duplicates kept)
    """
    soup = BeautifulSoup(page_html, "html.parser")

    links: List[str] = []
    for a in soup.select(f"{TITLE_BAR_SELECTOR} a[href]"):
        links.append(urljoin(base_url, a["href"].strip()))

    logger.debug(f"Found {len(links)} programme links")
    return links
