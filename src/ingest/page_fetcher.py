"""
HTTP fetching for funding finder listing pages.

Requests are made one at a time with a randomized pause between them, and are
never retried: a failed page is reported to the caller and skipped.
"""

import time
import random
import logging
from typing import Optional, Tuple

import certifi
import requests
import urllib3

from src.core.constants import (
    DEFAULT_HEADERS,
    RATE_LIMIT_DELAY_MAX,
    RATE_LIMIT_DELAY_MIN,
    REQUEST_TIMEOUT,
)


logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Fetches listing pages by index.

    Usage:
        fetcher = PageFetcher()
        html = fetcher.fetch_page(LISTING_URL_EN, 0)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        verify_ssl: bool = False,
        delay_range: Optional[Tuple[float, float]] = (RATE_LIMIT_DELAY_MIN, RATE_LIMIT_DELAY_MAX),
        timeout: float = REQUEST_TIMEOUT,
    ):
        """
        Initialize fetcher.

        Args:
            session: Optional requests.Session for connection pooling
            verify_ssl: Verify certificates against the certifi bundle. The
                source site is served from an IP address, so this is off by default.
            delay_range: (min, max) seconds to wait between requests, None to disable
            timeout: Request timeout in seconds
        """
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.verify = certifi.where() if verify_ssl else False
        self.delay_range = delay_range
        self.timeout = timeout
        self._last_request_at: Optional[float] = None

        if not verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def fetch_page(self, url_base: str, page: int) -> str:
        """
        Fetch one listing page.

        Args:
            url_base: Listing URL template (page index is appended)
            page: Zero-based page index

        Returns:
            HTML string

        Raises:
            requests.RequestException: If the request fails
        """
        return self.get(f"{url_base}{page}")

    def get(self, url: str) -> str:
        """
        Fetch URL and return HTML.

        Raises:
            requests.RequestException: If the request fails
        """
        self._wait()
        logger.debug(f"GET {url}")

        try:
            resp = self.session.get(url, timeout=self.timeout, verify=self.verify)
            resp.raise_for_status()
            return resp.text
        except requests.Timeout:
            logger.error(f"Timeout fetching {url}")
            raise
        except requests.HTTPError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            raise
        finally:
            self._last_request_at = time.monotonic()

    def _wait(self) -> None:
        """Sleep so consecutive requests are spaced by the configured delay."""
        if not self.delay_range or self._last_request_at is None:
            return

        delay = random.uniform(*self.delay_range)
        remaining = delay - (time.monotonic() - self._last_request_at)
        if remaining > 0:
            time.sleep(remaining)
