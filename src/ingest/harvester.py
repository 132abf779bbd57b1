"""
Harvest loop over the paginated funding finder.

Pages are fetched one at a time in page order, and languages one after the
other (English before Welsh). A page that cannot be fetched, or an entry that
cannot be extracted, is logged and skipped; the run always completes.
"""

import logging
from typing import Dict, Iterable, List, Optional

import requests
from tqdm import tqdm

from src.core.constants import LISTING_URL_CY, LISTING_URL_EN, PAGE_COUNT
from src.core.models import ExtractionResult, Language, ProgrammeRecord, ResultsByLanguage
from src.ingest.listing import extract_programme_links, split_programmes
from src.ingest.page_fetcher import PageFetcher
from src.ingest.programme_extractor import ProgrammeExtractor
from src.monitoring.harvest_stats import HarvestMonitor
from src.normalize.aggregate import aggregate, dedupe_links, successful_records


logger = logging.getLogger(__name__)


LISTING_URLS: Dict[Language, str] = {
    Language.EN: LISTING_URL_EN,
    Language.CY: LISTING_URL_CY,
}


class ProgrammeHarvester:
    """
    Harvests programme records from every listing page.

    Usage:
        harvester = ProgrammeHarvester(PageFetcher())
        programmes = harvester.harvest()   # {"en": [...], "cy": [...]}
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        extractor: Optional[ProgrammeExtractor] = None,
        monitor: Optional[HarvestMonitor] = None,
        pages: int = PAGE_COUNT,
        listing_urls: Optional[Dict[Language, str]] = None,
        progress: bool = False,
    ):
        """
        Initialize harvester.

        Args:
            fetcher: Page fetcher (anything with fetch_page(url_base, page))
            extractor: Programme extractor
            monitor: Monitor collecting page and entry outcomes
            pages: Highest page index to fetch (inclusive)
            listing_urls: Listing URL template per language
            progress: Show a progress bar on stderr
        """
        self.fetcher = fetcher
        self.extractor = extractor or ProgrammeExtractor()
        self.monitor = monitor or HarvestMonitor()
        self.pages = pages
        self.listing_urls = listing_urls or LISTING_URLS
        self.progress = progress

    def harvest(
        self,
        languages: Iterable[Language] = (Language.EN, Language.CY),
    ) -> Dict[str, List[ProgrammeRecord]]:
        """
        Harvest and aggregate programmes for each language in turn.

        Args:
            languages: Languages to harvest

        Returns:
            Dict mapping language code to unique programme records
        """
        results: ResultsByLanguage = {}
        for language in languages:
            language = Language(language)
            results[language] = self.harvest_language(language)

        aggregated = aggregate(results)

        for language, language_results in results.items():
            dropped = len(successful_records(language_results)) - len(aggregated[language.value])
            self.monitor.log_duplicates(dropped)

        return aggregated

    def harvest_language(self, language: Language) -> List[ExtractionResult]:
        """
        Extract every entry on every listing page of one language.

        Args:
            language: Listing language

        Returns:
            Extraction results in page and document order
        """
        language = Language(language)
        logger.info(f"Harvesting {language.value} programmes ({self.pages + 1} pages)")

        results: List[ExtractionResult] = []
        for page, page_html in self._iter_pages(language):
            for fragment in split_programmes(page_html):
                result = self.extractor.extract_result(fragment, language, page=page)
                self.monitor.log_entry(result)
                results.append(result)

        extracted = sum(1 for r in results if r.ok)
        logger.info(f"{language.value}: {extracted}/{len(results)} entries extracted")
        return results

    def harvest_links(self, language: Language = Language.EN) -> List[str]:
        """
        Collect unique absolute programme URLs from every listing page.

        Args:
            language: Listing language

        Returns:
            Programme URLs in first-seen order
        """
        language = Language(language)
        links: List[str] = []
        for _, page_html in self._iter_pages(language):
            links.extend(extract_programme_links(page_html, self.extractor.base_url))

        unique = dedupe_links(links)
        logger.info(f"Found {len(unique)} unique programme links ({len(links)} total)")
        return unique

    def _iter_pages(self, language: Language):
        """
        Yield (page index, html) for every page that could be fetched.
        """
        url_base = self.listing_urls[language]
        pages = tqdm(
            range(self.pages + 1),
            desc=f"Pages ({language.value})",
            disable=not self.progress,
        )

        for page in pages:
            url = f"{url_base}{page}"
            try:
                page_html = self.fetcher.fetch_page(url_base, page)
            except requests.RequestException as e:
                logger.error(f"Failed to fetch page {page} ({language.value}): {e}")
                self.monitor.log_page(
                    language, page, url, success=False, error=str(e), error_type="network"
                )
                continue

            self.monitor.log_page(language, page, url, success=True)
            yield page, page_html
