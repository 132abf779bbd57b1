"""
Extractor for funding finder programme entries.

This module handles:
1. Locating the header (link, title, closing date) of a listing entry
2. Parsing the key facts block with the language's labels
3. Normalizing funding, area and organisation type facts
4. Building an immutable ProgrammeRecord
"""

import html
import logging
from typing import Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from src.core.constants import (
    SITE_BASE_URL,
    TITLE_BAR_SELECTOR,
    CLOSING_DATE_SELECTOR,
    KEY_FACTS_SELECTOR,
    INTRO_SELECTOR,
)
from src.core.models import (
    ExtractionError,
    ExtractionResult,
    KeyFacts,
    Language,
    ProgrammeLabels,
    ProgrammeRecord,
)
from src.core.utils import last_path_segment, normalize_currency
from src.core.vocabulary import labels_for
from src.ingest.key_facts import parse_key_facts
from src.normalize.programme_fields import (
    funding_bounds,
    join_fact,
    normalize_area,
    parse_closing_date,
    parse_fund_size,
)


logger = logging.getLogger(__name__)


class ProgrammeExtractor:
    """
    Builds a ProgrammeRecord from one listing entry.

    Usage:
        extractor = ProgrammeExtractor()
        record = extractor.extract(fragment_html, Language.CY)
    """

    def __init__(self, base_url: str = SITE_BASE_URL):
        """
        Initialize extractor.

        Args:
            base_url: Site root used to make programme links absolute
        """
        self.base_url = base_url

    def extract(self, fragment: str, language: Language) -> ProgrammeRecord:
        """
        Extract a programme record from a listing entry.

        Args:
            fragment: Raw HTML of one programme entry
            language: Language of the listing page

        Returns:
            ProgrammeRecord (without legacy id)

        Raises:
            ExtractionError: If the entry has no header, link or heading
        """
        language = Language(language)
        labels = labels_for(language)
        soup = BeautifulSoup(fragment, "html.parser")

        header = soup.select_one(TITLE_BAR_SELECTOR)
        if header is None:
            raise ExtractionError("No programme header found")

        link, slug = self._extract_link(header)
        title = self._extract_title(header)
        closing_text = self._extract_closing_text(header, labels)

        key_facts = parse_key_facts(soup.select_one(KEY_FACTS_SELECTOR))
        fund_size_text = self._fact_text(key_facts, labels.funding_size)
        total_available = self._fact_text(key_facts, labels.total_available)
        minimum, maximum = funding_bounds(parse_fund_size(fund_size_text))

        description = self._extract_description(soup)

        logger.debug(f"Extracted programme: {slug} ({language.value})")

        return ProgrammeRecord(
            title=title,
            slug=slug,
            expiry_date=parse_closing_date(closing_text, language),
            programme_intro=f"<p>{html.escape(description, quote=False)}</p>",
            description=description,
            area=normalize_area(key_facts.get(labels.area)),
            org_type=join_fact(key_facts.get(labels.org_type)),
            minimum=minimum,
            maximum=maximum,
            fund_size_description=normalize_currency(fund_size_text) if fund_size_text else None,
            total_available=normalize_currency(total_available) if total_available else None,
            application_deadline=closing_text,
            original_link=urljoin(self.base_url, link),
        )

    def extract_result(
        self,
        fragment: str,
        language: Language,
        page: Optional[int] = None,
    ) -> ExtractionResult:
        """
        Extract a programme entry without raising.

        Failures are logged and returned as a failed ExtractionResult so the
        caller can carry on with the remaining entries.

        Args:
            fragment: Raw HTML of one programme entry
            language: Language of the listing page
            page: Listing page index (for reporting)

        Returns:
            ExtractionResult holding either the record or the failure reason
        """
        language = Language(language)
        try:
            record = self.extract(fragment, language)
        except ExtractionError as e:
            logger.warning(f"Skipping programme entry (page {page}, {language.value}): {e}")
            return ExtractionResult(
                language=language, error=str(e), error_type="parsing", page=page
            )
        except Exception as e:
            logger.exception(f"Unexpected error extracting entry (page {page}, {language.value})")
            return ExtractionResult(
                language=language, error=f"{type(e).__name__}: {e}", error_type="unknown", page=page
            )

        return ExtractionResult(language=language, record=record, page=page)

    def _extract_link(self, header: Tag) -> Tuple[str, str]:
        """
        Extract the programme link and its slug from the header.

        Returns:
            Tuple of (link as written, slug)
        """
        anchor = header.find("a")
        if anchor is None or anchor.get("href") is None:
            raise ExtractionError("No programme link in header")

        link = anchor["href"].strip()
        slug = last_path_segment(link)
        if not slug:
            raise ExtractionError(f"Cannot derive slug from link {link!r}")

        return link, slug

    def _extract_title(self, header: Tag) -> str:
        """Extract programme title from the h3 in the header."""
        heading = header.find("h3")
        if heading is None:
            raise ExtractionError("No programme heading in header")
        return heading.get_text().strip()

    def _extract_closing_text(self, header: Tag, labels: ProgrammeLabels) -> str:
        """
        Extract the closing date text as displayed, without its label.

        e.g. "Application Deadline: 12 March 2019" -> "12 March 2019"
        """
        closing = header.select_one(CLOSING_DATE_SELECTOR)
        if closing is None:
            return ""
        text = closing.get_text().strip()
        return text.replace(f"{labels.application_deadline}: ", "", 1)

    def _extract_description(self, soup: BeautifulSoup) -> str:
        """Extract the first intro paragraph as plain text."""
        container = soup.select_one(INTRO_SELECTOR)
        paragraph = container.find("p") if container else None
        if paragraph is None:
            return ""
        return paragraph.get_text()

    def _fact_text(self, key_facts: KeyFacts, label: str) -> Optional[str]:
        # Multi-line money facts are flattened like organisation types
        return join_fact(key_facts.get(label))
