"""
Core data models for the programme harvester.
All records are immutable dataclasses representing extracted listing data.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Union, Any


class Language(str, Enum):
    """
    Listing language.

    EN: English directory
    CY: Welsh directory
    """
    EN = "en"
    CY = "cy"


class Region(str, Enum):
    """
    Canonical region tag for a programme's area.
    """
    ENGLAND = "england"
    WALES = "wales"
    SCOTLAND = "scotland"
    NORTHERN_IRELAND = "northernIreland"
    UK_WIDE = "ukWide"
    COUNTRIES_OUTSIDE_THE_UK = "countriesOutsideTheUk"


@dataclass(frozen=True)
class ProgrammeLabels:
    """
    Translated UI labels used on one language's listing pages.

    Attributes:
        million: Word used for the millions suffix in funding sizes
        funding_size: Key fact label for the per-award funding range
        application_deadline: Prefix shown before the closing date
        org_type: Key fact label for eligible organisation types
        total_available: Key fact label for the overall budget
        area: Key fact label for the geographic area
    """
    million: str
    funding_size: str
    application_deadline: str
    org_type: str
    total_available: str
    area: str


class ExtractionError(ValueError):
    """Raised when a programme entry does not have the expected structure."""


@dataclass(frozen=True)
class ProgrammeRecord:
    """
    Represents a single funding programme listing.

    Attributes:
        title: Programme title from the listing header
        slug: Last path segment of the programme link (unique key)
        expiry_date: Parsed closing date, or a date in the past if unparsable
        programme_intro: Intro paragraph as HTML
        description: Intro paragraph as plain text
        area: Canonical region tag (None if not stated or unknown)
        org_type: Eligible organisation types, comma-joined
        minimum: Lower funding bound (None unless a two-value range was found)
        maximum: Upper funding bound (None unless a two-value range was found)
        fund_size_description: Funding size as displayed
        total_available: Total budget as displayed
        application_deadline: Closing date text as displayed
        original_link: Absolute URL of the programme page
        legacy_id: Identifier for the downstream system, set on aggregation
    """
    title: str
    slug: str
    expiry_date: datetime
    programme_intro: str
    description: str
    area: Optional[Region]
    org_type: Optional[str]
    minimum: Optional[float]
    maximum: Optional[float]
    fund_size_description: Optional[str]
    total_available: Optional[str]
    application_deadline: str
    original_link: str
    legacy_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            "title": self.title,
            "slug": self.slug,
            "expiryDate": self.expiry_date.isoformat(),
            "programmeIntro": self.programme_intro,
            "description": self.description,
            "area": self.area.value if self.area else None,
            "orgType": self.org_type,
            "minimum": _json_number(self.minimum),
            "maximum": _json_number(self.maximum),
            "fundSizeDescription": self.fund_size_description,
            "totalAvailable": self.total_available,
            "applicationDeadline": self.application_deadline,
            "originalLink": self.original_link,
        }
        if self.legacy_id is not None:
            data["legacyId"] = self.legacy_id
        return data


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of extracting one programme entry.

    Attributes:
        language: Language of the listing the entry came from
        record: Extracted record (None on failure)
        error: Failure reason (None on success)
        error_type: Category of failure (parsing, unknown)
        page: Listing page index, if known
    """
    language: Language
    record: Optional[ProgrammeRecord] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    page: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def _json_number(value: Optional[float]) -> Optional[Union[int, float]]:
    # NaN has no JSON form; integral floats print as integers
    if value is None or math.isnan(value) or math.isinf(value):
        return None
    if float(value).is_integer():
        return int(value)
    return value


# Type aliases for clarity
KeyFactValue = Union[str, List[str]]
KeyFacts = Dict[str, KeyFactValue]
ResultsByLanguage = Dict[Language, List[ExtractionResult]]
