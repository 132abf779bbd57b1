"""
Normalization functions for programme key facts.

Converts the raw key fact values of a listing into typed fields:
- Funding size range -> [minimum, maximum]
- Area label -> Region tag
- Closing date text -> datetime
- Organisation types -> comma-joined string
"""

import re
import html
import math
import logging
from datetime import datetime
from typing import List, Optional

from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

from src.core.models import KeyFactValue, Language, Region
from src.core.utils import parse_date_maybe, strip_currency
from src.core.vocabulary import AREA_NAMES, WELSH_MONTHS, million_tokens


logger = logging.getLogger(__name__)

# "million" in any supported language, e.g. "£1 million" or "£1 miliwn"
_MILLION_PAT = re.compile(
    "|".join(re.escape(token) for token in million_tokens()),
    flags=re.IGNORECASE
)

# Leading numeric prefix, e.g. "2.5" in "2.5 per year"
_NUMBER_PREFIX_PAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

RANGE_SEPARATOR = " - "


class WelshParserInfo(dateparser.parserinfo):
    """dateutil parserinfo that understands Welsh as well as English month names."""

    MONTHS = [
        english + welsh
        for english, welsh in zip(dateparser.parserinfo.MONTHS, WELSH_MONTHS)
    ]


_PARSER_INFO = {
    Language.EN: None,
    Language.CY: WelshParserInfo(dayfirst=True),
}


def _parse_number_prefix(text: str) -> float:
    """
    Parse the leading number of a string, or NaN if there is none.

    Examples:
        >>> _parse_number_prefix("5 ")
        5.0
        >>> _parse_number_prefix("Up to 5")
        nan
    """
    match = _NUMBER_PREFIX_PAT.match(text.strip())
    if not match:
        return math.nan
    return float(match.group(0))


def parse_fund_size(fund_size: Optional[str]) -> Optional[List[float]]:
    """
    Parse a funding size range into numbers.

    Supports:
    - "£500 - £1,000" -> [500, 1000]
    - "£1 million - £5 million" -> [1000000, 5000000]
    - "£10,000 - £1 miliwn" -> [10000, 1000000]
    - "£5,000" -> [5000]

    Each side of the range is parsed on its own. A side with no number
    becomes NaN rather than failing the whole range.

    Args:
        fund_size: Funding size as displayed

    Returns:
        List of parsed values, or None if there was no funding size
    """
    if not fund_size:
        return None

    text = strip_currency(fund_size).replace(",", "")

    values = []
    for part in text.split(RANGE_SEPARATOR):
        part = part.strip()
        if _MILLION_PAT.search(part):
            part = _MILLION_PAT.sub("", part, count=1).strip()
            values.append(_parse_number_prefix(part) * 1_000_000)
        else:
            values.append(_parse_number_prefix(part))

    return values


def funding_bounds(values: Optional[List[float]]) -> tuple:
    """
    Get (minimum, maximum) from a parsed funding size.

    Bounds are only set when the range had exactly two parseable values.

    Returns:
        Tuple of (minimum, maximum), both None if not a usable range
    """
    if not values or len(values) != 2:
        return None, None

    low, high = values
    if math.isnan(low) or math.isnan(high):
        return None, None

    return low, high


def normalize_area(area: Optional[KeyFactValue]) -> Optional[Region]:
    """
    Map an area key fact to a canonical region tag.

    Args:
        area: Area as displayed (either language), or a list of areas

    Returns:
        Region tag, or None if missing or not recognised
    """
    if isinstance(area, list):
        # Multi-region programmes are not supported; tag them all UK-wide
        return Region.UK_WIDE

    if not area:
        return None

    region = AREA_NAMES.get(html.unescape(area).strip())
    if region is None:
        logger.debug(f"Unknown area: {area!r}")
    return region


def parse_closing_date(text: str, language: Language = Language.EN) -> datetime:
    """
    Parse a closing date, falling back to a date in the past.

    Programmes whose closing date cannot be read are dated one year ago so
    that consumers filtering on expiry treat them as closed.

    Args:
        text: Closing date as displayed, without the label
        language: Listing language (selects month names)

    Returns:
        Parsed datetime, or now minus one year
    """
    parsed = parse_date_maybe(text, parserinfo=_PARSER_INFO[Language(language)])
    if parsed is None:
        logger.debug(f"Unparsable closing date {text!r}, using past date")
        return datetime.now() - relativedelta(years=1)
    return parsed


def join_fact(value: Optional[KeyFactValue]) -> Optional[str]:
    """
    Flatten a key fact value into a single string.

    Lists are joined with ", ". Missing or empty values become None.

    Examples:
        >>> join_fact(["Charity", "School"])
        'Charity, School'
        >>> join_fact("")
        None
    """
    if not value:
        return None

    if isinstance(value, list):
        return ", ".join(value)

    return value
