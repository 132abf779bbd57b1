"""
Shared utility functions for date parsing, currency text and URL paths.
"""

import re
from datetime import datetime
from typing import Optional
from dateutil import parser as dateparser


# HTML entity forms of the pound sign seen in scraped markup
_POUND_ENTITY_PAT = re.compile(r"&#[xX]0*[aA]3;|&#0*163;|&pound;")


def parse_date_maybe(
    text: str,
    parserinfo: Optional[dateparser.parserinfo] = None,
) -> Optional[datetime]:
    """
    Attempt to parse a date string, returning None on failure.

    Uses dateutil.parser with day-first=True for UK date formats.

    Args:
        text: Date string (e.g., "10 April 2024")
        parserinfo: Optional parserinfo with localized month names

    Returns:
        Parsed datetime or None if parsing fails

    Examples:
        >>> parse_date_maybe("10 April 2024")
        datetime.datetime(2024, 4, 10, 0, 0)
        >>> parse_date_maybe("not a date")
        None
    """
    if not text:
        return None

    text = text.strip()
    if not text:
        return None

    try:
        # dayfirst=True handles UK date formats (DD/MM/YYYY)
        return dateparser.parse(text, parserinfo=parserinfo, dayfirst=True)
    except (ValueError, TypeError, OverflowError):
        return None


def normalize_currency(text: str) -> str:
    """
    Replace encoded pound signs with the literal symbol.

    Examples:
        >>> normalize_currency("&#xA3;10,000")
        '£10,000'
    """
    return _POUND_ENTITY_PAT.sub("£", text)


def strip_currency(text: str) -> str:
    """
    Remove pound signs (literal or encoded) from text.

    Examples:
        >>> strip_currency("&#xA3;500 - £1,000")
        '500 - 1,000'
    """
    return normalize_currency(text).replace("£", "")


def last_path_segment(url: str) -> str:
    """
    Return the final "/"-delimited segment of a link.

    Examples:
        >>> last_path_segment("/funding/programmes/awards-for-all")
        'awards-for-all'
    """
    return url.split("/")[-1]
