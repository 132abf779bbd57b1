"""
Constants for the programme harvester.

This module centralizes all magic numbers and configuration values
to make the codebase more maintainable and configurable.
"""

# =============================================================================
# SOURCE SITE
# =============================================================================

# The funding finder is served from a bare IP (certificate does not match)
SITE_BASE_URL = "https://31.221.8.237"

# Listing URL templates; the zero-based page index is appended
LISTING_URL_EN = f"{SITE_BASE_URL}/funding/funding-finder?sc=1&cpage="
LISTING_URL_CY = f"{SITE_BASE_URL}/welsh/funding/funding-finder?sc=1&cpage="

# Highest page index to fetch (inclusive, so 20 pages)
PAGE_COUNT = 19


# =============================================================================
# LISTING MARKUP
# =============================================================================

# One programme entry on a listing page
PROGRAMME_ENTRY_SELECTOR = ".programmeListItem"

# Header holding the programme link, heading and closing date
TITLE_BAR_SELECTOR = ".programmeListTitleBar"

# Closing date inside the header
CLOSING_DATE_SELECTOR = ".fullDate"

# Definition list of key facts
KEY_FACTS_SELECTOR = ".taxonomy-keyFacts"

# Intro paragraph container
INTRO_SELECTOR = ".infoDetailsLeft"


# =============================================================================
# SCRAPING - HTTP/Network
# =============================================================================

# Request timeout in seconds
REQUEST_TIMEOUT = 30

# User-Agent header (browser-like to avoid blocking)
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-GB,en;q=0.9,cy;q=0.8",
}


# =============================================================================
# RATE LIMITING
# =============================================================================

# Minimum delay between requests (seconds)
RATE_LIMIT_DELAY_MIN = 1.0

# Maximum delay between requests (seconds) - actual delay is random in range
RATE_LIMIT_DELAY_MAX = 2.0


# =============================================================================
# MONITORING
# =============================================================================

# Success rate (percent) below which a run is flagged
ALERT_SUCCESS_RATE = 95.0

# Maximum failure details to keep in memory
MAX_FAILURE_DETAILS = 1000


# =============================================================================
# OUTPUT
# =============================================================================

# Prefix for identifiers in the downstream content database
LEGACY_ID_PREFIX = "LEGACY-PROG-"

# Indentation for pretty-printed JSON output
JSON_INDENT = 4
