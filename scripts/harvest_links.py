#!/usr/bin/env python3
"""
Collect programme URLs from the funding finder listing pages.

Prints a JSON array of unique absolute programme URLs on stdout.

Usage:
    python scripts/harvest_links.py
    python scripts/harvest_links.py --lang cy --pages 3 --verbose
"""

import sys
import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.core.constants import PAGE_COUNT, RATE_LIMIT_DELAY_MAX, RATE_LIMIT_DELAY_MIN
from src.core.models import Language
from src.ingest.harvester import ProgrammeHarvester
from src.ingest.page_fetcher import PageFetcher
from src.normalize.aggregate import links_to_json

load_dotenv()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Collect programme URLs from the funding finder"
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=PAGE_COUNT,
        help=f"Highest page index to fetch, inclusive (default: {PAGE_COUNT})",
    )
    parser.add_argument(
        "--lang",
        choices=[language.value for language in Language],
        default=Language.EN.value,
        help="Listing language (default: en)",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Do not pause between page requests",
    )
    parser.add_argument(
        "--verify-ssl",
        action="store_true",
        help="Verify TLS certificates",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    fetcher = PageFetcher(
        verify_ssl=args.verify_ssl,
        delay_range=None if args.no_delay else (RATE_LIMIT_DELAY_MIN, RATE_LIMIT_DELAY_MAX),
    )
    harvester = ProgrammeHarvester(fetcher, pages=args.pages, progress=args.verbose)

    links = harvester.harvest_links(Language(args.lang))
    print(links_to_json(links))
    return 0


if __name__ == "__main__":
    sys.exit(main())
