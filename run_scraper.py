#!/usr/bin/env python3
"""
Funding programme harvester.

Fetches every page of the English and Welsh funding finder, extracts each
programme listing and prints {"en": [...], "cy": [...]} as JSON on stdout.
Logs and progress go to stderr.

Usage:
    python run_scraper.py                      # Both languages, all pages
    python run_scraper.py --lang cy --pages 2  # Welsh, pages 0-2
    python run_scraper.py --output programmes.json --failures-out logs/failures.json
"""

import sys
import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from src.core.constants import PAGE_COUNT, RATE_LIMIT_DELAY_MAX, RATE_LIMIT_DELAY_MIN
from src.core.models import Language
from src.ingest.harvester import ProgrammeHarvester
from src.ingest.page_fetcher import PageFetcher
from src.monitoring.harvest_stats import HarvestMonitor
from src.normalize.aggregate import records_to_json

# TLS / proxy settings for requests (REQUESTS_CA_BUNDLE, HTTPS_PROXY) may live in .env
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Harvest funding programmes from the funding finder"
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=PAGE_COUNT,
        help=f"Highest page index to fetch, inclusive (default: {PAGE_COUNT})",
    )
    parser.add_argument(
        "--lang",
        action="append",
        choices=[language.value for language in Language],
        help="Language to harvest (repeatable, default: en and cy)",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Do not pause between page requests",
    )
    parser.add_argument(
        "--verify-ssl",
        action="store_true",
        help="Verify TLS certificates (off by default, the site is served from an IP)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--failures-out",
        type=Path,
        help="Write failed pages/entries to this JSON file",
    )
    parser.add_argument(
        "--stats-out",
        type=Path,
        help="Write run statistics to this JSON file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser


def selected_languages(codes) -> list:
    """Requested languages, always in English-then-Welsh order."""
    if not codes:
        return list(Language)
    return [language for language in Language if language.value in codes]


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    fetcher = PageFetcher(
        verify_ssl=args.verify_ssl,
        delay_range=None if args.no_delay else (RATE_LIMIT_DELAY_MIN, RATE_LIMIT_DELAY_MAX),
    )
    monitor = HarvestMonitor()
    harvester = ProgrammeHarvester(
        fetcher,
        monitor=monitor,
        pages=args.pages,
        progress=True,
    )

    programmes = harvester.harvest(selected_languages(args.lang))
    output = records_to_json(programmes)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote programmes to {args.output}")
    else:
        print(output)

    monitor.finalize()
    if args.failures_out:
        monitor.export_failures(str(args.failures_out))
    if args.stats_out:
        monitor.export_stats(str(args.stats_out))
    if monitor.should_alert():
        logger.warning(f"Harvest had failures: {monitor.get_error_summary()}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
