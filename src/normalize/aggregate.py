"""
Deduplication and per-language aggregation of extracted programmes.
"""

import json
import logging
from dataclasses import replace
from typing import Dict, Iterable, List

from src.core.constants import JSON_INDENT, LEGACY_ID_PREFIX
from src.core.models import (
    ExtractionResult,
    Language,
    ProgrammeRecord,
    ResultsByLanguage,
)


logger = logging.getLogger(__name__)


def dedupe_by_slug(records: Iterable[ProgrammeRecord]) -> List[ProgrammeRecord]:
    """
    Drop records whose slug has already been seen.

    The first record for each slug is kept, in first-seen order.
    """
    seen = set()
    unique: List[ProgrammeRecord] = []
    for record in records:
        if record.slug in seen:
            continue
        seen.add(record.slug)
        unique.append(record)
    return unique


def dedupe_links(urls: Iterable[str]) -> List[str]:
    """Drop repeated URLs, keeping first-seen order."""
    return list(dict.fromkeys(urls))


def assign_legacy_id(record: ProgrammeRecord) -> ProgrammeRecord:
    """Return a copy of the record carrying its downstream legacy id."""
    return replace(record, legacy_id=f"{LEGACY_ID_PREFIX}{record.slug}")


def successful_records(results: Iterable[ExtractionResult]) -> List[ProgrammeRecord]:
    """Records from the successful results, in order."""
    return [result.record for result in results if result.ok]


def aggregate(results_by_language: ResultsByLanguage) -> Dict[str, List[ProgrammeRecord]]:
    """
    Group extracted programmes by language.

    Failed extractions are discarded, each language is deduplicated on its
    own, and legacy ids are attached.

    Args:
        results_by_language: Extraction results for each harvested language

    Returns:
        Dict like {"en": [...], "cy": [...]} in language order
    """
    aggregated: Dict[str, List[ProgrammeRecord]] = {}

    for language, results in results_by_language.items():
        records = successful_records(results)
        unique = dedupe_by_slug(records)

        dropped = len(records) - len(unique)
        if dropped:
            logger.info(f"Dropped {dropped} duplicate programmes ({Language(language).value})")

        aggregated[Language(language).value] = [assign_legacy_id(r) for r in unique]

    return aggregated


def records_to_json(aggregated: Dict[str, List[ProgrammeRecord]]) -> str:
    """Serialize aggregated programmes as pretty-printed JSON."""
    payload = {
        language: [record.to_dict() for record in records]
        for language, records in aggregated.items()
    }
    return json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)


def links_to_json(urls: List[str]) -> str:
    """Serialize harvested links as a pretty-printed JSON array."""
    return json.dumps(urls, indent=JSON_INDENT, ensure_ascii=False)
