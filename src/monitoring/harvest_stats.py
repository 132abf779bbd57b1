"""
Harvest monitoring and statistics collection.

Provides:
- Tracking of page fetches and entry extractions (success/failure)
- Failure details for manual review
- Statistics export for the end of a run
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any

from src.core.constants import ALERT_SUCCESS_RATE, MAX_FAILURE_DETAILS
from src.core.models import ExtractionResult, Language

logger = logging.getLogger(__name__)


@dataclass
class HarvestFailure:
    """
    Record of a single failed page fetch or entry extraction.

    Attributes:
        stage: "page" for fetch failures, "entry" for extraction failures
        language: Listing language
        page: Listing page index
        error: Error message
        error_type: Type of error (network, parsing, unknown)
        url: Page URL, if known
        timestamp: When the failure happened
    """
    stage: str
    language: str
    page: Optional[int]
    error: str
    error_type: Optional[str] = None
    url: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "stage": self.stage,
            "language": self.language,
            "page": self.page,
            "error": self.error,
            "error_type": self.error_type,
            "url": self.url,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class HarvestStats:
    """
    Aggregate statistics for a harvest run.

    Attributes:
        run_id: Unique identifier for this run
        start_time: When the run started
        end_time: When the run ended
        pages_fetched: Listing pages fetched successfully
        pages_failed: Listing pages that could not be fetched
        entries_extracted: Programme entries turned into records
        entries_failed: Programme entries skipped
        duplicates_dropped: Records removed by slug deduplication
        per_language: Extracted entry count per language
    """
    run_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    pages_fetched: int = 0
    pages_failed: int = 0
    entries_extracted: int = 0
    entries_failed: int = 0
    duplicates_dropped: int = 0
    per_language: Dict[str, int] = field(default_factory=dict)

    @property
    def total_entries(self) -> int:
        return self.entries_extracted + self.entries_failed

    @property
    def success_rate(self) -> float:
        """Entry extraction success rate as percentage."""
        if self.total_entries == 0:
            return 0.0
        return (self.entries_extracted / self.total_entries) * 100

    @property
    def duration_seconds(self) -> Optional[float]:
        """Calculate run duration in seconds."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_id": self.run_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "pages_fetched": self.pages_fetched,
            "pages_failed": self.pages_failed,
            "entries_extracted": self.entries_extracted,
            "entries_failed": self.entries_failed,
            "duplicates_dropped": self.duplicates_dropped,
            "per_language": dict(self.per_language),
            "success_rate": round(self.success_rate, 2),
            "duration_seconds": self.duration_seconds,
        }


class HarvestMonitor:
    """
    Collects the outcome of every page and entry in a harvest run.

    Failures never stop a run; they are recorded here instead so the run
    can be reviewed afterwards.

    Usage:
        monitor = HarvestMonitor()

        monitor.log_page(Language.EN, 0, url, success=True)
        monitor.log_entry(result)

        stats = monitor.finalize()
        monitor.export_failures("failed_entries.json")
    """

    def __init__(self, run_id: Optional[str] = None):
        """
        Initialize the monitor.

        Args:
            run_id: Optional identifier for this run. Defaults to timestamp.
        """
        self.run_id = run_id or datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        self.failures: List[HarvestFailure] = []
        self.stats = HarvestStats(
            run_id=self.run_id,
            start_time=datetime.utcnow()
        )

        logger.info(f"HarvestMonitor initialized with run_id: {self.run_id}")

    def log_page(
        self,
        language: Language,
        page: int,
        url: str,
        success: bool,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
    ) -> None:
        """
        Log a listing page fetch.

        Args:
            language: Listing language
            page: Page index
            url: Page URL
            success: Whether the fetch succeeded
            error: Error message if failed
            error_type: Category of error (network, unknown)
        """
        if success:
            self.stats.pages_fetched += 1
            return

        self.stats.pages_failed += 1
        self._add_failure(HarvestFailure(
            stage="page",
            language=Language(language).value,
            page=page,
            error=error or "unknown error",
            error_type=error_type,
            url=url,
        ))

    def log_entry(self, result: ExtractionResult) -> None:
        """
        Log the outcome of one entry extraction.

        Args:
            result: Extraction result for the entry
        """
        language = Language(result.language).value

        if result.ok:
            self.stats.entries_extracted += 1
            self.stats.per_language[language] = self.stats.per_language.get(language, 0) + 1
            return

        self.stats.entries_failed += 1
        self._add_failure(HarvestFailure(
            stage="entry",
            language=language,
            page=result.page,
            error=result.error or "unknown error",
            error_type=result.error_type,
        ))

    def log_duplicates(self, count: int) -> None:
        """Record records removed by deduplication."""
        self.stats.duplicates_dropped += count

    def _add_failure(self, failure: HarvestFailure) -> None:
        self.failures.append(failure)

        # Keep only the most recent details
        if len(self.failures) > MAX_FAILURE_DETAILS:
            self.failures = self.failures[-MAX_FAILURE_DETAILS:]

    def get_error_summary(self) -> Dict[str, int]:
        """
        Get summary of errors by type.

        Returns:
            Dict mapping error_type to count
        """
        summary: Dict[str, int] = {}
        for failure in self.failures:
            key = failure.error_type or "unknown"
            summary[key] = summary.get(key, 0) + 1
        return summary

    def get_recent_failures(self, limit: int = 10) -> List[HarvestFailure]:
        """Get the most recent failures."""
        return self.failures[-limit:]

    def finalize(self) -> HarvestStats:
        """
        Finalize the run and return statistics.

        Call this at the end of a harvest run.

        Returns:
            Final HarvestStats object
        """
        self.stats.end_time = datetime.utcnow()

        logger.info(
            f"Harvest run {self.run_id} complete: "
            f"{self.stats.pages_fetched} pages fetched, {self.stats.pages_failed} failed; "
            f"{self.stats.entries_extracted}/{self.stats.total_entries} entries extracted "
            f"({self.stats.success_rate:.1f}%)"
        )

        return self.stats

    def export_failures(self, output_path: str) -> None:
        """
        Export failures to JSON file for manual review.

        Args:
            output_path: Path to output file
        """
        path = Path(output_path)

        export_data = {
            "run_id": self.run_id,
            "export_time": datetime.utcnow().isoformat(),
            "summary": {
                "total_failures": len(self.failures),
                "error_summary": self.get_error_summary(),
            },
            "all_failures": [failure.to_dict() for failure in self.failures],
        }

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(export_data, f, indent=2)

        logger.info(f"Exported {len(self.failures)} failures to {output_path}")

    def export_stats(self, output_path: str) -> None:
        """
        Export run statistics to JSON file.

        Args:
            output_path: Path to output file
        """
        path = Path(output_path)

        export_data = {
            "stats": self.stats.to_dict(),
            "error_summary": self.get_error_summary(),
        }

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(export_data, f, indent=2)

        logger.info(f"Exported stats to {output_path}")

    def should_alert(self) -> bool:
        """
        Check if the run deserves a closer look.

        Returns True if:
        - Entry success rate is below the alert threshold
        - Any listing page failed to fetch
        """
        if self.stats.pages_failed:
            return True

        if self.stats.total_entries == 0:
            return False

        return self.stats.success_rate < ALERT_SUCCESS_RATE
