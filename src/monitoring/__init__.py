"""
Monitoring module for the programme harvester.

Provides failure tracking and statistics collection for harvest runs.
"""

from src.monitoring.harvest_stats import HarvestMonitor, HarvestFailure, HarvestStats

__all__ = ["HarvestMonitor", "HarvestFailure", "HarvestStats"]
