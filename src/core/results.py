"""
Parsing and aggregation of grype JSON reports.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Union

from constants import DEFAULT_SEVERITY_CUTOFF
from core.exceptions import ParseException
from core.models import ScanReport, SeverityLevel, VulnerabilityMatch, VulnerabilityStats

logger = logging.getLogger(__name__)

# Buckets that trip fail-build for each cutoff
_FAILING_LEVELS = {
    "critical": (SeverityLevel.CRITICAL,),
    "high": (SeverityLevel.CRITICAL, SeverityLevel.HIGH),
    "medium": (SeverityLevel.CRITICAL, SeverityLevel.HIGH, SeverityLevel.MEDIUM),
    "low": (SeverityLevel.CRITICAL, SeverityLevel.HIGH, SeverityLevel.MEDIUM, SeverityLevel.LOW),
}


def parse_report(path: Union[str, Path]) -> ScanReport:
    """
    Read and decode a grype JSON report.

    Args:
        path: Report written by ``grype -o json --file``

    Returns:
        Parsed ScanReport

    Raises:
        ParseException: If the file is unreadable, not a JSON object, or
            shaped unlike a grype report
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ParseException(str(path), f"failed to read output file: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseException(str(path), f"failed to parse JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseException(str(path), f"expected a JSON object, got {type(data).__name__}")

    matches = data.get("matches")
    if matches is not None and not isinstance(matches, list):
        logger.warning(f"Unexpected grype matches format in {path}: {type(matches).__name__}")
        data = {**data, "matches": []}

    try:
        return ScanReport.from_dict(data)
    except (AttributeError, TypeError) as e:
        raise ParseException(str(path), f"unexpected report structure: {e}") from e


def aggregate(matches: Union[ScanReport, Iterable[VulnerabilityMatch]]) -> VulnerabilityStats:
    """
    Count findings per severity bucket.

    Each match lands in exactly one bucket; order does not matter.
    """
    if isinstance(matches, ScanReport):
        matches = matches.matches

    counts = {level: 0 for level in SeverityLevel}
    for match in matches:
        counts[match.severity_level] += 1

    return VulnerabilityStats(
        total=sum(counts.values()),
        critical=counts[SeverityLevel.CRITICAL],
        high=counts[SeverityLevel.HIGH],
        medium=counts[SeverityLevel.MEDIUM],
        low=counts[SeverityLevel.LOW],
        other=counts[SeverityLevel.OTHER],
    )


def should_fail(stats: VulnerabilityStats, cutoff: str) -> bool:
    """
    Whether findings meet or exceed the severity cutoff.

    ``negligible`` fails on any finding; an unknown cutoff behaves like
    ``medium``.
    """
    cutoff = (cutoff or "").lower()
    if cutoff == "negligible":
        return stats.total > 0

    levels = _FAILING_LEVELS.get(cutoff, _FAILING_LEVELS[DEFAULT_SEVERITY_CUTOFF])
    by_level = {
        SeverityLevel.CRITICAL: stats.critical,
        SeverityLevel.HIGH: stats.high,
        SeverityLevel.MEDIUM: stats.medium,
        SeverityLevel.LOW: stats.low,
    }
    return any(by_level[level] > 0 for level in levels)


__all__ = ["parse_report", "aggregate", "should_fail"]
