"""Core logic: configuration, target resolution, scanning and aggregation."""

from core.models import (
    ScanReport,
    ScanTarget,
    SeverityLevel,
    TargetKind,
    VulnerabilityMatch,
    VulnerabilityStats,
)

__all__ = [
    "ScanReport",
    "ScanTarget",
    "SeverityLevel",
    "TargetKind",
    "VulnerabilityMatch",
    "VulnerabilityStats",
]
