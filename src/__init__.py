"""
grypeme - Grype vulnerability scan action

Scans a repository release, the current checkout, a container image, a
path or an SBOM with grype, and publishes badge, report and step outputs.
"""

__version__ = "1.0.0"
__author__ = "grype_me contributors"

from core.models import (
    ScanReport,
    ScanTarget,
    VulnerabilityMatch,
    VulnerabilityStats,
)

__all__ = [
    "ScanReport",
    "ScanTarget",
    "VulnerabilityMatch",
    "VulnerabilityStats",
]
