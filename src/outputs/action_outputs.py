"""
GitHub Actions step outputs and environment variables.

Outputs are appended as ``key=value`` lines to the file named by
GITHUB_OUTPUT; prefixed environment variables go to GITHUB_ENV.
"""

import logging
from typing import Mapping, Optional

from core.exceptions import OutputException
from core.models import ScanReport, VulnerabilityStats
from outputs.badge import format_badge_message
from utils.formatting import extract_db_date

logger = logging.getLogger(__name__)


def build_step_outputs(
    stats: VulnerabilityStats,
    report: ScanReport,
    badge_url: str,
    json_path: str = "",
    report_url: str = "",
) -> dict[str, str]:
    """Step outputs in the order they are written."""
    outputs = {
        "grype-version": report.grype_version,
        "db-version": report.db_built,
        "cve-count": str(stats.total),
        "critical": str(stats.critical),
        "high": str(stats.high),
        "medium": str(stats.medium),
        "low": str(stats.low),
        "badge-url": badge_url,
    }
    if json_path:
        outputs["json-output"] = json_path
    if report_url:
        outputs["report-url"] = report_url
    return outputs


def build_environment_variables(stats: VulnerabilityStats, report: ScanReport, badge_url: str) -> dict[str, str]:
    """Unprefixed GITHUB_ENV variables."""
    return {
        "VERSION": report.grype_version,
        "DB_VERSION": report.db_built,
        "CVE_COUNT": str(stats.total),
        "CRITICAL": str(stats.critical),
        "HIGH": str(stats.high),
        "MEDIUM": str(stats.medium),
        "LOW": str(stats.low),
        "BADGE_URL": badge_url,
    }


def _append_lines(path: str, lines: list[str], what: str) -> None:
    try:
        with open(path, "a", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        raise OutputException(what, str(e)) from e


def write_step_outputs(outputs: Mapping[str, str], github_output: Optional[str]) -> bool:
    """
    Append step outputs to the GITHUB_OUTPUT file.

    Returns:
        False when GITHUB_OUTPUT is not configured (local runs), True otherwise

    Raises:
        OutputException: If the file cannot be written
    """
    if not github_output:
        logger.warning("GITHUB_OUTPUT not set, skipping output generation")
        return False

    _append_lines(github_output, [f"{key}={value}" for key, value in outputs.items()], "GITHUB_OUTPUT")
    return True


def write_environment_variables(prefix: str, variables: Mapping[str, str], github_env: Optional[str]) -> bool:
    """
    Append prefixed variables to the GITHUB_ENV file.

    Returns:
        False when GITHUB_ENV is not configured, True otherwise

    Raises:
        OutputException: If the file cannot be written
    """
    if not github_env:
        return False

    _append_lines(github_env, [f"{prefix}{key}={value}" for key, value in variables.items()], "GITHUB_ENV")
    return True


def format_summary(stats: VulnerabilityStats, report: ScanReport) -> str:
    """
    One-line summary printed at the end of a run.

    Examples:
        ✊ grype 0.87.0 | db 2026-01-30 | 2 critical | 3 high CVEs
    """
    return (
        f"✊ grype {report.grype_version} | "
        f"db {extract_db_date(report.db_built)} | "
        f"{format_badge_message(stats)} CVEs"
    )


__all__ = [
    "build_step_outputs",
    "build_environment_variables",
    "write_step_outputs",
    "write_environment_variables",
    "format_summary",
]
