"""
Markdown vulnerability report.

The report is stored next to the badge JSON in a gist, where GitHub renders
it, so it sticks to plain GitHub-flavored Markdown tables.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from constants import NO_FIX_PLACEHOLDER, PROJECT_URL, REPORT_DESCRIPTION_WIDTH
from core.models import ScanReport, VulnerabilityMatch, VulnerabilityStats
from utils.formatting import extract_db_date, format_scan_timestamp, markdown_cell, truncate


def sort_matches(matches: Iterable[VulnerabilityMatch]) -> list[VulnerabilityMatch]:
    """Copy of matches, most severe first, then by vulnerability ID."""
    return sorted(matches, key=lambda m: (m.severity_level.rank, m.id))


def _match_row(match: VulnerabilityMatch) -> str:
    fixed = ", ".join(match.fix_versions) or NO_FIX_PLACEHOLDER
    description = truncate(" ".join(match.description.split()), REPORT_DESCRIPTION_WIDTH)
    source = f"[link]({match.data_source})" if match.data_source else ""
    cells = [
        match.id,
        match.severity,
        match.package_name,
        match.package_version,
        fixed,
        description,
    ]
    return "| " + " | ".join(markdown_cell(cell) for cell in cells) + f" | {source} |"


def generate_report(
    report: ScanReport,
    stats: VulnerabilityStats,
    scan_mode: str,
    now: Optional[datetime] = None,
    description: str = "",
) -> str:
    """
    Render the scan as a Markdown document.

    Args:
        report: Parsed grype report
        stats: Counts aggregated from report
        scan_mode: Label such as release, head or image
        now: Scan time shown in the header (defaults to the current UTC time)
        description: Optional free text placed under the header

    Returns:
        Markdown text
    """
    if now is None:
        now = datetime.now(timezone.utc)

    lines = [
        f"# ✊ grype {report.grype_version} — Vulnerability Scan Report",
        "",
        f"**Scan mode:** {scan_mode}  ",
        f"**DB version:** {extract_db_date(report.db_built)}  ",
        f"**Scanned:** {format_scan_timestamp(now)}  ",
        f"**Total CVEs:** {stats.total}",
        "",
    ]

    if description.strip():
        lines += [description.strip(), ""]

    lines += [
        "## Summary",
        "",
        "| Severity | Count |",
        "|----------|------:|",
        f"| Critical | {stats.critical} |",
        f"| High | {stats.high} |",
        f"| Medium | {stats.medium} |",
        f"| Low | {stats.low} |",
    ]
    if stats.other > 0:
        lines.append(f"| Other | {stats.other} |")
    lines.append(f"| **Total** | **{stats.total}** |")

    if stats.total > 0:
        lines += [
            "",
            "## Vulnerabilities",
            "",
            "| CVE | Severity | Package | Installed | Fixed | Description | Source |",
            "|-----|----------|---------|-----------|-------|-------------|--------|",
        ]
        lines += [_match_row(match) for match in sort_matches(report.matches)]
    else:
        lines += ["", "✅ No vulnerabilities found."]

    lines += ["", "---", f"*Generated by [grype_me]({PROJECT_URL})*", ""]
    return "\n".join(lines)


__all__ = ["sort_matches", "generate_report"]
