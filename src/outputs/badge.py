"""
shields.io badge generation.

Two flavours are produced from the same VulnerabilityStats: a static badge
URL for the ``badge-url`` output, and endpoint JSON stored in a gist for a
badge that updates in place.
"""

from urllib.parse import quote

from constants import SHIELDS_BADGE_BASE
from core.models import VulnerabilityStats
from utils.formatting import extract_db_date

# Characters Go's url.PathEscape leaves alone besides the unreserved set
_PATH_SEGMENT_SAFE = "$&+=:@"


def build_badge_label(grype_version: str) -> str:
    """Badge label, e.g. ``✊ grype 0.87.0``."""
    return f"✊ grype {grype_version}"


def format_badge_message(stats: VulnerabilityStats, zero_text: str = "0") -> str:
    """
    Count portion of the badge message.

    Args:
        stats: Aggregated counts
        zero_text: Text for a clean scan ("none" in the legacy badge)

    Examples:
        >>> format_badge_message(VulnerabilityStats(total=5, critical=2, high=3))
        '2 critical | 3 high'
        >>> format_badge_message(VulnerabilityStats())
        '0'
    """
    if stats.total == 0:
        return zero_text

    parts = [
        f"{count} {name}"
        for name, count in (
            ("critical", stats.critical),
            ("high", stats.high),
            ("medium", stats.medium),
            ("low", stats.low),
        )
        if count > 0
    ]
    if not parts and stats.other > 0:
        parts.append(f"{stats.other} other")

    return " | ".join(parts)


def determine_badge_color(stats: VulnerabilityStats) -> str:
    """shields.io color for the most severe bucket present."""
    if stats.critical > 0:
        return "critical"
    if stats.high > 0:
        return "orange"
    if stats.medium > 0:
        return "yellow"
    if stats.low > 0 or stats.other > 0:
        return "yellowgreen"
    return "brightgreen"


def build_badge_message(stats: VulnerabilityStats, db_built: str, scan_mode: str, escape_dashes: bool = False) -> str:
    """
    Full badge message: ``[db <date>: ]<counts> CVEs in <scan_mode>``.

    shields.io static badges use ``-`` as a field separator, so the date's
    dashes are doubled when escape_dashes is set.
    """
    message = f"{format_badge_message(stats)} CVEs in {scan_mode}"
    db_date = extract_db_date(db_built) if db_built else ""
    if db_date:
        if escape_dashes:
            db_date = db_date.replace("-", "--")
        message = f"db {db_date}: {message}"
    return message


def generate_badge_url(stats: VulnerabilityStats, label: str, db_built: str, scan_mode: str) -> str:
    """
    Static shields.io badge URL.

    Examples:
        >>> generate_badge_url(VulnerabilityStats(), "grype", "", "head")
        'https://img.shields.io/badge/grype-0%20CVEs%20in%20head-brightgreen'
    """
    message = build_badge_message(stats, db_built, scan_mode, escape_dashes=True)
    color = determine_badge_color(stats)

    encoded_label = quote(label, safe=_PATH_SEGMENT_SAFE)
    encoded_message = quote(message, safe=_PATH_SEGMENT_SAFE)
    return f"{SHIELDS_BADGE_BASE}/{encoded_label}-{encoded_message}-{color}"


def escape_json(text: str) -> str:
    """Escape backslash, quote, newline and tab for a JSON string literal."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def generate_badge_json(stats: VulnerabilityStats, grype_version: str, db_built: str, scan_mode: str) -> str:
    """shields.io endpoint JSON for a gist-backed badge."""
    label = build_badge_label(grype_version)
    message = build_badge_message(stats, db_built, scan_mode)
    color = determine_badge_color(stats)

    return (
        '{"schemaVersion":1,'
        f'"label":"{escape_json(label)}",'
        f'"message":"{escape_json(message)}",'
        f'"color":"{escape_json(color)}"}}'
    )


__all__ = [
    "build_badge_label",
    "format_badge_message",
    "determine_badge_color",
    "build_badge_message",
    "generate_badge_url",
    "escape_json",
    "generate_badge_json",
]
