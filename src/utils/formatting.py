"""
Formatting utilities for grypeme output.

Provides common formatting functions for timestamps and text shown in
badges, step outputs and Markdown reports.
"""

from datetime import datetime, timezone


def extract_db_date(timestamp: str) -> str:
    """
    Extract the date portion (YYYY-MM-DD) of an RFC3339 timestamp.

    Args:
        timestamp: Timestamp such as "2026-01-30T12:34:56Z"

    Returns:
        First 10 characters, or the input unchanged when it is shorter

    Examples:
        >>> extract_db_date("2026-01-30T12:34:56Z")
        '2026-01-30'
        >>> extract_db_date("")
        ''
    """
    if len(timestamp) >= 10:
        return timestamp[:10]
    return timestamp


def truncate(text: str, max_len: int) -> str:
    """
    Shorten text to at most max_len characters, ending in an ellipsis if cut.

    Examples:
        >>> truncate("short", 80)
        'short'
        >>> truncate("abcdef", 4)
        'abc…'
    """
    if len(text) <= max_len:
        return text
    if max_len <= 1:
        return "…"
    return text[: max_len - 1] + "…"


def format_scan_timestamp(moment: datetime) -> str:
    """
    Format a wall-clock time for report headers, always in UTC.

    Examples:
        >>> from datetime import datetime, timezone
        >>> format_scan_timestamp(datetime(2026, 2, 1, 9, 5, tzinfo=timezone.utc))
        '2026-02-01 09:05 UTC'
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M UTC")


def markdown_cell(text: str) -> str:
    """Make text safe inside a Markdown table cell."""
    flattened = " ".join(text.split())
    return flattened.replace("|", "\\|")
