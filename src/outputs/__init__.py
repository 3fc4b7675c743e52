"""Badge, Markdown report and GitHub Actions output generation."""

from outputs.badge import generate_badge_json, generate_badge_url
from outputs.report import generate_report

__all__ = [
    "generate_badge_json",
    "generate_badge_url",
    "generate_report",
]
