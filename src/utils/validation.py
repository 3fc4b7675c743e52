"""
Input validation utilities for grypeme.

Provides validation for git ref names and other user inputs before they
reach a subprocess command line.
"""

from core.exceptions import InvalidRefException, ValidationException
from constants import DEFAULT_SEVERITY_CUTOFF, SEVERITY_CUTOFFS

# Substrings git refuses in ref names, or that change meaning in rev syntax
INVALID_REF_PATTERNS = ("..", "~", "^", ":", "?", "*", "[", "\\", " ")


def validate_ref_name(ref: str) -> str:
    """
    Validate a git reference name for safety and correctness.

    Args:
        ref: Branch or tag name supplied by the user or read from git

    Returns:
        The ref, unchanged

    Raises:
        InvalidRefException: If the ref is empty or contains unsafe characters

    Examples:
        >>> validate_ref_name("feature/x")
        'feature/x'
        >>> validate_ref_name("HEAD~1")
        InvalidRefException: ...
    """
    if not ref:
        raise InvalidRefException(ref, "ref name cannot be empty")

    for position, char in enumerate(ref):
        if ord(char) < 32 or ord(char) == 127:
            raise InvalidRefException(
                ref, f"ref contains invalid control character at position {position}"
            )

    for pattern in INVALID_REF_PATTERNS:
        if pattern in ref:
            raise InvalidRefException(ref, f"ref contains invalid pattern {pattern!r}")

    if ref.startswith((".", "/")) or ref.endswith((".", "/")):
        raise InvalidRefException(ref, "ref cannot start or end with . or /")

    return ref


def normalize_severity_cutoff(cutoff: str) -> str:
    """
    Lower-case a severity cutoff and check it against the accepted values.

    Args:
        cutoff: Raw severity-cutoff input

    Returns:
        Normalized cutoff; empty input yields the default

    Raises:
        ValidationException: If the cutoff is not a known severity
    """
    normalized = (cutoff or "").strip().lower()
    if not normalized:
        return DEFAULT_SEVERITY_CUTOFF

    if normalized not in SEVERITY_CUTOFFS:
        raise ValidationException(
            f"unknown severity {cutoff!r}, expected one of {', '.join(SEVERITY_CUTOFFS)}",
            "severity-cutoff",
        )

    return normalized


__all__ = [
    "INVALID_REF_PATTERNS",
    "validate_ref_name",
    "normalize_severity_cutoff",
]
