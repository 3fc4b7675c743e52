"""
Exception hierarchy for grypeme.

Provides a standardized exception hierarchy for consistent error handling
across the action. All exceptions inherit from GrypeMeException, which the
CLI turns into a single "Error:" line and exit code 1.
"""

from typing import Optional


class GrypeMeException(Exception):
    """Base exception for all grypeme errors."""
    pass


class ConfigurationException(GrypeMeException):
    """Configuration is invalid or missing."""
    pass


class ConfigurationConflictException(ConfigurationException):
    """Mutually exclusive inputs were set together."""
    pass


class ValidationException(GrypeMeException):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None):
        """
        Initialize validation exception.

        Args:
            message: Validation error message
            field: Field that failed validation (optional)
        """
        self.field = field
        if field:
            super().__init__(f"Validation failed for {field}: {message}")
        else:
            super().__init__(f"Validation failed: {message}")


class InvalidRefException(ValidationException):
    """Git ref name is unsafe to hand to git."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"invalid ref {ref!r}: {reason}", "ref")


class NotFoundException(ValidationException):
    """A path named in the configuration does not exist."""

    def __init__(self, path: str, field: str = "path"):
        self.path = path
        super().__init__(f"path {path!r} not found", field)


class GitException(GrypeMeException):
    """A git command failed."""
    pass


class NoTagsException(GitException):
    """Repository has no tags to pick a release from."""

    def __init__(self):
        super().__init__(
            "no release tags found in repository. Use 'scan: head' to scan the "
            "current checkout, or create a semver tag (e.g., v1.0.0)"
        )


class WorktreeException(GitException):
    """Temporary worktree could not be created."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"failed to checkout {ref}: {reason}")


class ScanException(GrypeMeException):
    """Scan operation failed."""

    def __init__(self, target: str, reason: str):
        """
        Initialize scan exception.

        Args:
            target: Scan target that failed
            reason: Reason for failure
        """
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to scan {target}: {reason}")


class ScanFailedException(ScanException):
    """Scanner did not produce its JSON report."""
    pass


class ParseException(ScanException):
    """Scanner JSON report could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, f"failed to parse grype output: {reason}")


class DatabaseUpdateException(GrypeMeException):
    """`grype db update` failed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to update grype database: {reason}")


class IntegrationException(GrypeMeException):
    """External integration/API failed."""

    def __init__(self, service: str, reason: str):
        """
        Initialize integration exception.

        Args:
            service: Service name that failed
            reason: Reason for failure
        """
        self.service = service
        self.reason = reason
        super().__init__(f"{service} integration failed: {reason}")


class GistAPIException(IntegrationException):
    """GitHub Gist API request failed or returned a non-2xx status."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        self.status_code = status_code
        if status_code is not None:
            reason = f"gist API returned {status_code}: {reason}"
        super().__init__("gist", reason)


class OutputException(GrypeMeException):
    """Output generation failed."""

    def __init__(self, format_type: str, reason: str):
        """
        Initialize output exception.

        Args:
            format_type: Output kind (json-output, step outputs, ...)
            reason: Reason for failure
        """
        self.format_type = format_type
        self.reason = reason
        super().__init__(f"Failed to write {format_type}: {reason}")


class PathTraversalException(OutputException):
    """Destination path escapes the workspace."""

    def __init__(self, dest: str, workspace: str):
        self.dest = dest
        self.workspace = workspace
        super().__init__(
            "output file",
            f"path traversal detected: {dest!r} is outside workspace {workspace!r}",
        )


class VulnerabilityThresholdException(GrypeMeException):
    """Findings met the configured severity cutoff with fail-build enabled."""

    def __init__(self, cutoff: str):
        self.cutoff = cutoff
        super().__init__(f"vulnerabilities found at or above {cutoff} severity")


__all__ = [
    "GrypeMeException",
    "ConfigurationException",
    "ConfigurationConflictException",
    "ValidationException",
    "InvalidRefException",
    "NotFoundException",
    "GitException",
    "NoTagsException",
    "WorktreeException",
    "ScanException",
    "ScanFailedException",
    "ParseException",
    "DatabaseUpdateException",
    "IntegrationException",
    "GistAPIException",
    "OutputException",
    "PathTraversalException",
    "VulnerabilityThresholdException",
]
