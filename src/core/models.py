"""
Domain models for grype scan results.

This module defines the core data structures used throughout the action.
All models are immutable (frozen dataclasses) to prevent accidental mutation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SeverityLevel(str, Enum):
    """Severity buckets used for counting and sorting findings."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    OTHER = "other"

    @classmethod
    def ordered_levels(cls) -> list[str]:
        """Return severity levels in display order."""
        return [
            cls.CRITICAL.value,
            cls.HIGH.value,
            cls.MEDIUM.value,
            cls.LOW.value,
            cls.OTHER.value,
        ]

    @classmethod
    def bucket(cls, severity: Optional[str]) -> "SeverityLevel":
        """Map a free-text scanner severity onto one of the five buckets."""
        if not isinstance(severity, str):
            return cls.OTHER
        normalized = severity.strip().lower()
        for level in (cls.CRITICAL, cls.HIGH, cls.MEDIUM, cls.LOW):
            if normalized == level.value:
                return level
        return cls.OTHER

    @property
    def rank(self) -> int:
        """Sort rank, lower is more severe."""
        return self.ordered_levels().index(self.value)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _string_tuple(values: Any) -> tuple[str, ...]:
    """Keep the string entries of a JSON list; anything else yields ()."""
    if not isinstance(values, list):
        return ()
    return tuple(v for v in values if isinstance(v, str))


class TargetKind(str, Enum):
    """Kinds of input grype can scan."""

    IMAGE = "image"
    DIRECTORY = "dir"
    FILE = "file"
    SBOM = "sbom"


@dataclass(frozen=True)
class ScanTarget:
    """
    What grype is pointed at.

    Attributes:
        kind: Kind of input
        location: Image reference or filesystem path
    """

    kind: TargetKind
    location: str

    @property
    def argument(self) -> str:
        """Render the grype command-line argument for this target."""
        if self.kind is TargetKind.IMAGE:
            return self.location
        return f"{self.kind.value}:{self.location}"

    def __str__(self) -> str:
        return self.argument


@dataclass(frozen=True)
class VulnerabilityMatch:
    """
    A single finding reported by grype.

    Attributes:
        id: Vulnerability identifier (e.g., CVE-2023-12345)
        severity: Severity as reported by the scanner (free text)
        description: Human-readable description
        data_source: URL of the vulnerability record
        fix_state: fixed, not-fixed, wont-fix or unknown
        fix_versions: Versions that fix the vulnerability, in scanner order
        package_name: Affected package name
        package_version: Installed package version
        package_type: Package ecosystem (npm, deb, go-module, ...)
    """

    id: str
    severity: str = ""
    description: str = ""
    data_source: str = ""
    fix_state: str = ""
    fix_versions: tuple[str, ...] = ()
    package_name: str = ""
    package_version: str = ""
    package_type: str = ""

    @property
    def severity_level(self) -> SeverityLevel:
        return SeverityLevel.bucket(self.severity)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VulnerabilityMatch":
        """Create from one entry of grype's ``matches`` array."""
        vulnerability = data.get("vulnerability") or {}
        artifact = data.get("artifact") or {}
        fix = vulnerability.get("fix") or {}
        return cls(
            id=_text(vulnerability.get("id")),
            severity=_text(vulnerability.get("severity")),
            description=_text(vulnerability.get("description")),
            data_source=_text(vulnerability.get("dataSource")),
            fix_state=_text(fix.get("state")),
            fix_versions=_string_tuple(fix.get("versions")),
            package_name=_text(artifact.get("name")),
            package_version=_text(artifact.get("version")),
            package_type=_text(artifact.get("type")),
        )


@dataclass(frozen=True)
class ScanReport:
    """
    Parsed grype JSON report.

    Grype moved the database build timestamp from ``descriptor.db.built``
    to ``descriptor.db.status.built`` in 0.106; both are kept and the newer
    location wins.

    Attributes:
        matches: Findings in scanner order
        grype_version: Scanner version from the descriptor
        db_built_legacy: ``descriptor.db.built``
        db_built_status: ``descriptor.db.status.built``
    """

    matches: tuple[VulnerabilityMatch, ...] = ()
    grype_version: str = ""
    db_built_legacy: str = ""
    db_built_status: str = ""

    @property
    def db_built(self) -> str:
        """Database build timestamp, or an empty string if unknown."""
        if self.db_built_status:
            return self.db_built_status
        return self.db_built_legacy

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanReport":
        """Create from a decoded grype JSON document."""
        descriptor = data.get("descriptor") or {}
        db = descriptor.get("db") or {}
        status = db.get("status") or {}
        return cls(
            matches=tuple(
                VulnerabilityMatch.from_dict(match)
                for match in data.get("matches") or []
                if isinstance(match, dict)
            ),
            grype_version=_text(descriptor.get("version")),
            db_built_legacy=_text(db.get("built")),
            db_built_status=_text(status.get("built")),
        )


@dataclass(frozen=True)
class VulnerabilityStats:
    """
    Vulnerability counts broken down by severity bucket.

    Attributes:
        total: Total number of findings
        critical: Number of critical findings
        high: Number of high severity findings
        medium: Number of medium severity findings
        low: Number of low severity findings
        other: Findings with negligible, unknown or unrecognised severity
    """

    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    other: int = 0


@dataclass(frozen=True)
class GistResult:
    """
    URLs produced by a successful gist update.

    Attributes:
        gist_url: HTML page of the gist
        badge_url: shields.io endpoint URL backed by the badge JSON file
        report_url: Anchor URL of the rendered Markdown report
    """

    gist_url: str = ""
    badge_url: str = ""
    report_url: str = ""


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a best-effort step.

    Callers log ``error`` as a warning and carry on; nothing here is ever
    raised.
    """

    ok: bool = True
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def error(self) -> Optional[str]:
        if not self.errors:
            return None
        return "; ".join(self.errors)

    @classmethod
    def success(cls) -> "OperationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, *errors: str) -> "OperationResult":
        return cls(ok=False, errors=tuple(errors))
