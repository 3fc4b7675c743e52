"""
Pytest fixtures and configuration for grypeme tests.

Provides shared fixtures and test utilities across the test suite.
"""

import json
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.models import ScanReport, VulnerabilityMatch, VulnerabilityStats  # noqa: E402


def _match(vuln_id, severity, name="libfoo", version="1.0.0", fix_versions=(), description=""):
    return {
        "vulnerability": {
            "id": vuln_id,
            "severity": severity,
            "description": description,
            "dataSource": f"https://nvd.nist.gov/vuln/detail/{vuln_id}",
            "fix": {
                "state": "fixed" if fix_versions else "not-fixed",
                "versions": list(fix_versions),
            },
        },
        "artifact": {"name": name, "version": version, "type": "npm"},
    }


@pytest.fixture
def grype_document():
    """Decoded grype JSON report with one finding per bucket plus a second high."""
    return {
        "matches": [
            _match("CVE-2024-0004", "Low", name="zlib", version="1.2.11"),
            _match("CVE-2024-0001", "Critical", name="openssl", version="3.0.0", fix_versions=("3.0.7",),
                   description="Buffer overflow in X.509 certificate verification"),
            _match("CVE-2024-0003", "Medium", name="curl", version="7.80.0"),
            _match("CVE-2024-0002", "High", name="libxml2", version="2.9.10", fix_versions=("2.9.14", "2.10.3")),
            _match("GHSA-aaaa-bbbb-cccc", "high", name="lodash", version="4.17.20"),
            _match("CVE-2024-0005", "Negligible", name="bash", version="5.1"),
        ],
        "descriptor": {
            "name": "grype",
            "version": "0.87.0",
            "db": {
                "built": "2026-01-29T01:02:03Z",
                "status": {"built": "2026-01-30T12:34:56Z"},
            },
        },
    }


@pytest.fixture
def grype_report_file(tmp_path, grype_document):
    """grype JSON report written to disk."""
    path = tmp_path / "grype-output.json"
    path.write_text(json.dumps(grype_document), encoding="utf-8")
    return path


@pytest.fixture
def sample_report(grype_document):
    """ScanReport parsed from grype_document."""
    return ScanReport.from_dict(grype_document)


@pytest.fixture
def empty_report():
    """Clean scan report."""
    return ScanReport(grype_version="0.87.0", db_built_status="2026-01-30T12:34:56Z")


@pytest.fixture
def sample_stats():
    """Counts matching grype_document."""
    return VulnerabilityStats(total=6, critical=1, high=2, medium=1, low=1, other=1)


@pytest.fixture
def sample_match():
    """Single critical finding."""
    return VulnerabilityMatch(
        id="CVE-2024-0001",
        severity="Critical",
        description="Buffer overflow",
        data_source="https://nvd.nist.gov/vuln/detail/CVE-2024-0001",
        fix_state="fixed",
        fix_versions=("3.0.7",),
        package_name="openssl",
        package_version="3.0.0",
        package_type="deb",
    )


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    """Isolate git from the user's global configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    return home


def run_git(repo, *args):
    return subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True)


@pytest.fixture
def git_cmd():
    """Run a git command in a repository, failing the test on error."""
    return run_git


@pytest.fixture
def git_repo(tmp_path, git_env):
    """
    Repository with two tagged commits.

    v1.0.0 has version.txt = "1.0.0", v2.0.0 has version.txt = "2.0.0",
    and HEAD is at v2.0.0.
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")

    for version in ("1.0.0", "2.0.0"):
        (repo / "version.txt").write_text(version)
        run_git(repo, "add", "version.txt")
        run_git(repo, "commit", "-q", "-m", f"release {version}")
        run_git(repo, "tag", f"v{version}")

    return repo
