"""
Centralized configuration constants for grypeme.

This module provides a single source of truth for configuration values
that are used across multiple modules, making them easier to update
and maintain.
"""

# ============================================================================
# Scan Modes
# ============================================================================

SCAN_MODE_LATEST_RELEASE = "latest_release"
"""Repository scan of the newest stable tag (the default)."""

SCAN_MODE_HEAD = "head"
"""Repository scan of the current checkout, as-is."""

SEVERITY_CUTOFFS = ("critical", "high", "medium", "low", "negligible")
"""Accepted values for the severity-cutoff input."""

DEFAULT_SEVERITY_CUTOFF = "medium"
"""Cutoff used when the input is empty or unrecognised."""

DEFAULT_VARIABLE_PREFIX = "GRYPE_"
"""Prefix for variables written to GITHUB_ENV."""

# ============================================================================
# External Tools
# ============================================================================

GRYPE_BINARY = "grype"
"""Scanner executable looked up on PATH."""

GIT_BINARY = "git"
"""Git executable looked up on PATH."""

WORKTREE_PREFIX = "grype-scan-"
"""Prefix for temporary worktree directories."""

SCAN_OUTPUT_FILENAME = "grype-output.json"
"""Name of the scratch report inside the run's temporary directory."""

# ============================================================================
# GitHub Actions Environment
# ============================================================================

INPUT_PREFIX = "INPUT_"
"""GitHub Actions exposes action inputs as INPUT_<NAME> variables."""

CONTAINER_WORKSPACE = "/github/workspace"
"""Workspace mount point inside Docker container actions."""

# ============================================================================
# Timeouts (in seconds)
# ============================================================================

API_REQUEST_TIMEOUT = 30
"""Timeout for the gist API request (30 seconds)."""

# ============================================================================
# External Service URLs
# ============================================================================

GITHUB_API_BASE = "https://api.github.com"
"""Base URL of the GitHub REST API."""

GITHUB_API_VERSION = "2022-11-28"
"""Value for the X-GitHub-Api-Version header."""

SHIELDS_BADGE_BASE = "https://img.shields.io/badge"
"""shields.io static badge endpoint."""

SHIELDS_ENDPOINT_BASE = "https://img.shields.io/endpoint"
"""shields.io dynamic endpoint badge, fed from a JSON URL."""

PROJECT_URL = "https://github.com/TomTonic/grype_me"
"""Link placed in the footer of generated reports."""

# ============================================================================
# Report Formatting
# ============================================================================

REPORT_DESCRIPTION_WIDTH = 80
"""Maximum description length in the report table, ellipsis included."""

GIST_ERROR_BODY_LIMIT = 200
"""Characters of an error response body kept in GistAPIException."""

NO_FIX_PLACEHOLDER = "—"
"""Shown in the Fixed column when no fix version is known."""
