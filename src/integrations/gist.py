"""
GitHub Gist integration.

Writes the badge JSON and Markdown report into an existing gist, so that a
shields.io endpoint badge can read the latest result without a separate
badge action.
"""

import logging
import re
from typing import Mapping, Optional

import requests

from constants import (
    API_REQUEST_TIMEOUT,
    GIST_ERROR_BODY_LIMIT,
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    SHIELDS_ENDPOINT_BASE,
)
from core.exceptions import GistAPIException
from core.models import GistResult
from utils.formatting import truncate

logger = logging.getLogger(__name__)

_RAW_SEGMENT = "/raw/"


def strip_commit_hash(raw_url: str) -> str:
    """
    Remove the commit hash from a gist raw URL so it always serves the latest revision.

    Examples:
        >>> strip_commit_hash("https://gist.githubusercontent.com/u/id/raw/abcdef/f.json")
        'https://gist.githubusercontent.com/u/id/raw/f.json'
    """
    idx = raw_url.find(_RAW_SEGMENT)
    if idx < 0:
        return raw_url

    prefix = raw_url[: idx + len(_RAW_SEGMENT)]
    rest = raw_url[idx + len(_RAW_SEGMENT):]

    _, sep, filename = rest.partition("/")
    if not sep:
        return raw_url
    return prefix + filename


def build_endpoint_badge_url(raw_url: str) -> str:
    """shields.io endpoint URL reading badge JSON from a gist."""
    return f"{SHIELDS_ENDPOINT_BASE}?url={strip_commit_hash(raw_url)}"


def build_gist_file_anchor(filename: str) -> str:
    """
    Anchor GitHub assigns to a file on a rendered gist page.

    Examples:
        >>> build_gist_file_anchor("grype_me-action_release.md")
        'file-grype-me-action-release-md'
    """
    slug = re.sub(r"[^a-z0-9-]", "-", filename.lower())
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    if not slug:
        return ""
    return f"file-{slug}"


def default_gist_filenames(custom_base: str, scan_mode: str) -> tuple[str, str, str]:
    """
    Filenames for badge JSON, Markdown report and raw grype JSON.

    Args:
        custom_base: gist-filename input, may be empty
        scan_mode: Scan mode label used when no base is given

    Returns:
        Tuple of (badge, report, grype) filenames
    """
    base = custom_base or f"grype-{scan_mode}"
    return f"{base}.json", f"{base}.md", f"{base}-grype.json"


class GistClient:
    """Client for updating files in a GitHub Gist."""

    def __init__(self, token: str, base_url: str = GITHUB_API_BASE, timeout: float = API_REQUEST_TIMEOUT):
        """
        Initialize gist client.

        Args:
            token: GitHub token with gist scope
            base_url: API base URL
            timeout: Request timeout in seconds
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def update_gist(
        self,
        gist_id: str,
        badge_filename: str,
        report_filename: str,
        files: Mapping[str, str],
    ) -> GistResult:
        """
        Write files to a gist and return the resulting URLs.

        Args:
            gist_id: ID of an existing gist
            badge_filename: Key in files holding the shields.io badge JSON
            report_filename: Key in files holding the Markdown report
            files: Filename to content for every file to write

        Returns:
            GistResult with the gist, badge and report URLs

        Raises:
            GistAPIException: On transport errors, non-2xx responses, or an
                undecodable response body
        """
        url = f"{self.base_url}/gists/{gist_id}"
        payload = {"files": {name: {"content": content} for name, content in files.items()}}

        logger.debug(f"Updating gist {gist_id} with {len(files)} file(s)")

        try:
            response = requests.patch(url, json=payload, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise GistAPIException(f"gist API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise GistAPIException(truncate(response.text, GIST_ERROR_BODY_LIMIT), response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise GistAPIException(f"failed to parse gist response: {e}") from e
        if not isinstance(body, dict):
            raise GistAPIException("failed to parse gist response: expected a JSON object")

        return self._build_result(body, badge_filename, report_filename)

    @staticmethod
    def _build_result(body: dict, badge_filename: str, report_filename: str) -> GistResult:
        html_url = body.get("html_url") or ""
        gist_files = body.get("files") or {}
        if not isinstance(html_url, str):
            raise GistAPIException("failed to parse gist response: html_url is not a string")
        if not isinstance(gist_files, dict):
            raise GistAPIException("failed to parse gist response: files is not an object")

        badge_url = ""
        badge_info: Optional[dict] = gist_files.get(badge_filename)
        if badge_info is not None and not isinstance(badge_info, dict):
            raise GistAPIException(f"failed to parse gist response: entry for {badge_filename} is not an object")
        raw_url = badge_info.get("raw_url") if badge_info else None
        if isinstance(raw_url, str) and raw_url:
            badge_url = build_endpoint_badge_url(raw_url)

        report_url = ""
        anchor = build_gist_file_anchor(report_filename)
        if report_filename in gist_files and html_url and anchor:
            report_url = f"{html_url}#{anchor}"

        return GistResult(gist_url=html_url, badge_url=badge_url, report_url=report_url)


__all__ = [
    "strip_commit_hash",
    "build_endpoint_badge_url",
    "build_gist_file_anchor",
    "default_gist_filenames",
    "GistClient",
]
