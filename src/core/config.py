"""
Action configuration.

GitHub Actions passes inputs as environment variables with the INPUT_
prefix, upper-cased but keeping hyphens: the ``output-file`` input becomes
``INPUT_OUTPUT-FILE``. The environment is read exactly once, into an
ActionConfig that is passed down explicitly.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from constants import (
    DEFAULT_SEVERITY_CUTOFF,
    DEFAULT_VARIABLE_PREFIX,
    INPUT_PREFIX,
    SCAN_MODE_HEAD,
    SCAN_MODE_LATEST_RELEASE,
)
from utils.validation import normalize_severity_cutoff


def _input(environ: Mapping[str, str], name: str, default: str = "") -> str:
    value = environ.get(f"{INPUT_PREFIX}{name.upper()}", "")
    value = value.strip()
    return value if value else default


def _bool_input(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = _input(environ, name)
    if not value:
        return default
    return value.lower() == "true"


@dataclass(frozen=True)
class ActionConfig:
    """
    All inputs of one action run.

    Attributes:
        scan: Repository mode: latest_release, head, or a tag/branch name
        image: Container image reference to scan
        path: Local directory or file to scan
        sbom: SBOM file to scan
        fail_build: Exit non-zero when findings meet severity_cutoff
        severity_cutoff: critical, high, medium, low or negligible
        output_file: Where to save the raw JSON report
        only_fixed: Only report vulnerabilities with a known fix
        db_update: Run ``grype db update`` before scanning
        debug: Verbose logging and environment dump
        description: Free text placed in the Markdown report
        gist_token: Token with gist scope
        gist_id: Gist receiving badge JSON and report
        gist_filename: Base filename for gist files
        variable_prefix: Prefix for variables written to GITHUB_ENV
        github_output: Path of the GITHUB_OUTPUT file
        github_env: Path of the GITHUB_ENV file
        github_workspace: GITHUB_WORKSPACE directory
    """

    scan: str = ""
    image: str = ""
    path: str = ""
    sbom: str = ""
    fail_build: bool = False
    severity_cutoff: str = DEFAULT_SEVERITY_CUTOFF
    output_file: str = ""
    only_fixed: bool = False
    db_update: bool = False
    debug: bool = False
    description: str = ""
    gist_token: str = ""
    gist_id: str = ""
    gist_filename: str = ""
    variable_prefix: str = DEFAULT_VARIABLE_PREFIX
    github_output: str = ""
    github_env: str = ""
    github_workspace: str = ""

    @property
    def gist_enabled(self) -> bool:
        return bool(self.gist_token and self.gist_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ActionConfig":
        """
        Read action inputs and the relevant GITHUB_* variables.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Raises:
            ValidationException: If severity-cutoff is not a known severity
        """
        if environ is None:
            environ = os.environ

        return cls(
            scan=_input(environ, "scan"),
            image=_input(environ, "image"),
            path=_input(environ, "path"),
            sbom=_input(environ, "sbom"),
            fail_build=_bool_input(environ, "fail-build"),
            severity_cutoff=normalize_severity_cutoff(_input(environ, "severity-cutoff")),
            output_file=_input(environ, "output-file"),
            only_fixed=_bool_input(environ, "only-fixed"),
            db_update=_bool_input(environ, "db-update"),
            debug=_bool_input(environ, "debug"),
            description=environ.get(f"{INPUT_PREFIX}DESCRIPTION", ""),
            gist_token=_input(environ, "gist-token"),
            gist_id=_input(environ, "gist-id"),
            gist_filename=_input(environ, "gist-filename"),
            variable_prefix=_input(environ, "variable-prefix", DEFAULT_VARIABLE_PREFIX),
            github_output=environ.get("GITHUB_OUTPUT", ""),
            github_env=environ.get("GITHUB_ENV", ""),
            github_workspace=environ.get("GITHUB_WORKSPACE", ""),
        )


def determine_scan_mode(config: ActionConfig) -> str:
    """
    Short label for the kind of scan, used in badges, reports and gist names.

    Returns:
        image, path, sbom, release, head or ref
    """
    if config.image:
        return "image"
    if config.path:
        return "path"
    if config.sbom:
        return "sbom"

    scan = (config.scan.strip() or SCAN_MODE_LATEST_RELEASE).lower()
    if scan == SCAN_MODE_LATEST_RELEASE:
        return "release"
    if scan == SCAN_MODE_HEAD:
        return "head"
    return "ref"


__all__ = ["ActionConfig", "determine_scan_mode"]
