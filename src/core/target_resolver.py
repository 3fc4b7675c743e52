"""
Scan target resolution.

Turns the mutually exclusive image/path/sbom/scan inputs into exactly one
ScanTarget, checking out a worktree when a git ref has to be scanned.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from constants import SCAN_MODE_HEAD, SCAN_MODE_LATEST_RELEASE
from core.config import ActionConfig
from core.exceptions import ConfigurationConflictException, NotFoundException
from core.models import ScanTarget, TargetKind
from integrations import git

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def count_non_empty(*values: str) -> int:
    """Count the values that are set."""
    return sum(1 for value in values if value)


def validate_artifact_modes(config: ActionConfig) -> None:
    """
    Check that at most one artifact mode is set, and not together with scan.

    Raises:
        ConfigurationConflictException: If inputs conflict
    """
    artifact_modes = count_non_empty(config.image, config.path, config.sbom)

    if artifact_modes > 1:
        raise ConfigurationConflictException("only one of image, path, or sbom can be specified")

    if artifact_modes > 0 and config.scan:
        raise ConfigurationConflictException("scan cannot be used together with image, path, or sbom")


def build_path_target(path: str) -> ScanTarget:
    """
    Build a dir: or file: target for a local path.

    Raises:
        NotFoundException: If the path does not exist
    """
    if not os.path.exists(path):
        raise NotFoundException(path)

    if os.path.isdir(path):
        return ScanTarget(TargetKind.DIRECTORY, path)
    return ScanTarget(TargetKind.FILE, path)


def artifact_target(config: ActionConfig) -> Optional[ScanTarget]:
    """Target for image/path/sbom mode, or None when none of them is set."""
    if config.image:
        return ScanTarget(TargetKind.IMAGE, config.image)
    if config.path:
        return build_path_target(config.path)
    if config.sbom:
        return ScanTarget(TargetKind.SBOM, config.sbom)
    return None


def repository_target(scan_mode: str, repo_dir: Optional[PathLike] = None) -> tuple[ScanTarget, Optional[Path]]:
    """
    Target for repository mode: latest_release, head, or an explicit ref.

    Returns:
        Tuple of (target, worktree directory or None)
    """
    logger.info(f"Repository scan mode: {scan_mode}")
    mode = scan_mode.lower()

    if mode == SCAN_MODE_HEAD:
        logger.info("Scanning current working directory (head mode)")
        return ScanTarget(TargetKind.DIRECTORY, str(repo_dir) if repo_dir else "."), None

    if mode == SCAN_MODE_LATEST_RELEASE:
        ref = git.latest_release_tag(repo_dir)
        logger.info(f"Found latest release: {ref}")
    else:
        ref = scan_mode
        logger.info(f"Checking out ref: {ref}")

    worktree_dir = git.checkout_worktree(ref, repo_dir)
    return ScanTarget(TargetKind.DIRECTORY, str(worktree_dir)), worktree_dir


def resolve_scan_target(
    config: ActionConfig,
    repo_dir: Optional[PathLike] = None,
) -> tuple[ScanTarget, Optional[Path]]:
    """
    Work out what to scan.

    Args:
        config: Action configuration
        repo_dir: Repository used for ref scans (defaults to cwd)

    Returns:
        Tuple of (target, temporary worktree to clean up or None)

    Raises:
        ConfigurationConflictException: If scan modes conflict
        NotFoundException: If a path input does not exist
        GitException: If the release or ref cannot be checked out
        InvalidRefException: If the ref is unsafe
    """
    validate_artifact_modes(config)

    target = artifact_target(config)
    if target is not None:
        return target, None

    scan_mode = config.scan.strip() or SCAN_MODE_LATEST_RELEASE

    if scan_mode.lower() != SCAN_MODE_HEAD:
        configured = git.configure_safe_directory(repo_dir or os.getcwd(), config.github_workspace)
        if not configured.ok:
            logger.warning(configured.error)

    return repository_target(scan_mode, repo_dir)


__all__ = [
    "count_non_empty",
    "validate_artifact_modes",
    "build_path_target",
    "artifact_target",
    "repository_target",
    "resolve_scan_target",
]
