"""
Workspace path handling for files the action writes.

Relative destinations are anchored in the GitHub workspace and checked so
that inputs such as ``../../etc/passwd`` cannot escape it.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from constants import CONTAINER_WORKSPACE
from core.exceptions import OutputException, PathTraversalException

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def resolve_destination_path(
    dest: PathLike,
    github_workspace: str = "",
    container_workspace: PathLike = CONTAINER_WORKSPACE,
) -> tuple[Path, Optional[Path]]:
    """
    Turn a user-supplied output path into an absolute path.

    Relative paths are resolved, in order, against the container workspace
    mount (when it exists), the GITHUB_WORKSPACE value, or the current
    working directory.

    Args:
        dest: Destination from the output-file input
        github_workspace: Value of GITHUB_WORKSPACE, empty if unset
        container_workspace: Mount point used by Docker container actions

    Returns:
        Tuple of (absolute destination, workspace used). The workspace is
        None for absolute inputs and for the cwd fallback.
    """
    dest_path = Path(dest)
    if dest_path.is_absolute():
        return dest_path, None

    container = Path(container_workspace)
    if container.exists():
        return container / dest_path, container

    if github_workspace:
        workspace = Path(github_workspace)
        return workspace / dest_path, workspace

    return Path(os.path.abspath(dest_path)), None


def validate_path_in_workspace(dest: PathLike, workspace: PathLike) -> None:
    """
    Ensure dest lies inside workspace.

    Both paths are normalized lexically (``..`` collapsed, no symlink
    resolution) before comparison.

    Raises:
        PathTraversalException: If dest is outside workspace
    """
    abs_dest = os.path.abspath(os.path.normpath(str(dest)))
    abs_workspace = os.path.abspath(os.path.normpath(str(workspace)))

    rel_path = os.path.relpath(abs_dest, abs_workspace)
    if rel_path == ".." or rel_path.startswith(".." + os.sep):
        raise PathTraversalException(str(dest), str(workspace))


def copy_output_file(
    src: PathLike,
    dest: PathLike,
    github_workspace: str = "",
    container_workspace: PathLike = CONTAINER_WORKSPACE,
) -> Path:
    """
    Copy the scanner's JSON report to the user-requested location.

    Args:
        src: Scratch report written by grype
        dest: Destination from the output-file input
        github_workspace: Value of GITHUB_WORKSPACE, empty if unset
        container_workspace: Mount point used by Docker container actions

    Returns:
        Absolute path of the copy

    Raises:
        PathTraversalException: If a relative dest escapes the workspace
        OutputException: If the file cannot be written
    """
    resolved, workspace = resolve_destination_path(dest, github_workspace, container_workspace)

    if workspace is not None:
        validate_path_in_workspace(resolved, workspace)

    try:
        resolved.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, resolved)
    except OSError as e:
        raise OutputException("output file", str(e)) from e

    logger.debug(f"Copied {src} to {resolved}")
    return resolved


__all__ = [
    "resolve_destination_path",
    "validate_path_in_workspace",
    "copy_output_file",
]
