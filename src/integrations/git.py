"""
Git operations for repository-based scanning.

Finds the latest stable release tag and checks refs out into throwaway
worktrees so that scanning a tag never touches the caller's checkout.
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Union

from constants import GIT_BINARY, WORKTREE_PREFIX
from core.exceptions import GitException, NoTagsException, WorktreeException
from core.models import OperationResult
from utils.validation import validate_ref_name

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _git(args: list[str], repo_dir: Optional[PathLike] = None, **kwargs) -> subprocess.CompletedProcess:
    return subprocess.run([GIT_BINARY, *args], cwd=repo_dir, **kwargs)


def _describe(error: subprocess.CalledProcessError) -> str:
    stderr = (error.stderr or "").strip() if isinstance(error.stderr, str) else ""
    if stderr:
        return f"exit status {error.returncode}: {stderr}"
    return f"exit status {error.returncode}"


def is_pre_release_tag(tag: str) -> bool:
    """
    Check if a tag follows pre-release versioning conventions.

    A tag is a pre-release when a hyphen follows a version made only of
    digits and dots (``v1.0.0-alpha``, ``1.2.3-rc.1``). Tags whose prefix is
    not numeric, such as ``release-1.0``, are not pre-releases.

    Examples:
        >>> is_pre_release_tag("v1.0.0-rc1")
        True
        >>> is_pre_release_tag("release-1.0")
        False
    """
    normalized = tag
    if normalized.startswith("v"):
        normalized = normalized[1:]
    if normalized.startswith("V"):
        normalized = normalized[1:]

    version_part, sep, suffix = normalized.partition("-")
    if not sep:
        return False

    if any(char != "." and not ("0" <= char <= "9") for char in version_part):
        return False

    return bool(version_part) and bool(suffix)


def configure_safe_directory(cwd: PathLike, workspace: str = "") -> OperationResult:
    """
    Mark the checkout as a git safe.directory.

    Container actions run as a different user than the one owning the
    workspace, and git refuses to operate on such repositories otherwise.
    """
    try:
        _git(["config", "--global", "--add", "safe.directory", str(cwd)], check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        return OperationResult.failure(f"failed to configure git safe.directory: {_describe(e)}")
    except OSError as e:
        return OperationResult.failure(f"failed to configure git safe.directory: {e}")

    if workspace and workspace != str(cwd):
        # Workspace entry is optional; the cwd entry above is what matters
        _git(["config", "--global", "--add", "safe.directory", workspace], capture_output=True)

    return OperationResult.success()


def fetch_tags(repo_dir: Optional[PathLike] = None) -> OperationResult:
    """Fetch all tags from the remote so the newest release is known locally."""
    logger.info("Fetching tags...")
    try:
        _git(["fetch", "--tags", "--force"], repo_dir, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        return OperationResult.failure(f"Could not fetch tags: {_describe(e)}")
    except OSError as e:
        return OperationResult.failure(f"Could not fetch tags: {e}")
    return OperationResult.success()


def list_tags(repo_dir: Optional[PathLike] = None) -> list[str]:
    """
    List tags, highest semantic version first.

    Raises:
        GitException: If git cannot list tags
    """
    try:
        result = _git(["tag", "--sort=-v:refname"], repo_dir, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        raise GitException(f"failed to list tags: {_describe(e)}") from e
    except OSError as e:
        raise GitException(f"failed to list tags: {e}") from e

    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def latest_release_tag(repo_dir: Optional[PathLike] = None) -> str:
    """
    Return the latest stable release tag.

    Tags are taken in descending version order and the first one that is
    not a pre-release wins. If every tag is a pre-release the highest one is
    used and a warning is logged.

    Raises:
        GitException: If git is missing or tags cannot be listed
        NoTagsException: If the repository has no tags
    """
    if shutil.which(GIT_BINARY) is None:
        raise GitException("git not found in PATH")

    fetched = fetch_tags(repo_dir)
    if not fetched.ok:
        logger.warning(fetched.error)

    tags = list_tags(repo_dir)
    if not tags:
        raise NoTagsException()

    for tag in tags:
        if not is_pre_release_tag(tag):
            return tag

    logger.warning(f"All tags appear to be pre-release. Using: {tags[0]}")
    return tags[0]


def checkout_worktree(ref: str, repo_dir: Optional[PathLike] = None) -> Path:
    """
    Check a ref out into a new temporary worktree in detached HEAD mode.

    Args:
        ref: Tag or branch name
        repo_dir: Repository to add the worktree to (defaults to cwd)

    Returns:
        Path of the worktree directory; the caller owns its cleanup

    Raises:
        InvalidRefException: If the ref fails validation
        WorktreeException: If git cannot create the worktree
    """
    validate_ref_name(ref)

    worktree_dir = Path(tempfile.mkdtemp(prefix=WORKTREE_PREFIX))
    logger.info(f"Creating temporary worktree at {worktree_dir} for ref {ref}")

    try:
        _git(
            ["worktree", "add", "--detach", str(worktree_dir), ref],
            repo_dir,
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, OSError) as e:
        shutil.rmtree(worktree_dir, ignore_errors=True)
        reason = _describe(e) if isinstance(e, subprocess.CalledProcessError) else str(e)
        raise WorktreeException(ref, f"failed to create worktree: {reason}") from e

    return worktree_dir


def cleanup_worktree(worktree_dir: Optional[PathLike], repo_dir: Optional[PathLike] = None) -> OperationResult:
    """
    Remove a temporary worktree and its directory.

    Deregistration and directory removal are both attempted; failures are
    reported in the result, never raised.
    """
    if not worktree_dir:
        return OperationResult.success()

    logger.info(f"Cleaning up temporary worktree at {worktree_dir}")
    errors = []

    try:
        _git(["worktree", "remove", "--force", str(worktree_dir)], repo_dir, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        errors.append(f"git worktree remove failed: {_describe(e)}")
    except OSError as e:
        errors.append(f"git worktree remove failed: {e}")

    try:
        shutil.rmtree(worktree_dir)
    except FileNotFoundError:
        pass
    except OSError as e:
        errors.append(f"failed to remove worktree directory: {e}")

    if errors:
        return OperationResult.failure(*errors)
    return OperationResult.success()


__all__ = [
    "is_pre_release_tag",
    "configure_safe_directory",
    "fetch_tags",
    "list_tags",
    "latest_release_tag",
    "checkout_worktree",
    "cleanup_worktree",
]
