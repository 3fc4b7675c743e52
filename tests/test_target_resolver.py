"""Tests for scan target resolution."""

from pathlib import Path
from unittest.mock import patch

import pytest

from core.config import ActionConfig
from core.exceptions import ConfigurationConflictException, NotFoundException
from core.models import OperationResult, ScanTarget, TargetKind
from core.target_resolver import (
    build_path_target,
    count_non_empty,
    repository_target,
    resolve_scan_target,
    validate_artifact_modes,
)
from integrations.git import cleanup_worktree


class TestValidateArtifactModes:
    """Tests for mutually exclusive inputs."""

    def test_count_non_empty(self):
        assert count_non_empty("a", "", "b") == 2
        assert count_non_empty() == 0

    def test_single_mode_ok(self):
        validate_artifact_modes(ActionConfig(image="alpine"))
        validate_artifact_modes(ActionConfig(scan="head"))

    def test_two_artifacts(self):
        """Test image and path together."""
        with pytest.raises(ConfigurationConflictException) as exc:
            validate_artifact_modes(ActionConfig(image="alpine", path="."))
        assert "only one of image, path, or sbom" in str(exc.value)

    def test_artifact_with_scan(self):
        """Test scan together with an artifact."""
        with pytest.raises(ConfigurationConflictException) as exc:
            validate_artifact_modes(ActionConfig(sbom="s.json", scan="head"))
        assert "scan cannot be used together" in str(exc.value)


class TestBuildPathTarget:
    """Tests for build_path_target."""

    def test_directory(self, tmp_path):
        assert build_path_target(str(tmp_path)) == ScanTarget(TargetKind.DIRECTORY, str(tmp_path))

    def test_file(self, tmp_path):
        jar = tmp_path / "app.jar"
        jar.write_bytes(b"PK")
        assert build_path_target(str(jar)) == ScanTarget(TargetKind.FILE, str(jar))

    def test_missing(self, tmp_path):
        with pytest.raises(NotFoundException) as exc:
            build_path_target(str(tmp_path / "nope"))
        assert exc.value.field == "path"


class TestResolveScanTarget:
    """Tests for resolve_scan_target with git mocked out."""

    def test_image(self):
        target, worktree = resolve_scan_target(ActionConfig(image="alpine:3.19"))
        assert target == ScanTarget(TargetKind.IMAGE, "alpine:3.19")
        assert worktree is None

    def test_sbom(self):
        target, worktree = resolve_scan_target(ActionConfig(sbom="bom.spdx.json"))
        assert target.argument == "sbom:bom.spdx.json"
        assert worktree is None

    def test_path(self, tmp_path):
        target, worktree = resolve_scan_target(ActionConfig(path=str(tmp_path)))
        assert target.kind is TargetKind.DIRECTORY
        assert worktree is None

    def test_head_skips_git(self):
        """Test head mode scans the checkout without touching git."""
        with patch("integrations.git.configure_safe_directory") as safe, \
                patch("integrations.git.checkout_worktree") as checkout:
            target, worktree = resolve_scan_target(ActionConfig(scan="HEAD"))
        assert target == ScanTarget(TargetKind.DIRECTORY, ".")
        assert worktree is None
        safe.assert_not_called()
        checkout.assert_not_called()

    def test_head_uses_repo_dir(self, tmp_path):
        """Test head mode scans the given repository directory."""
        target, worktree = repository_target("head", tmp_path)
        assert target == ScanTarget(TargetKind.DIRECTORY, str(tmp_path))
        assert worktree is None

    def test_default_is_latest_release(self, tmp_path):
        """Test an empty scan input resolves the latest release."""
        with patch("integrations.git.configure_safe_directory", return_value=OperationResult.success()), \
                patch("integrations.git.latest_release_tag", return_value="v2.0.0") as latest, \
                patch("integrations.git.checkout_worktree", return_value=tmp_path) as checkout:
            target, worktree = resolve_scan_target(ActionConfig(), repo_dir=tmp_path)
        latest.assert_called_once_with(tmp_path)
        checkout.assert_called_once_with("v2.0.0", tmp_path)
        assert target == ScanTarget(TargetKind.DIRECTORY, str(tmp_path))
        assert worktree == tmp_path

    def test_explicit_ref(self, tmp_path):
        """Test a branch name is checked out as given."""
        with patch("integrations.git.configure_safe_directory", return_value=OperationResult.success()), \
                patch("integrations.git.latest_release_tag") as latest, \
                patch("integrations.git.checkout_worktree", return_value=tmp_path) as checkout:
            resolve_scan_target(ActionConfig(scan="feature/x"), repo_dir=tmp_path)
        latest.assert_not_called()
        checkout.assert_called_once_with("feature/x", tmp_path)

    def test_safe_directory_failure_is_warning(self, tmp_path, caplog):
        """Test safe.directory problems do not stop the scan."""
        with patch("integrations.git.configure_safe_directory", return_value=OperationResult.failure("denied")), \
                patch("integrations.git.checkout_worktree", return_value=tmp_path):
            target, _ = resolve_scan_target(ActionConfig(scan="v1.0.0"), repo_dir=tmp_path)
        assert target.location == str(tmp_path)
        assert "denied" in caplog.text

    def test_conflict_checked_first(self):
        with pytest.raises(ConfigurationConflictException):
            resolve_scan_target(ActionConfig(image="alpine", sbom="bom.json"))


class TestRepositoryTargetEndToEnd:
    """Repository modes against a real repository."""

    def test_latest_release_checks_out_newest_tag(self, git_repo, git_cmd):
        """Test the worktree holds the newest stable release, not HEAD."""
        (git_repo / "version.txt").write_text("unreleased")
        git_cmd(git_repo, "commit", "-q", "-am", "work in progress")

        target, worktree = resolve_scan_target(ActionConfig(scan="latest_release"), repo_dir=git_repo)
        try:
            assert target.kind is TargetKind.DIRECTORY
            assert Path(target.location) == worktree
            assert (worktree / "version.txt").read_text() == "2.0.0"
        finally:
            assert cleanup_worktree(worktree, git_repo).ok

    def test_explicit_tag(self, git_repo):
        """Test an older tag can be scanned."""
        target, worktree = repository_target("v1.0.0", git_repo)
        try:
            assert (Path(target.location) / "version.txt").read_text() == "1.0.0"
        finally:
            cleanup_worktree(worktree, git_repo)
