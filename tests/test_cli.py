"""Tests for the command-line entry point."""

import logging
from unittest.mock import patch

import pytest

from cli import ActionLogFormatter, build_config, main, parse_args, setup_logging
from core.exceptions import ScanFailedException, VulnerabilityThresholdException
from core.models import VulnerabilityStats


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(level, message):
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


class TestActionLogFormatter:
    """Tests for log line prefixes."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            (logging.DEBUG, "msg"),
            (logging.INFO, "msg"),
            (logging.WARNING, "Warning: msg"),
            (logging.ERROR, "Error: msg"),
            (logging.CRITICAL, "Error: msg"),
        ],
    )
    def test_prefixes(self, level, expected):
        assert ActionLogFormatter("%(message)s").format(_record(level, "msg")) == expected


class TestSetupLogging:
    """Tests for stream routing."""

    def test_streams(self, capsys):
        """Test info and warnings go to stdout, errors to stderr."""
        setup_logging(False)
        log = logging.getLogger("grypeme.test")
        log.debug("hidden")
        log.info("plain")
        log.warning("careful")
        log.error("broken")

        captured = capsys.readouterr()
        assert "plain\n" in captured.out
        assert "Warning: careful\n" in captured.out
        assert "broken" not in captured.out
        assert "hidden" not in captured.out
        assert "Error: broken\n" in captured.err

    def test_debug_level(self):
        setup_logging(True)
        assert logging.getLogger().level == logging.DEBUG
        setup_logging(False)
        assert logging.getLogger().level == logging.INFO


class TestParseArgs:
    """Tests for argument parsing."""

    def test_unset_flags_are_none(self):
        """Test nothing overrides the environment by default."""
        args = parse_args([])
        assert args.scan is None
        assert args.fail_build is None
        assert args.severity_cutoff is None

    def test_flags(self):
        args = parse_args(["--image", "alpine", "--fail-build", "--severity-cutoff", "high", "-v"])
        assert args.image == "alpine"
        assert args.fail_build is True
        assert args.severity_cutoff == "high"
        assert args.debug is True

    def test_invalid_cutoff(self):
        with pytest.raises(SystemExit):
            parse_args(["--severity-cutoff", "extreme"])


class TestBuildConfig:
    """Tests for merging flags over environment inputs."""

    def test_environment_only(self):
        config = build_config(parse_args([]), {"INPUT_SCAN": "head", "INPUT_FAIL-BUILD": "true"})
        assert config.scan == "head"
        assert config.fail_build is True

    def test_flags_override_environment(self):
        environ = {"INPUT_IMAGE": "alpine", "INPUT_SEVERITY-CUTOFF": "low"}
        config = build_config(parse_args(["--image", "debian:12", "--severity-cutoff", "critical"]), environ)
        assert config.image == "debian:12"
        assert config.severity_cutoff == "critical"

    def test_token_only_from_environment(self):
        config = build_config(parse_args(["--gist-id", "abc"]), {"INPUT_GIST-TOKEN": "t"})
        assert config.gist_id == "abc"
        assert config.gist_token == "t"
        assert config.gist_enabled


class TestMain:
    """Tests for main's exit codes."""

    def test_success(self):
        with patch("cli.ActionOrchestrator") as orchestrator:
            orchestrator.return_value.run.return_value = VulnerabilityStats()
            assert main(["--image", "alpine"]) == 0
        config = orchestrator.call_args[0][0]
        assert config.image == "alpine"

    def test_action_error(self, capsys):
        """Test action errors become one Error: line and exit code 1."""
        with patch("cli.ActionOrchestrator") as orchestrator:
            orchestrator.return_value.run.side_effect = ScanFailedException("alpine", "no report")
            assert main(["--image", "alpine"]) == 1
        assert "Error: Failed to scan alpine: no report" in capsys.readouterr().err

    def test_threshold_exceeded(self, capsys):
        with patch("cli.ActionOrchestrator") as orchestrator:
            orchestrator.return_value.run.side_effect = VulnerabilityThresholdException("high")
            assert main(["--image", "alpine"]) == 1
        assert "vulnerabilities found at or above high severity" in capsys.readouterr().err

    def test_conflicting_inputs(self, tmp_path, capsys):
        """Test configuration conflicts fail without scanning."""
        assert main(["--image", "alpine", "--path", str(tmp_path)]) == 1
        assert "only one of image, path, or sbom" in capsys.readouterr().err
