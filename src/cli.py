"""
Command-line entry point for grypeme - Grype vulnerability scan action.

Inside GitHub Actions all inputs arrive as INPUT_* environment variables.
The same options are available as flags for local runs; flags take
precedence over the environment.
"""

import argparse
import dataclasses
import logging
import os
import sys
from typing import Mapping, Optional

from constants import SCAN_MODE_HEAD, SCAN_MODE_LATEST_RELEASE, SEVERITY_CUTOFFS
from core.config import ActionConfig
from core.exceptions import GrypeMeException
from core.orchestrator import ActionOrchestrator

logger = logging.getLogger(__name__)


class ActionLogFormatter(logging.Formatter):
    """Prefixes warnings and errors the way the Actions log expects."""

    PREFIXES = {
        logging.WARNING: "Warning: ",
        logging.ERROR: "Error: ",
        logging.CRITICAL: "Error: ",
    }

    def format(self, record: logging.LogRecord) -> str:
        return self.PREFIXES.get(record.levelno, "") + super().format(record)


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(debug: bool = False):
    """Configure logging: errors to stderr, everything else to stdout."""
    formatter = ActionLogFormatter("%(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_BelowLevelFilter(logging.ERROR))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.ERROR)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments. Unset flags stay None."""
    parser = argparse.ArgumentParser(
        prog="grypeme",
        description="Scan a repository, image, path or SBOM with grype and publish the results.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    target_group = parser.add_argument_group("scan target (mutually exclusive)")
    scan_group = parser.add_argument_group("scan options")
    output_group = parser.add_argument_group("outputs")

    target_group.add_argument(
        "--scan",
        help=f"Repository mode: {SCAN_MODE_LATEST_RELEASE}, {SCAN_MODE_HEAD}, or a tag/branch name.",
    )
    target_group.add_argument("--image", help="Container image reference.")
    target_group.add_argument("--path", help="Local directory or file.")
    target_group.add_argument("--sbom", help="SBOM file.")

    scan_group.add_argument("--fail-build", action="store_true", default=None, help="Fail on findings at or above the cutoff.")
    scan_group.add_argument("--severity-cutoff", choices=SEVERITY_CUTOFFS, help="Severity that fails the build.")
    scan_group.add_argument("--only-fixed", action="store_true", default=None, help="Only report fixable vulnerabilities.")
    scan_group.add_argument("--db-update", action="store_true", default=None, help="Update the grype database first.")

    output_group.add_argument("--output-file", help="Save the JSON report here.")
    output_group.add_argument("--description", help="Text added to the Markdown report.")
    output_group.add_argument("--gist-id", help="Gist to write badge and report to (token from INPUT_GIST-TOKEN).")
    output_group.add_argument("--gist-filename", help="Base filename for gist files.")
    output_group.add_argument("--variable-prefix", help="Prefix for GITHUB_ENV variables.")

    parser.add_argument("-v", "--debug", action="store_true", default=None, help="Enable debug logging.")

    return parser.parse_args(args)


def build_config(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> ActionConfig:
    """Environment-sourced config with any given flags applied on top."""
    config = ActionConfig.from_env(environ)
    overrides = {
        field.name: getattr(args, field.name)
        for field in dataclasses.fields(ActionConfig)
        if getattr(args, field.name, None) is not None
    }
    return dataclasses.replace(config, **overrides)


def main(args: Optional[list[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    environ = os.environ
    setup_logging(False)

    try:
        config = build_config(parse_args(args), environ)
        setup_logging(config.debug)
        ActionOrchestrator(config, environ=environ).run()
    except (GrypeMeException, OSError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
