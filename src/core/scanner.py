"""
Grype scanner invocation.

Runs the grype binary against a ScanTarget and writes its JSON report to a
file. Grype exits non-zero when it finds vulnerabilities, so success is
judged by whether the report was produced, not by the exit code.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from constants import GRYPE_BINARY
from core.exceptions import DatabaseUpdateException, ScanFailedException
from core.models import ScanTarget

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GrypeScanner:
    """
    Thin wrapper around the grype command line.

    Grype's own progress output goes straight to the action log.
    """

    def __init__(self, binary: str = GRYPE_BINARY):
        """
        Initialize scanner.

        Args:
            binary: grype executable name or path
        """
        self.binary = binary

    def build_args(self, target: ScanTarget, output_path: PathLike, only_fixed: bool = False) -> list[str]:
        """Command line for a JSON scan of target written to output_path."""
        args = [self.binary, target.argument, "-o", "json", "--file", str(output_path)]
        if only_fixed:
            args.append("--only-fixed")
        return args

    def update_database(self) -> None:
        """
        Update the grype vulnerability database.

        Raises:
            DatabaseUpdateException: If the update fails
        """
        logger.info("Updating Grype vulnerability database...")
        try:
            subprocess.run([self.binary, "db", "update"], check=True)
        except subprocess.CalledProcessError as e:
            raise DatabaseUpdateException(f"grype db update exited with status {e.returncode}") from e
        except OSError as e:
            raise DatabaseUpdateException(str(e)) from e
        logger.info("Database update complete")

    def run(self, target: ScanTarget, output_path: PathLike, only_fixed: bool = False) -> Path:
        """
        Scan target and write grype's JSON report to output_path.

        Args:
            target: What to scan
            output_path: Report destination, should not exist yet
            only_fixed: Pass --only-fixed to grype

        Returns:
            Path of the report

        Raises:
            ScanFailedException: If grype cannot be started or leaves no report
        """
        output_path = Path(output_path)
        logger.info("Running grype scan...")

        try:
            result = subprocess.run(self.build_args(target, output_path, only_fixed))
        except OSError as e:
            raise ScanFailedException(str(target), f"could not run {self.binary}: {e}") from e

        if not report_exists(output_path):
            raise ScanFailedException(
                str(target),
                f"{self.binary} exited with status {result.returncode} and wrote no report",
            )

        if result.returncode != 0:
            logger.info("Grype scan completed (vulnerabilities found)")
        else:
            logger.info("Grype scan completed")
        return output_path


def report_exists(path: Optional[PathLike]) -> bool:
    """True when the report file exists and is non-empty."""
    if not path:
        return False
    try:
        return os.path.getsize(path) > 0
    except OSError:
        return False


__all__ = ["GrypeScanner", "report_exists"]
