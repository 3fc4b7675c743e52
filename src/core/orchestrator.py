"""
Orchestrates one action run: resolve target, scan, publish results.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from constants import SCAN_OUTPUT_FILENAME
from core.config import ActionConfig, determine_scan_mode
from core.exceptions import GistAPIException, VulnerabilityThresholdException
from core.models import GistResult, ScanReport, ScanTarget, VulnerabilityStats
from core.results import aggregate, parse_report, should_fail
from core.scanner import GrypeScanner
from core.target_resolver import resolve_scan_target
from integrations import git
from integrations.gist import GistClient, default_gist_filenames
from outputs.action_outputs import (
    build_environment_variables,
    build_step_outputs,
    format_summary,
    write_environment_variables,
    write_step_outputs,
)
from outputs.badge import build_badge_label, generate_badge_json, generate_badge_url
from outputs.report import generate_report
from utils.logging_helpers import log_environment
from utils.workspace import copy_output_file

logger = logging.getLogger(__name__)


class ActionOrchestrator:
    """
    Orchestrates the workflow from configuration to published outputs.
    """

    def __init__(
        self,
        config: ActionConfig,
        scanner: Optional[GrypeScanner] = None,
        gist_client: Optional[GistClient] = None,
        repo_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Action configuration
            scanner: Scanner to use (defaults to grype on PATH)
            gist_client: Gist client (built from the gist token when omitted)
            repo_dir: Repository for ref scans (defaults to cwd)
            environ: Environment shown by the debug dump
        """
        self.config = config
        self.scanner = scanner or GrypeScanner()
        self.gist_client = gist_client
        self.repo_dir = repo_dir
        self.environ = environ if environ is not None else os.environ
        self.scan_mode = determine_scan_mode(config)

    def run(self) -> VulnerabilityStats:
        """
        Execute the scan workflow.

        Returns:
            Aggregated vulnerability counts

        Raises:
            GrypeMeException: On any fatal error, including fail-build
        """
        if self.config.debug:
            log_environment(self.environ, logger=logger)

        target, worktree_dir = resolve_scan_target(self.config, self.repo_dir)
        try:
            logger.info(f"Grype scan target: {target}")

            if self.config.db_update:
                self.scanner.update_database()

            report, raw_json, json_output = self._execute_scan(target)
        finally:
            if worktree_dir is not None:
                cleaned = git.cleanup_worktree(worktree_dir, self.repo_dir)
                if not cleaned.ok:
                    logger.warning(cleaned.error)

        return self._process_results(report, raw_json, json_output)

    def _execute_scan(self, target: ScanTarget) -> tuple[ScanReport, str, str]:
        """Scan into a scratch file, parse it, and copy it out if requested."""
        with tempfile.TemporaryDirectory(prefix="grype-output-") as scratch:
            output_path = Path(scratch) / SCAN_OUTPUT_FILENAME
            self.scanner.run(target, output_path, only_fixed=self.config.only_fixed)

            report = parse_report(output_path)
            raw_json = output_path.read_text(encoding="utf-8")

            json_output = ""
            if self.config.output_file:
                copied = copy_output_file(output_path, self.config.output_file, self.config.github_workspace)
                json_output = str(copied)
                logger.info(f"Scan results saved to: {json_output}")

        return report, raw_json, json_output

    def _process_results(self, report: ScanReport, raw_json: str, json_output: str) -> VulnerabilityStats:
        """Publish badge, report and outputs, then apply fail-build."""
        stats = aggregate(report)

        gist_result = self._publish_to_gist(report, stats, raw_json) if self.config.gist_enabled else None

        badge_url = gist_result.badge_url if gist_result and gist_result.badge_url else ""
        if not badge_url:
            label = build_badge_label(report.grype_version)
            badge_url = generate_badge_url(stats, label, report.db_built, self.scan_mode)

        outputs = build_step_outputs(
            stats,
            report,
            badge_url,
            json_path=json_output,
            report_url=gist_result.report_url if gist_result else "",
        )
        write_step_outputs(outputs, self.config.github_output)
        write_environment_variables(
            self.config.variable_prefix,
            build_environment_variables(stats, report, badge_url),
            self.config.github_env,
        )

        logger.info(format_summary(stats, report))

        if self.config.fail_build and should_fail(stats, self.config.severity_cutoff):
            raise VulnerabilityThresholdException(self.config.severity_cutoff)

        return stats

    def _publish_to_gist(self, report: ScanReport, stats: VulnerabilityStats, raw_json: str) -> Optional[GistResult]:
        """
        Write badge JSON, report and raw scanner output to the gist.

        A failed update is logged and yields None; the run carries on with
        the static badge.
        """
        badge_file, report_file, grype_file = default_gist_filenames(self.config.gist_filename, self.scan_mode)
        files = {
            badge_file: generate_badge_json(stats, report.grype_version, report.db_built, self.scan_mode),
            report_file: generate_report(report, stats, self.scan_mode, description=self.config.description),
        }
        if raw_json:
            files[grype_file] = raw_json

        client = self.gist_client or GistClient(self.config.gist_token)
        try:
            result = client.update_gist(self.config.gist_id, badge_file, report_file, files)
        except GistAPIException as e:
            logger.warning(f"failed to update gist: {e}")
            return None

        logger.info(f"Gist updated: {result.gist_url}")
        return result


__all__ = ["ActionOrchestrator"]
